"""
FastAPI application for the portfolio blog and its post CRUD backend
"""
import time
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from .api_models import (
    ErrorResponse, HealthResponse, PaginatedResponse,
    error_response, paginated_response
)
from .comments import CommentTree
from .config import get_settings
from .database import PostCreate, PostRead, PostUpdate, init_db
from .dependencies import (
    get_blog_service, get_comment_tree, get_container,
    get_current_user_id, get_post_repository
)
from .exceptions import PortfolioBackendException
from .logging import configure_logging, logger, request_id_var
from .models import (
    BlogCategory, BlogPost, BlogPostSummary, Comment, CommentCreate,
    CommentReply, CommentThread, TagsResponse
)
from .repository import PostRepository
from .services import BlogService, PostListRequest

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = get_container()
    configure_logging(container.settings.log_level, container.settings.log_format)
    init_db(container.engine)

    posts = await container.blog_service.list_all()
    logger.info("Application started",
                version=container.settings.app_version,
                content_directory=str(container.settings.content_directory),
                posts_loaded=len(posts))
    yield
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Markdown blog, comments and authored post CRUD for a personal portfolio site.",
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "blog", "description": "Markdown posts, categories and tags"},
        {"name": "comments", "description": "Comment threads"},
        {"name": "posts", "description": "Authored posts stored in the database"},
        {"name": "admin", "description": "Administrative operations"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {404: {"model": ErrorResponse}}
OWNER_RESPONSES = {401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@app.middleware("http")
async def track_requests(request: Request, call_next):
    """Assign a request ID and log request duration"""
    request_id = str(uuid.uuid4())
    token = request_id_var.set(request_id)
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Request failed",
                         path=request.url.path,
                         method=request.method,
                         duration=time.time() - start_time)
        raise
    finally:
        request_id_var.reset(token)

    response.headers["X-Request-ID"] = request_id
    logger.info("Request completed",
                request_id=request_id,
                path=request.url.path,
                method=request.method,
                status_code=response.status_code,
                duration=time.time() - start_time)
    return response


@app.exception_handler(PortfolioBackendException)
async def portfolio_exception_handler(request: Request, exc: PortfolioBackendException):
    """Map typed failures to JSON error bodies"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            exc.code,
            exc.message,
            details=exc.details,
            request_id=request_id_var.get()
        ).model_dump(mode="json")
    )


# Blog

@app.get("/blog/posts", response_model=PaginatedResponse[BlogPostSummary], tags=["blog"])
async def list_posts(
    category: Optional[str] = Query(None, description="Category name, or 'all'"),
    q: Optional[str] = Query(None, description="Text matched against title, excerpt and tags"),
    tag: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    blog_service: BlogService = Depends(get_blog_service)
):
    """List blog posts newest first, filtered by category and search text"""
    request = PostListRequest(category=category, query=q, tag=tag, offset=offset, limit=limit)
    posts, total = await blog_service.list_posts(request)
    return paginated_response(items=posts, offset=offset, limit=limit, total=total)


@app.get("/blog/posts/{slug}", response_model=BlogPost, responses=ERROR_RESPONSES, tags=["blog"])
async def get_post(slug: str, blog_service: BlogService = Depends(get_blog_service)):
    return await blog_service.get_post(slug)


@app.get("/blog/categories", response_model=List[BlogCategory], tags=["blog"])
async def list_categories(blog_service: BlogService = Depends(get_blog_service)):
    return await blog_service.all_categories()


@app.get("/blog/categories/{category}/posts", response_model=List[BlogPostSummary], tags=["blog"])
async def list_category_posts(category: str, blog_service: BlogService = Depends(get_blog_service)):
    posts = await blog_service.by_category(category)
    return [BlogPostSummary.from_post(post) for post in posts]


@app.get("/blog/tags", response_model=TagsResponse, tags=["blog"])
async def list_tags(blog_service: BlogService = Depends(get_blog_service)):
    tags = await blog_service.all_tags()
    return TagsResponse(tags=tags, total_tags=len(tags))


@app.get("/blog/tags/{tag}/posts", response_model=List[BlogPostSummary], tags=["blog"])
async def list_tag_posts(tag: str, blog_service: BlogService = Depends(get_blog_service)):
    posts = await blog_service.by_tag(tag)
    return [BlogPostSummary.from_post(post) for post in posts]


# Comments

@app.get("/blog/posts/{slug}/comments", response_model=CommentThread,
         responses=ERROR_RESPONSES, tags=["comments"])
async def list_comments(
    slug: str,
    blog_service: BlogService = Depends(get_blog_service),
    comments: CommentTree = Depends(get_comment_tree)
):
    post = await blog_service.get_post(slug)
    return CommentThread(
        post_slug=post.slug,
        count=comments.count(post.slug),
        comments=comments.for_post(post.slug)
    )


@app.post("/blog/posts/{slug}/comments", response_model=Comment, status_code=201,
          responses=ERROR_RESPONSES, tags=["comments"])
async def add_comment(
    slug: str,
    payload: CommentCreate,
    blog_service: BlogService = Depends(get_blog_service),
    comments: CommentTree = Depends(get_comment_tree)
):
    post = await blog_service.get_post(slug)
    return comments.add_top_level(post.slug, payload.author, payload.content)


@app.post("/blog/comments/{comment_id}/replies", response_model=CommentReply, status_code=201,
          responses=ERROR_RESPONSES, tags=["comments"])
async def add_reply(
    comment_id: str,
    payload: CommentCreate,
    comments: CommentTree = Depends(get_comment_tree)
):
    return comments.add_reply(comment_id, payload.author, payload.content)


# Authored posts

@app.post("/posts", response_model=PostRead, status_code=201,
          responses={401: {"model": ErrorResponse}}, tags=["posts"])
def create_post(
    payload: PostCreate,
    user_id: int = Depends(get_current_user_id),
    repository: PostRepository = Depends(get_post_repository)
):
    return repository.create(payload, user_id)


@app.get("/posts", response_model=List[PostRead], tags=["posts"])
def find_all_posts(repository: PostRepository = Depends(get_post_repository)):
    return repository.find_all()


@app.get("/posts/author/{author_id}", response_model=List[PostRead], tags=["posts"])
def find_posts_by_author(author_id: int, repository: PostRepository = Depends(get_post_repository)):
    return repository.find_by_author(author_id)


@app.get("/posts/{post_id}", response_model=PostRead, responses=ERROR_RESPONSES, tags=["posts"])
def find_post(post_id: int, repository: PostRepository = Depends(get_post_repository)):
    return repository.find_one(post_id)


@app.patch("/posts/{post_id}", response_model=PostRead, responses=OWNER_RESPONSES, tags=["posts"])
def update_post(
    post_id: int,
    payload: PostUpdate,
    user_id: int = Depends(get_current_user_id),
    repository: PostRepository = Depends(get_post_repository)
):
    return repository.update(post_id, payload, user_id)


@app.delete("/posts/{post_id}", status_code=204, responses=OWNER_RESPONSES, tags=["posts"])
def remove_post(
    post_id: int,
    user_id: int = Depends(get_current_user_id),
    repository: PostRepository = Depends(get_post_repository)
):
    repository.remove(post_id, user_id)
    return Response(status_code=204)


# Admin

@app.get("/health", response_model=HealthResponse, tags=["admin"])
async def health_check(blog_service: BlogService = Depends(get_blog_service)):
    """Content directory and database reachability"""
    container = get_container()
    checks = {}

    try:
        posts = await blog_service.list_all()
        checks["posts_loaded"] = len(posts)
        checks["content_directory"] = container.content_store.directory.is_dir()
    except OSError as e:
        logger.error("Content health check failed", error=str(e))
        checks["content_error"] = str(e)

    try:
        with container.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        checks["database"] = False

    healthy = checks.get("database") and checks.get("content_directory")
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=container.settings.app_version,
        checks=checks
    )
