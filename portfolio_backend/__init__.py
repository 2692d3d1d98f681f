"""Portfolio blog backend: markdown content store, comments and post CRUD."""

__version__ = "1.0.0"
