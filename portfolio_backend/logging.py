"""
Structured logging with request correlation
"""
import logging
import json
from typing import Optional
from datetime import datetime, timezone
from contextvars import ContextVar

# Context variable for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

_RESERVED = {'timestamp', 'level', 'logger', 'message'}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data['request_id'] = request_id

        for key, value in getattr(record, 'extra_fields', {}).items():
            if key in _RESERVED:
                key = f"field_{key}"
            log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human readable formatter, key=value pairs after the message"""

    def __init__(self):
        super().__init__('%(asctime)s %(levelname)s %(name)s: %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = dict(getattr(record, 'extra_fields', {}))
        request_id = request_id_var.get()
        if request_id:
            fields['request_id'] = request_id
        if fields:
            line += ' ' + ' '.join(f"{k}={v}" for k, v in fields.items())
        return line


class PortfolioLogger:
    """Logger accepting keyword fields alongside the message"""

    def __init__(self, name: str, level: str = "INFO", fmt: str = "json"):
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        self.configure(level, fmt)

    def configure(self, level: str = "INFO", fmt: str = "json"):
        """Replace handlers according to the configured level and format"""
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.handlers = []

        handler = logging.StreamHandler()
        handler.setFormatter(TextFormatter() if fmt == "text" else StructuredFormatter())
        self.logger.addHandler(handler)

    def _log(self, level: int, message: str, exc_info=False, **kwargs):
        self.logger.log(level, message, exc_info=exc_info, extra={'extra_fields': kwargs})

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def exception(self, message: str, **kwargs):
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


# Global logger instance
logger = PortfolioLogger('portfolio_backend')


def configure_logging(level: str, fmt: str) -> None:
    """Apply settings to the global logger"""
    logger.configure(level, fmt)
