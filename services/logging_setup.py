"""
Logging configuration and domain-specific log helpers.

Console output plus rotating ``combined.log`` / ``error.log`` files. The
helpers attach structured ``extra`` fields so webhook traffic, AI activity
and API errors can be filtered downstream.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional

from services.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 5 * 1024 * 1024  # 5MB
LOG_BACKUP_COUNT = 5

logger = logging.getLogger("painel")


def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger for the API process.

    Args:
        settings: Runtime settings (level, log directory, file toggle)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Drop handlers installed by a previous call
    for handler in list(root_logger.handlers):
        if getattr(handler, "_painel_handler", False):
            root_logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.log_level)
    console_handler.setFormatter(formatter)
    console_handler._painel_handler = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)

    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        combined_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "combined.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        combined_handler.setLevel(settings.log_level)
        combined_handler.setFormatter(formatter)
        combined_handler._painel_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(combined_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "error.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler._painel_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(error_handler)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def log_webhook_activity(platform: str, event: str, data: Any) -> None:
    """Log inbound/outbound channel traffic."""
    logger.info(
        f"Webhook activity: {platform}/{event}",
        extra={
            "event_type": "webhook_activity",
            "platform": platform,
            "event": event,
            "data": _stringify(data),
        },
    )


def log_ai_activity(agent: str, action: str, input: Any, output: Optional[Any] = None) -> None:
    """Log an agent processing step."""
    logger.info(
        f"AI activity: {agent}/{action}",
        extra={
            "event_type": "ai_activity",
            "agent": agent,
            "action": action,
            "input": _stringify(input),
            "output": _stringify(output) if output is not None else None,
        },
    )


def log_api_error(error: BaseException, request: Any, context: Optional[str] = None) -> None:
    """Log an error raised while serving a request."""
    client = getattr(request, "client", None)
    logger.error(
        f"API error: {error}",
        extra={
            "event_type": "api_error",
            "context": context,
            "request": {
                "method": request.method,
                "url": str(request.url),
                "ip": client.host if client else None,
                "params": dict(request.path_params),
                "query": dict(request.query_params),
            },
        },
        exc_info=error,
    )


def log_performance(operation: str, duration_ms: float, metadata: Optional[dict] = None) -> None:
    logger.info(
        f"Performance: {operation} took {duration_ms:.0f}ms",
        extra={
            "event_type": "performance",
            "operation": operation,
            "duration_ms": duration_ms,
            "metadata": metadata or {},
        },
    )


def log_request(request: Any, status_code: int, duration_ms: float) -> None:
    """Combined-style access log line."""
    client = getattr(request, "client", None)
    ip = client.host if client else "-"
    user_agent = request.headers.get("user-agent", "-")
    logger.info(
        f'{ip} "{request.method} {request.url.path} HTTP/{request.scope.get("http_version", "1.1")}" '
        f'{status_code} {duration_ms:.0f}ms "{user_agent}"',
        extra={"event_type": "http_request"},
    )
