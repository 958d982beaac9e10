"""
Structured error logging for failures that are recovered locally.

Errors flow through the standard logging setup in ``topic_news.core.logging``
and land in ``logs/errors/`` as JSONL with their context attached.

Usage:
    from topic_news.utils.error_logger import log_error, log_processing_error, log_http_error

    log_error("job_runner", error, operation="synthesis", context={"job_id": job_id})
    log_processing_error("news_summarizer", item_id=article.id, error=e, operation="map")
    log_http_error("feed_fetcher", url=feed_url, error=e)
"""

import logging
from typing import Any

from topic_news.core.logging import get_logger


def _extract_http_details(response: Any) -> dict[str, Any]:
    details: dict[str, Any] = {}
    try:
        if hasattr(response, "status_code"):
            details["status_code"] = response.status_code
        if hasattr(response, "headers"):
            details["content_type"] = response.headers.get("content-type")
        if hasattr(response, "url"):
            details["url"] = str(response.url)
    except Exception as e:  # noqa: BLE001
        details["extraction_error"] = f"Failed to extract HTTP details: {e}"
    return details


def log_error(
    component: str,
    error: Exception,
    *,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
    http_response: Any | None = None,
    item_id: str | int | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with context to both console and JSONL.

    Args:
        component: Component name identifying the source of the error.
        error: The exception that occurred.
        operation: Name of the operation that failed.
        context: Additional context data.
        http_response: HTTP response object (if applicable).
        item_id: ID of the item being processed (if applicable).
        level: Log level; recovered per-item failures use WARNING.
    """
    logger = get_logger(f"error.{component}")

    operation_str = f" during {operation}" if operation else ""
    item_str = f" (item: {item_id})" if item_id is not None else ""

    logger.log(
        level,
        "%s error%s%s: %s",
        component,
        operation_str,
        item_str,
        error,
        exc_info=error if level >= logging.ERROR else None,
        extra={
            "component": component,
            "operation": operation,
            "context_data": context,
            "http_details": (
                _extract_http_details(http_response) if http_response is not None else None
            ),
            "item_id": item_id,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def log_processing_error(
    component: str,
    item_id: str | int,
    error: Exception,
    *,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log a failure tied to a single processed item."""
    log_error(
        component,
        error,
        operation=operation or "item_processing",
        context=context,
        item_id=item_id,
        level=level,
    )


def log_http_error(
    component: str,
    url: str,
    *,
    response: Any | None = None,
    error: Exception | None = None,
    operation: str | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.WARNING,
) -> None:
    """Log an outbound HTTP failure with response details."""
    full_context = {"url": url}
    if context:
        full_context.update(context)

    if error is None:
        status_code = getattr(response, "status_code", "unknown")
        error = Exception(f"HTTP error for {url} (status: {status_code})")

    log_error(
        component,
        error,
        operation=operation or "http_request",
        context=full_context,
        http_response=response,
        level=level,
    )
