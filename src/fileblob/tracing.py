"""OpenTelemetry tracing for bucket operations.

Span attributes never include absolute filesystem paths or raw object keys;
keys are exported as SHA256 hashes for correlation.
"""

from __future__ import annotations

import functools
import hashlib
import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast

from fileblob.config import otel_enabled

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

TRACER_NAME = "fileblob.bucket"


def key_digest(key: str) -> str:
    """Return the SHA256 hex digest of a key for span attributes."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def traced_storage_operation(operation: str, *, keyed: bool = True) -> Callable[[F], F]:
    """Decorator to trace bucket operations with OpenTelemetry.

    Args:
        operation: Operation name (e.g., "attributes", "delete", "list_paged").
        keyed: Whether the first positional argument after ``self`` is the
            object key.

    Returns:
        Decorated function that emits spans when tracing is enabled.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            if not otel_enabled():
                return func(self, *args, **kwargs)

            try:
                from opentelemetry import trace
            except ImportError:
                return func(self, *args, **kwargs)

            tracer = trace.get_tracer(TRACER_NAME)
            with tracer.start_as_current_span(f"{TRACER_NAME}.{operation}") as span:
                span.set_attribute("storage.backend", getattr(self, "backend_name", "unknown"))
                key = args[0] if keyed and args else kwargs.get("key")
                if isinstance(key, str):
                    span.set_attribute("fileblob.object_key_sha256", key_digest(key))

                try:
                    result = func(self, *args, **kwargs)
                except Exception as e:
                    span.set_attribute("error", True)
                    span.set_attribute("error.type", type(e).__name__)
                    raise

                if result is not None:
                    _add_result_attributes(span, result)
                return result

        return cast(F, wrapper)

    return decorator


def _add_result_attributes(span: Any, result: Any) -> None:
    """Add size, content type and page size attributes when available."""
    from fileblob.models import Attributes, ListPage

    try:
        if isinstance(result, Attributes):
            span.set_attribute("fileblob.object_size_bytes", result.size)
            if result.content_type:
                span.set_attribute("fileblob.object_content_type", result.content_type)
        elif isinstance(result, ListPage):
            span.set_attribute("fileblob.list_object_count", len(result.objects))
            span.set_attribute("fileblob.list_has_more", result.next_page_token is not None)
        else:
            attrs = getattr(result, "attributes", None)
            size = getattr(attrs, "size", None)
            if isinstance(size, int):
                span.set_attribute("fileblob.object_size_bytes", size)
    except Exception as e:
        logger.debug("Failed to add result attributes to span: %s", e)
