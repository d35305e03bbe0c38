import functools
from typing import TypeVar, Callable, Optional
from loguru import logger
from ..exceptions import BlobSampleException, TransportError

T = TypeVar('T')


def log_exceptions(
    log_level: str = "ERROR",
    include_traceback: bool = True,
    custom_message: Optional[str] = None
):
    """
    Decorator to log exceptions before re-raising them.

    Args:
        log_level: Log level for exception logging
        include_traceback: Whether to include traceback in log
        custom_message: Custom message to include in log
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                message = custom_message or f"Exception in {func.__name__}"
                if include_traceback:
                    logger.opt(exception=True).log(log_level, f"{message}: {e}")
                else:
                    logger.log(log_level, f"{message}: {e}")
                raise

        return async_wrapper

    return decorator


def convert_exceptions(exception_map: dict):
    """
    Decorator to convert third-party exceptions to sample exceptions.

    Exceptions that are already a BlobSampleException pass through unchanged,
    so methods can raise specific errors and let the map handle the rest.

    Args:
        exception_map: Dictionary mapping exception types to BlobSampleException types
    """
    def convert(e: Exception):
        if isinstance(e, BlobSampleException):
            return None
        for source_exc, target_exc in exception_map.items():
            if isinstance(e, source_exc):
                return target_exc(
                    str(e),
                    error_code=getattr(e, "error_code", None),
                    details={"original_exception": type(e).__name__},
                )
        return None

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                converted = convert(e)
                if converted is not None:
                    raise converted from e
                raise

        return async_wrapper

    return decorator


class ErrorHandler:
    """Centralized error handling utilities."""

    @staticmethod
    def transport_error(e: Exception, operation: str) -> TransportError:
        """Wrap a storage client failure without interpreting it."""
        error_details = {
            "operation": operation,
            "original_exception": type(e).__name__,
            "message": str(e)
        }

        logger.error(f"Storage operation {operation} failed: {e}")
        return TransportError(
            f"Storage operation {operation} failed: {e}",
            error_code=getattr(e, "error_code", None) or "TRANSPORT_ERROR",
            details=error_details
        )
