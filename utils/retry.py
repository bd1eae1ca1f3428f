import logging
from functools import wraps
from typing import Callable, Any, Tuple, Type
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


def retry_operation(max_attempts: int = 5, backoff_multiplier: float = 1.0, max_backoff: float = 30.0,
                    min_backoff: float = 2.0,
                    retry_on: Tuple[Type[BaseException], ...] = (Exception,)) -> Callable:
    """
    Decorator for retrying asynchronous operations

    Args:
        max_attempts: Maximum number of attempts
        backoff_multiplier: Multiplier for exponential backoff
        max_backoff: Maximum delay between attempts
        min_backoff: Minimum delay between attempts
        retry_on: Exception types that trigger another attempt

    Returns:
        Decorated function
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=backoff_multiplier, min=min_backoff, max=max_backoff),
            retry=retry_if_exception_type(retry_on),
            reraise=True,
        )
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.warning(f"[RETRY] Attempt to execute {func.__name__} failed: {e}")
                raise  # Throw exception for tenacity

        return wrapper

    return decorator


# Ready-made decorators for typical cases
retry_db_operation = retry_operation(max_attempts=3, backoff_multiplier=0.5, max_backoff=10.0)
retry_db_connect = retry_operation(max_attempts=5, backoff_multiplier=1.0, max_backoff=30.0)
