import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from core.exceptions import ConfigurationError
from core.logger import get_logger

T = TypeVar("T")

logger = get_logger("core.retry")

TRANSIENT_STATUS_CODES = {408, 409, 425, 429}


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff with jitter.

    Attempt n (0-indexed) waits min(max_delay, base_delay * 2**n) plus up to
    `jitter` of that delay before the next attempt.
    """

    max_attempts: int = 3
    base_delay: float = 0.8
    max_delay: float = 10.0
    jitter: float = 0.3

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def delay_for(self, attempt: int) -> float:
        delay = min(self.max_delay, self.base_delay * (2 ** attempt))
        return delay + random.uniform(0, self.jitter * delay)


def _status_code(exc: Exception) -> Optional[int]:
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value

    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def is_transient_error(exc: Exception) -> bool:
    """
    Timeouts, connection failures, throttling and 5xx are transient.
    Any other 4xx is a permanent client-side failure.
    Errors carrying no status at all are treated as transient.
    """
    if isinstance(exc, ConfigurationError):
        return False

    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True

    status = _status_code(exc)
    if status is not None:
        return status >= 500 or status in TRANSIENT_STATUS_CODES

    return True


def call_with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy,
    operation: str,
    should_retry: Callable[[Exception], bool] = is_transient_error,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Runs `fn` until it succeeds or the policy is exhausted.

    The last error is re-raised unchanged; callers wrap it into their own
    domain exception.
    """
    for attempt in range(policy.max_attempts):
        try:
            return fn()

        except Exception as e:
            if not should_retry(e):
                logger.error(
                    "event=%s_FATAL | attempt=%d | error=%s",
                    operation,
                    attempt,
                    str(e)[:200],
                )
                raise

            if attempt + 1 >= policy.max_attempts:
                logger.error(
                    "event=%s_RETRIES_EXHAUSTED | attempts=%d | error=%s",
                    operation,
                    policy.max_attempts,
                    str(e)[:200],
                )
                raise

            logger.warning(
                "event=%s_RETRY | attempt=%d | error=%s",
                operation,
                attempt,
                str(e)[:200],
            )
            sleep(policy.delay_for(attempt))

    raise RuntimeError("unreachable")
