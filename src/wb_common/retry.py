"""Tenacity retry config for transient backend failures."""

import logging

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)


def async_retrying(
    *,
    attempts: int,
    base_delay_s: float,
    max_delay_s: float,
    transient: tuple[type[BaseException], ...],
    wait: wait_base | None = None,
) -> AsyncRetrying:
    """Bounded retry with exponential backoff and full jitter.

    `attempts` counts the first call, so attempts=1 disables retrying. The
    sleep after failed attempt n is uniform in [0, min(max, base * 2**(n-1))].
    Once attempts run out the last exception is re-raised as is.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")
    return AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=(
            wait if wait is not None
            else wait_random_exponential(multiplier=base_delay_s, max=max_delay_s)
        ),
        retry=retry_if_exception_type(transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
