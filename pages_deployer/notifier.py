import logging
import time
from typing import Callable

import requests

from .errors import DeliveryFailed
from .models import NotificationPayload

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 5
DEFAULT_BASE_DELAY = 1.0
DEFAULT_TIMEOUT = 10.0

def backoff_delay(attempt: int, base: float = DEFAULT_BASE_DELAY) -> float:
    """Seconds to wait after failed attempt number ``attempt`` (0-based)."""
    return base * (2 ** attempt)

def notify(payload: NotificationPayload, url: str,
           attempts: int = DEFAULT_ATTEMPTS,
           base_delay: float = DEFAULT_BASE_DELAY,
           timeout: float = DEFAULT_TIMEOUT,
           post: Callable = requests.post,
           sleep: Callable[[float], None] = time.sleep) -> int:
    """POST ``payload`` to ``url`` until it answers 200.

    Returns the number of attempts used. Raises DeliveryFailed when every
    attempt failed. The backoff sleep also runs after the last failure.
    """
    body = payload.model_dump()
    headers = {"Content-Type": "application/json"}
    for attempt in range(attempts):
        try:
            logger.info("POST %s attempt %d/%d task=%s", url, attempt + 1, attempts, payload.task)
            r = post(url, json=body, headers=headers, timeout=timeout)
            logger.info("response: status=%s", r.status_code)
            if r.status_code == 200:
                return attempt + 1
        except requests.RequestException as e:
            logger.warning("attempt %d failed: %s", attempt + 1, e)
        delay = backoff_delay(attempt, base_delay)
        logger.info("sleep %ss before retry", delay)
        sleep(delay)
    logger.error("giving up on %s after %d attempts", url, attempts)
    raise DeliveryFailed(url, attempts)
