"""Process-wide defaults read from the environment."""

from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def _read_timeout(name: str) -> Optional[float]:
    env_value = os.getenv(name)
    if env_value is None or env_value == "":
        return None
    try:
        timeout = float(env_value)
    except ValueError:
        logger.warning("Invalid %s value '%s'. Falling back to no timeout.", name, env_value)
        return None
    if timeout <= 0:
        logger.info("%s <= 0, disabling the timeout.", name)
        return None
    return timeout


SMTP_TIMEOUT = _read_timeout("OWL_SMTP_TIMEOUT")
"""Seconds allowed for the TLS connect and each SMTP command. ``None`` waits forever."""

SES_REGION = os.getenv("AWS_REGION", "us-east-1")
