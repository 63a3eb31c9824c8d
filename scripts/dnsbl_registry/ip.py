"""Public IP detection via external APIs."""

import ipaddress
import logging
from typing import Optional

import requests

from .config import DEFAULT_IP_APIS

logger = logging.getLogger(__name__)


def detect_ip(
    apis: Optional[list[str]] = None, timeout: int = 5
) -> Optional[str]:
    """Return the first valid IP reported by an external API, or None."""
    for api in apis or DEFAULT_IP_APIS:
        try:
            response = requests.get(api, timeout=timeout)
        except requests.RequestException as e:
            logger.debug(f"IP detection via {api} failed: {e}")
            continue

        if response.status_code != 200:
            logger.debug(f"IP detection via {api} returned {response.status_code}")
            continue

        candidate = response.text.strip()
        try:
            ipaddress.ip_address(candidate)
        except ValueError:
            logger.debug(f"IP detection via {api} returned junk: {candidate[:40]!r}")
            continue

        logger.info(f"Auto-detected IP via {api}: {candidate}")
        return candidate

    return None
