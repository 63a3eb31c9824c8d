"""
Base class for DNS probes.

A probe answers two questions about a DNSBL hostname: does it answer
queries at all, and does it list a given target.
"""

import ipaddress
import re
from abc import ABC, abstractmethod
from typing import Iterable

from ..exceptions import InvalidInput
from ..models import ListingResult

URL_PATTERN = re.compile(r"https?://[^\s\"'<>]+", re.IGNORECASE)


class DnsProbe(ABC):
    """Abstract DNS query collaborator used by ProbeRegistry."""

    @abstractmethod
    def is_responsive(self, hostname: str) -> bool:
        """Return True if hostname answers a liveness query."""
        ...

    @abstractmethod
    def check_listing(self, hostname: str, target: str) -> ListingResult:
        """Look up target in the DNSBL zone hostname."""
        ...

    # ─────────────────────────────────────────────────────────────────
    # Utility methods
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def reverse_target(target: str) -> str:
        """Reverse an IP address for DNSBL lookup.

        IPv4 octets are reversed, IPv6 addresses are expanded to
        reversed nibbles.
        """
        try:
            address = ipaddress.ip_address(target.strip())
        except ValueError as e:
            raise InvalidInput(f"Not an IP address: {target!r}") from e

        pointer = address.reverse_pointer
        suffix = ".in-addr.arpa" if address.version == 4 else ".ip6.arpa"
        return pointer[: -len(suffix)]

    @staticmethod
    def extract_urls(texts: Iterable[str]) -> list[str]:
        """Collect URLs from TXT record strings, preserving order."""
        urls: list[str] = []
        for text in texts:
            for url in URL_PATTERN.findall(text):
                url = url.rstrip(".,;)")
                if url not in urls:
                    urls.append(url)
        return urls
