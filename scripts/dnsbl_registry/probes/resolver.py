"""DNS probe backed by dnspython."""

import ipaddress
import logging
import time
from typing import Optional

import dns.exception
import dns.resolver

from ..exceptions import ProbeTimeout
from ..models import ListingResult
from .base import DnsProbe

# RFC 5782 test point: every working DNSBL lists 127.0.0.2
LIVENESS_TEST_POINT = "2.0.0.127"

# Returned by some DNSBLs (e.g. Spamhaus) when the query came through a
# public or unregistered resolver
RESOLVER_BLOCK_CODES = {"127.255.255.254", "127.255.255.255"}

LOOPBACK_NETWORK = ipaddress.ip_network("127.0.0.0/8")


class ResolverProbe(DnsProbe):
    """Liveness and listing checks using a dnspython Resolver."""

    def __init__(
        self,
        nameservers: Optional[list[str]] = None,
        timeout: float = 5.0,
        lifetime: float = 10.0,
    ):
        self.logger = logging.getLogger(__name__)
        # Explicit nameservers replace resolv.conf entirely
        self.resolver = dns.resolver.Resolver(configure=not nameservers)
        if nameservers:
            self.resolver.nameservers = list(nameservers)
        self.resolver.timeout = timeout
        self.resolver.lifetime = lifetime

    def _resolve(self, query: str, rdtype: str) -> list[str]:
        """Resolve query, returning record strings or [] when absent."""
        try:
            answers = self.resolver.resolve(query, rdtype)
        except (
            dns.resolver.NXDOMAIN,
            dns.resolver.NoAnswer,
            dns.resolver.NoNameservers,
        ):
            return []
        return [str(r) for r in answers]

    def is_responsive(self, hostname: str) -> bool:
        query = f"{LIVENESS_TEST_POINT}.{hostname}"
        try:
            return bool(self._resolve(query, "A"))
        except dns.exception.DNSException as e:
            self.logger.debug(f"Liveness query failed for {hostname}: {e}")
            return False

    def _is_false_positive(self, return_code: str) -> bool:
        """Check if return code is a resolver block or outside 127.0.0.0/8."""
        if return_code in RESOLVER_BLOCK_CODES:
            return True
        try:
            return ipaddress.ip_address(return_code) not in LOOPBACK_NETWORK
        except ValueError:
            return True

    def _get_txt(self, query: str) -> list[str]:
        try:
            records = self._resolve(query, "TXT")
        except dns.exception.DNSException as e:
            self.logger.debug(f"TXT lookup failed for {query}: {e}")
            return []
        return [r.strip('"') for r in records]

    def check_listing(self, hostname: str, target: str) -> ListingResult:
        query = f"{self.reverse_target(target)}.{hostname}"

        start = time.perf_counter()
        try:
            codes = self._resolve(query, "A")
        except dns.exception.Timeout as e:
            raise ProbeTimeout(f"Query {query} timed out") from e
        except dns.exception.DNSException as e:
            self.logger.debug(f"Listing query failed for {query}: {e}")
            codes = []
        elapsed_ms = (time.perf_counter() - start) * 1000

        listed = [c for c in codes if not self._is_false_positive(c)]
        if not listed:
            return ListingResult(
                positive=False, query_time_ms=elapsed_ms, return_codes=codes
            )

        texts = self._get_txt(query)
        evidence = self.extract_urls(texts) or texts or listed
        return ListingResult(
            positive=True,
            evidence=evidence,
            query_time_ms=elapsed_ms,
            return_codes=codes,
        )
