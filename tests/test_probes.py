"""Tests for the dnspython-backed probe.

The resolver is replaced with a table of canned answers so no DNS
traffic leaves the test run.
"""

from typing import Union

import dns.exception
import dns.resolver
import pytest

from dnsbl_registry.exceptions import InvalidInput, ProbeTimeout
from dnsbl_registry.probes import DnsProbe, ResolverProbe

Answer = Union[list[str], Exception]


class FakeResolver:
    """Answers resolve() from a {(query, rdtype): answer} table."""

    def __init__(self, answers: dict[tuple[str, str], Answer]):
        self.answers = answers
        self.queries: list[tuple[str, str]] = []

    def resolve(self, query: str, rdtype: str) -> list[str]:
        self.queries.append((query, rdtype))
        answer = self.answers.get((query, rdtype), dns.resolver.NXDOMAIN())
        if isinstance(answer, Exception):
            raise answer
        return answer


def _probe(answers: dict[tuple[str, str], Answer]) -> ResolverProbe:
    probe = ResolverProbe(nameservers=["192.0.2.53"], timeout=1.0, lifetime=2.0)
    probe.resolver = FakeResolver(answers)  # type: ignore[assignment]
    return probe


class TestResolverSetup:
    def test_nameservers_and_timeouts_applied(self) -> None:
        probe = ResolverProbe(nameservers=["192.0.2.53"], timeout=1.5, lifetime=3.0)
        assert len(probe.resolver.nameservers) == 1
        assert probe.resolver.timeout == 1.5
        assert probe.resolver.lifetime == 3.0


class TestIsResponsive:
    """Verify liveness via the 127.0.0.2 test point."""

    def test_answering_zone(self) -> None:
        probe = _probe({("2.0.0.127.bl.example", "A"): ["127.0.0.2"]})
        assert probe.is_responsive("bl.example") is True

    @pytest.mark.parametrize(
        "error",
        [
            dns.resolver.NXDOMAIN(),
            dns.resolver.NoAnswer(),
            dns.resolver.NoNameservers(),
            dns.exception.Timeout(),
        ],
    )
    def test_dead_zone(self, error: Exception) -> None:
        probe = _probe({("2.0.0.127.bl.example", "A"): error})
        assert probe.is_responsive("bl.example") is False


class TestCheckListing:
    """Verify listing lookups and evidence collection."""

    QUERY = "1.2.0.192.bl.example"

    def test_not_listed(self) -> None:
        result = _probe({}).check_listing("bl.example", "192.0.2.1")
        assert result.positive is False
        assert result.evidence == []
        assert result.query_time_ms >= 0

    def test_listed_with_url_evidence(self) -> None:
        probe = _probe(
            {
                (self.QUERY, "A"): ["127.0.0.2"],
                (self.QUERY, "TXT"): [
                    '"Listed, see https://bl.example/lookup?ip=192.0.2.1."'
                ],
            }
        )
        result = probe.check_listing("bl.example", "192.0.2.1")
        assert result.positive is True
        assert result.evidence == ["https://bl.example/lookup?ip=192.0.2.1"]
        assert result.return_codes == ["127.0.0.2"]

    def test_listed_falls_back_to_txt_then_codes(self) -> None:
        probe = _probe(
            {
                (self.QUERY, "A"): ["127.0.0.4"],
                (self.QUERY, "TXT"): ['"Spam source"'],
            }
        )
        assert probe.check_listing("bl.example", "192.0.2.1").evidence == [
            "Spam source"
        ]

        probe = _probe({(self.QUERY, "A"): ["127.0.0.4"]})
        assert probe.check_listing("bl.example", "192.0.2.1").evidence == [
            "127.0.0.4"
        ]

    @pytest.mark.parametrize("code", ["127.255.255.254", "127.255.255.255", "10.0.0.1"])
    def test_false_positive_codes(self, code: str) -> None:
        """Resolver blocks and non-loopback answers are not listings."""
        probe = _probe({(self.QUERY, "A"): [code]})
        result = probe.check_listing("bl.example", "192.0.2.1")
        assert result.positive is False
        assert result.return_codes == [code]

    def test_timeout_raises(self) -> None:
        probe = _probe({(self.QUERY, "A"): dns.exception.Timeout()})
        with pytest.raises(ProbeTimeout):
            probe.check_listing("bl.example", "192.0.2.1")

    def test_ipv6_target(self) -> None:
        probe = _probe({})
        probe.check_listing("bl.example", "2001:db8::1")
        query, _ = probe.resolver.queries[0]  # type: ignore[attr-defined]
        assert query.endswith(".8.b.d.0.1.0.0.2.bl.example")
        assert query.startswith("1.0.0.0.")


class TestHelpers:
    def test_reverse_ipv4(self) -> None:
        assert DnsProbe.reverse_target("192.0.2.1") == "1.2.0.192"

    def test_reverse_invalid(self) -> None:
        with pytest.raises(InvalidInput):
            DnsProbe.reverse_target("example.com")

    def test_extract_urls_deduplicates(self) -> None:
        texts = ["see http://a.example/x", "again http://a.example/x; https://b.example"]
        assert DnsProbe.extract_urls(texts) == [
            "http://a.example/x",
            "https://b.example",
        ]
