"""Shared fakes for the probe registry tests."""

import threading
import time
from collections import Counter
from typing import Optional, Sequence

import pytest

from dnsbl_registry.exceptions import EmptySource, SourceUnavailable
from dnsbl_registry.models import ListingResult
from dnsbl_registry.probes import DnsProbe
from dnsbl_registry.sources import ALIVE_LIST, BlacklistSource


class FakeSource(BlacklistSource):
    """In-memory blacklist source."""

    def __init__(self, lists: Optional[dict[str, list[str]]] = None):
        self.lists: dict[str, list[str]] = dict(lists or {})
        self.persisted: list[list[str]] = []

    def load_named(self, list_name: str) -> list[str]:
        if list_name not in self.lists:
            raise SourceUnavailable(f"no list {list_name}")
        if not self.lists[list_name]:
            raise EmptySource(f"list {list_name} is empty")
        return list(self.lists[list_name])

    def persist_alive(self, hostnames: Sequence[str]) -> None:
        if not hostnames:
            raise EmptySource("nothing alive")
        self.persisted.append(list(hostnames))
        self.lists[ALIVE_LIST] = list(hostnames)


class FakeProbe(DnsProbe):
    """Probe answering from fixed sets, recording every call."""

    def __init__(
        self,
        alive: Sequence[str] = (),
        listed: Optional[dict[str, list[str]]] = None,
        failing: Sequence[str] = (),
        listing_failures: Sequence[str] = (),
        slow: Sequence[str] = (),
        delay: float = 0.5,
    ):
        self.alive = set(alive)
        self.listed = dict(listed or {})
        self.failing = set(failing)
        self.listing_failures = set(listing_failures)
        self.slow = set(slow)
        self.delay = delay
        self.responsive_calls: Counter[str] = Counter()
        self.listing_calls: Counter[str] = Counter()
        self._lock = threading.Lock()

    def is_responsive(self, hostname: str) -> bool:
        with self._lock:
            self.responsive_calls[hostname] += 1
        if hostname in self.failing:
            raise RuntimeError(f"probe failed for {hostname}")
        return hostname in self.alive

    def check_listing(self, hostname: str, target: str) -> ListingResult:
        with self._lock:
            self.listing_calls[hostname] += 1
        if hostname in self.slow:
            time.sleep(self.delay)
        if hostname in self.listing_failures:
            raise RuntimeError(f"listing failed for {hostname}")
        if hostname in self.listed:
            return ListingResult(
                positive=True,
                evidence=self.listed[hostname],
                query_time_ms=12.5,
                return_codes=["127.0.0.2"],
            )
        return ListingResult(positive=False, query_time_ms=3.0)


@pytest.fixture
def source() -> FakeSource:
    return FakeSource(
        {
            "blacklists": ["a.example", "b.example", "c.example"],
            ALIVE_LIST: ["a.example", "c.example"],
        }
    )


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe(alive=["a.example", "c.example", "x.example"])
