"""
Probe registry.

Holds the ordered set of ProbeEntry rows for one probe round. Entries are
built in one step from the alive cache, from a caller-supplied hostname
list, or from a fresh liveness pass over the full list, and are replaced
wholesale by the next build.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Sequence, Union

from .exceptions import InvalidInput, NotInitialized
from .models import ListingResult, ProbeEntry
from .probes import DnsProbe
from .sources import ALIVE_LIST, FULL_LIST, BlacklistSource

EntryKey = Union[int, str]


class ProbeRegistry:
    """Registry of blacklist hostnames and their per-round probe results."""

    def __init__(
        self, source: BlacklistSource, probe: DnsProbe, max_workers: int = 20
    ):
        self.source = source
        self.probe = probe
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

        self._entries: tuple[ProbeEntry, ...] = ()
        self._index: dict[str, int] = {}

    # ─────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────

    @property
    def is_initialized(self) -> bool:
        return bool(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get_entries(self) -> tuple[ProbeEntry, ...]:
        """Return the entries of the current build, in input order."""
        self._require_initialized("get_entries")
        return self._entries

    # ─────────────────────────────────────────────────────────────────
    # Builds
    # ─────────────────────────────────────────────────────────────────

    def build_from_alive_cache(
        self, hostnames: Optional[Sequence[str]] = None
    ) -> "ProbeRegistry":
        """Build entries from the alive cache or from a caller-supplied list.

        Hostnames loaded from the alive cache are trusted to be responsive.
        A caller-supplied list is probed hostname by hostname.

        Raises:
            InvalidInput: hostnames is given but empty or malformed
            SourceUnavailable, EmptySource: the alive cache cannot be loaded
        """
        if hostnames is None:
            alive = self.source.load_named(ALIVE_LIST)
            self._replace(self._make_entries(alive, [True] * len(alive)))
            self.logger.info(f"Built {len(alive)} entries from alive cache")
            return self

        names = self._validate_hostnames(hostnames)
        responsive = self._probe_responsiveness(names)
        self._replace(self._make_entries(names, responsive))
        self.logger.info(
            f"Built {len(names)} entries from supplied list, "
            f"{sum(responsive)} responsive"
        )
        return self

    def rebuild_alive_cache_from_full(self) -> "ProbeRegistry":
        """Probe the full list, persist the alive subset, and reload from it.

        The registry afterwards reflects exactly what was written to the
        alive cache. A failure at any step leaves the registry unchanged.
        """
        full = self.source.load_named(FULL_LIST)
        self.logger.info(f"Checking {len(full)} blacklists for liveness...")

        pending = self._make_entries(full, [False] * len(full))
        for entry, responsive in zip(pending, self._probe_responsiveness(full)):
            entry.responsive = responsive

        alive = [e.host_name for e in pending if e.responsive]
        self.logger.info(f"{len(alive)} of {len(full)} blacklists alive")
        self.source.persist_alive(alive)

        return self.build_from_alive_cache()

    # ─────────────────────────────────────────────────────────────────
    # Round lifecycle and mutators
    # ─────────────────────────────────────────────────────────────────

    def reset_round(self, reprobe_responsiveness: bool = True) -> "ProbeRegistry":
        """Clear listing results of every entry for a new round.

        With reprobe_responsiveness False every entry is assumed
        responsive and the probe is not called.
        """
        entries = self._require_initialized("reset_round")

        if reprobe_responsiveness:
            responsive = self._probe_responsiveness([e.host_name for e in entries])
        else:
            responsive = [True] * len(entries)

        for entry, alive in zip(entries, responsive):
            entry.reset(alive)
        return self

    def set_listing_result(self, key: EntryKey, result: ListingResult) -> ProbeEntry:
        """Record a listing check outcome for one entry."""
        entry = self._entry(key)
        entry.positive = result.positive
        entry.positive_evidence = list(result.evidence) if result.positive else []
        entry.query_time_ms = result.query_time_ms
        return entry

    def set_responsive(self, key: EntryKey, responsive: bool) -> ProbeEntry:
        """Record responsiveness for one entry."""
        entry = self._entry(key)
        entry.responsive = responsive
        return entry

    def mark_unresponsive(self, key: EntryKey) -> ProbeEntry:
        """Clear results of an entry whose check failed or timed out."""
        entry = self._entry(key)
        entry.reset(False)
        return entry

    # ─────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def is_non_empty_list(value: Any) -> bool:
        """True if value is a list or tuple with at least one element."""
        return isinstance(value, (list, tuple)) and len(value) > 0

    def _validate_hostnames(self, hostnames: Any) -> list[str]:
        if not self.is_non_empty_list(hostnames):
            raise InvalidInput(
                f"Hostname list must be a non-empty list, got {hostnames!r}"
            )
        names: list[str] = []
        for name in hostnames:
            if not isinstance(name, str) or not self.normalize_hostname(name):
                raise InvalidInput(f"Invalid blacklist hostname: {name!r}")
            names.append(self.normalize_hostname(name))
        return names

    @staticmethod
    def normalize_hostname(name: str) -> str:
        """Lower-case a hostname and drop surrounding whitespace and root dot."""
        return name.strip().lower().rstrip(".")

    def _require_initialized(self, operation: str) -> tuple[ProbeEntry, ...]:
        if not self._entries:
            raise NotInitialized(
                f"{operation}() called before the registry was built"
            )
        return self._entries

    def _entry(self, key: EntryKey) -> ProbeEntry:
        entries = self._require_initialized("set")
        if isinstance(key, bool):
            raise KeyError(f"Invalid entry key {key!r}")
        if isinstance(key, str):
            name = self.normalize_hostname(key)
            if name not in self._index:
                raise KeyError(f"No entry for blacklist {key!r}")
            return entries[self._index[name]]
        if not 0 <= key < len(entries):
            raise KeyError(f"No entry at index {key}")
        return entries[key]

    @staticmethod
    def _make_entries(
        hostnames: Sequence[str], responsive: Sequence[bool]
    ) -> tuple[ProbeEntry, ...]:
        return tuple(
            ProbeEntry(host_name=name, responsive=alive)
            for name, alive in zip(hostnames, responsive)
        )

    def _replace(self, entries: tuple[ProbeEntry, ...]) -> None:
        index: dict[str, int] = {}
        for i, entry in enumerate(entries):
            index.setdefault(entry.host_name, i)
        self._entries, self._index = entries, index

    def _probe_responsiveness(self, hostnames: Sequence[str]) -> list[bool]:
        """Call probe.is_responsive once per hostname, keeping input order."""
        workers = max(1, min(self.max_workers, len(hostnames)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.probe.is_responsive, hostnames))
