"""Data models for blacklist probe rounds."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ProbeEntry:
    """One blacklist hostname under test."""

    host_name: str
    positive: bool = False  # Target is listed by host_name
    positive_evidence: list[str] = field(default_factory=list)  # Result URLs
    responsive: bool = True  # host_name answers DNS queries
    query_time_ms: Optional[float] = None  # None until queried

    def reset(self, responsive: bool) -> None:
        """Clear listing results and set responsiveness."""
        self.positive = False
        self.positive_evidence = []
        self.query_time_ms = None
        self.responsive = responsive


@dataclass
class ListingResult:
    """Outcome of a single listing check."""

    positive: bool
    evidence: list[str] = field(default_factory=list)
    query_time_ms: float = 0.0
    return_codes: list[str] = field(default_factory=list)  # A records, e.g. 127.0.0.2


@dataclass
class RoundSummary:
    """Counts for a finished probe round."""

    total: int
    responsive: int
    listed: int
    listed_hosts: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return self.listed == 0
