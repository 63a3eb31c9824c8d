"""DNSBL probe registry package.

Public API:
    - ProbeRegistry: Ordered set of blacklist entries for one probe round
    - BlacklistChecker: Parallel listing checks over a registry
    - ProbeConfig: Configuration dataclass
    - ProbeEntry, ListingResult, RoundSummary: Data models

Collaborator API (for extending):
    - BlacklistSource, FileBlacklistSource: Hostname list storage
    - DnsProbe, ResolverProbe: DNS liveness and listing queries
"""

from .checker import BlacklistChecker
from .config import ProbeConfig
from .exceptions import (
    DnsblRegistryError,
    EmptySource,
    InvalidInput,
    NotInitialized,
    ProbeTimeout,
    SourceUnavailable,
)
from .models import ListingResult, ProbeEntry, RoundSummary
from .probes import DnsProbe, ResolverProbe
from .registry import ProbeRegistry
from .sources import ALIVE_LIST, FULL_LIST, BlacklistSource, FileBlacklistSource

__all__ = [
    # Main API
    "ProbeRegistry",
    "BlacklistChecker",
    "ProbeConfig",
    "ProbeEntry",
    "ListingResult",
    "RoundSummary",
    # Collaborator API
    "BlacklistSource",
    "FileBlacklistSource",
    "DnsProbe",
    "ResolverProbe",
    "FULL_LIST",
    "ALIVE_LIST",
    # Errors
    "DnsblRegistryError",
    "NotInitialized",
    "InvalidInput",
    "SourceUnavailable",
    "EmptySource",
    "ProbeTimeout",
]
