"""DNS probes for blacklist liveness and listing checks."""

from .base import DnsProbe
from .resolver import ResolverProbe

__all__ = ["DnsProbe", "ResolverProbe"]
