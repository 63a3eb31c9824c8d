"""Error taxonomy for the probe registry and its collaborators."""


class DnsblRegistryError(Exception):
    """Base class for all dnsbl_registry errors."""


class NotInitialized(DnsblRegistryError):
    """Registry was read, reset or mutated before any build."""


class InvalidInput(DnsblRegistryError):
    """Caller supplied an empty or malformed hostname list or target."""


class SourceUnavailable(DnsblRegistryError):
    """A blacklist hostname list could not be read or written."""


class EmptySource(DnsblRegistryError):
    """A blacklist hostname list holds no hostnames."""


class ProbeTimeout(DnsblRegistryError):
    """A DNS listing query did not finish in time."""
