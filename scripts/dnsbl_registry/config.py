"""Configuration for blacklist probing."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import InvalidInput, SourceUnavailable

DEFAULT_IP_APIS = [
    "https://ifconfig.me/ip",
    "https://icanhazip.com",
    "https://api.ipify.org",
]


def _split_env(name: str) -> list[str]:
    value = os.environ.get(name, "")
    return [x.strip() for x in value.split(",") if x.strip()] if value else []


STRING_FIELDS = {"blacklist_dir"}
LIST_FIELDS = {"nameservers", "ip_apis"}
FLOAT_FIELDS = {"timeout", "lifetime", "round_timeout"}
INT_FIELDS = {"max_workers"}
BOOL_FIELDS = {"check_response"}
OPTIONAL_FIELDS = {"round_timeout"}


def _check_value(key: str, value: Any, path: str | Path) -> Any:
    """Validate a YAML value against the type of config field key."""
    if value is None and key in OPTIONAL_FIELDS:
        return None

    # bool is an int subclass; only check_response may be a bool
    if key in BOOL_FIELDS and isinstance(value, bool):
        return value
    if key in INT_FIELDS and isinstance(value, int) and not isinstance(value, bool):
        if value < 1:
            raise InvalidInput(f"{key} in {path} must be at least 1, got {value}")
        return value
    if key in FLOAT_FIELDS and isinstance(value, (int, float)) and not isinstance(
        value, bool
    ):
        return float(value)
    if key in STRING_FIELDS and isinstance(value, str) and value:
        return value
    if (
        key in LIST_FIELDS
        and isinstance(value, list)
        and all(isinstance(v, str) and v.strip() for v in value)
    ):
        return [v.strip() for v in value]

    raise InvalidInput(f"Invalid value for {key} in {path}: {value!r}")


@dataclass
class ProbeConfig:
    """Configuration for blacklist probing."""

    # Directory holding blacklists.txt and blacklistsAlive.txt
    blacklist_dir: str = "/var/lib/dnsbl-registry"

    # Resolvers to query (empty = system resolv.conf)
    nameservers: list[str] = field(default_factory=list)

    # Per-server timeout and total lifetime of one DNS query, in seconds
    timeout: float = 5.0
    lifetime: float = 10.0

    max_workers: int = 20

    # Deadline for a whole listing round (None = wait for every check)
    round_timeout: Optional[float] = None

    # Re-check blacklist liveness between rounds (slower but fresh)
    check_response: bool = True

    # External APIs for public IP detection
    ip_apis: list[str] = field(default_factory=lambda: list(DEFAULT_IP_APIS))

    @classmethod
    def from_env(cls) -> "ProbeConfig":
        """Create config from environment variables."""
        round_timeout = os.environ.get("DNSBL_ROUND_TIMEOUT", "")
        return cls(
            blacklist_dir=os.environ.get("DNSBL_DIR", "/var/lib/dnsbl-registry"),
            nameservers=_split_env("DNSBL_NAMESERVERS"),
            timeout=float(os.environ.get("DNSBL_TIMEOUT", "5")),
            lifetime=float(os.environ.get("DNSBL_LIFETIME", "10")),
            max_workers=int(os.environ.get("DNSBL_MAX_WORKERS", "20")),
            round_timeout=float(round_timeout) if round_timeout else None,
            check_response=os.environ.get("DNSBL_CHECK_RESPONSE", "true").lower()
            == "true",
            ip_apis=_split_env("DNSBL_IP_APIS") or list(DEFAULT_IP_APIS),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "ProbeConfig":
        """Load a YAML mapping on top of the environment config."""
        try:
            data: Any = yaml.safe_load(Path(path).read_text())
        except OSError as e:
            raise SourceUnavailable(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise InvalidInput(f"Invalid YAML in {path}: {e}") from e

        config = cls.from_env()
        if data is None:
            return config
        if not isinstance(data, dict):
            raise InvalidInput(f"Config file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in set(data) - known)
        if unknown:
            raise InvalidInput(f"Unknown config keys in {path}: {', '.join(unknown)}")

        for key, value in data.items():
            setattr(config, key, _check_value(key, value, path))
        return config
