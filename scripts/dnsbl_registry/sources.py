"""
Blacklist hostname sources.

A source loads named lists of DNSBL hostnames from durable storage and
persists the subset that answered a liveness check (the alive cache).
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from .exceptions import EmptySource, SourceUnavailable

# Full, unfiltered list of known DNSBL hostnames
FULL_LIST = "blacklists"

# Hostnames from FULL_LIST that answered the last liveness check
ALIVE_LIST = "blacklistsAlive"

# Shipped with the package, used when the data directory has no full list
DEFAULT_FULL_LIST_PATH = Path(__file__).parent / "data" / f"{FULL_LIST}.txt"


class BlacklistSource(ABC):
    """Abstract durable store of blacklist hostname lists."""

    @abstractmethod
    def load_named(self, list_name: str) -> list[str]:
        """Load a named hostname list.

        Raises:
            SourceUnavailable: the list cannot be read
            EmptySource: the list holds no hostnames
        """
        ...

    @abstractmethod
    def persist_alive(self, hostnames: Sequence[str]) -> None:
        """Replace the alive cache with the given hostnames.

        Readers of ALIVE_LIST must never observe a half-written cache.
        """
        ...


def parse_hostnames(text: str) -> list[str]:
    """Parse one hostname per line, skipping blanks, comments and duplicates."""
    hostnames: list[str] = []
    seen: set[str] = set()
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip().lower().rstrip(".")
        if not line or line in seen:
            continue
        seen.add(line)
        hostnames.append(line)
    return hostnames


class FileBlacklistSource(BlacklistSource):
    """Hostname lists stored as ``<directory>/<list_name>.txt`` files."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.logger = logging.getLogger(__name__)

    def path_for(self, list_name: str) -> Path:
        return self.directory / f"{list_name}.txt"

    def load_named(self, list_name: str) -> list[str]:
        path = self.path_for(list_name)
        if list_name == FULL_LIST and not path.exists():
            self.logger.debug(f"{path} not found, using packaged default list")
            path = DEFAULT_FULL_LIST_PATH

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceUnavailable(f"Cannot read blacklist file {path}: {e}") from e

        hostnames = parse_hostnames(text)
        if not hostnames:
            raise EmptySource(f"Blacklist file {path} has no hostnames")

        self.logger.debug(f"Loaded {len(hostnames)} hostnames from {path}")
        return hostnames

    def persist_alive(self, hostnames: Sequence[str]) -> None:
        if not hostnames:
            raise EmptySource("No alive blacklist hostnames to persist")

        path = self.path_for(ALIVE_LIST)
        content = "".join(f"{h}\n" for h in hostnames)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write next to the target so os.replace stays on one filesystem
            fd, tmp_name = tempfile.mkstemp(
                dir=self.directory, prefix=f".{ALIVE_LIST}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise SourceUnavailable(f"Cannot write alive cache {path}: {e}") from e

        self.logger.info(f"Wrote {len(hostnames)} alive blacklists to {path}")

    def delete_alive(self) -> None:
        """Remove the alive cache; a missing cache is not an error."""
        path = self.path_for(ALIVE_LIST)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise SourceUnavailable(f"Cannot delete alive cache {path}: {e}") from e
        self.logger.info(f"Deleted alive cache {path}")
