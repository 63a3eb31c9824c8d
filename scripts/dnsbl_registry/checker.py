"""Blacklist checker running one probe round over a ProbeRegistry."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Optional

from .models import ListingResult, ProbeEntry, RoundSummary
from .probes import DnsProbe
from .registry import ProbeRegistry


class BlacklistChecker:
    """Checks a target against every responsive blacklist in the registry."""

    def __init__(
        self,
        registry: ProbeRegistry,
        probe: DnsProbe,
        max_workers: int = 20,
        round_timeout: Optional[float] = None,
    ):
        self.registry = registry
        self.probe = probe
        self.max_workers = max_workers
        self.round_timeout = round_timeout
        self.logger = logging.getLogger(__name__)

    def check(self, target: str) -> list[ProbeEntry]:
        """Run listing checks in parallel and return the positive entries.

        Results are applied by the calling thread once each check
        finishes. Checks that fail or are still running at round_timeout
        leave their entry marked unresponsive.
        """
        entries = self.registry.get_entries()
        self.probe.reverse_target(target)  # raises InvalidInput early

        indices = [i for i, e in enumerate(entries) if e.responsive]
        self.logger.info(
            f"Checking {target} against {len(indices)} of {len(entries)} DNSBLs..."
        )
        if not indices:
            return []

        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(indices)))
        futures: dict[Future[ListingResult], int] = {
            executor.submit(self.probe.check_listing, entries[i].host_name, target): i
            for i in indices
        }
        pending = set(futures)

        try:
            for future in as_completed(futures, timeout=self.round_timeout):
                pending.discard(future)
                index = futures[future]
                try:
                    self.registry.set_listing_result(index, future.result())
                except Exception as e:
                    self.logger.warning(
                        f"Failed to check {entries[index].host_name}: {e}"
                    )
                    self.registry.mark_unresponsive(index)
        except FuturesTimeoutError:
            self.logger.warning(
                f"Round timed out after {self.round_timeout}s, "
                f"{len(pending)} check(s) unfinished"
            )
            for future in pending:
                future.cancel()
                self.registry.mark_unresponsive(futures[future])
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        listed = [e for e in entries if e.positive]
        for entry in listed:
            self.logger.warning(
                f"  - {entry.host_name}: {', '.join(entry.positive_evidence)}"
            )
        return listed

    def summary(self) -> RoundSummary:
        """Summarize the current round."""
        entries = self.registry.get_entries()
        listed = [e.host_name for e in entries if e.positive]
        return RoundSummary(
            total=len(entries),
            responsive=sum(1 for e in entries if e.responsive),
            listed=len(listed),
            listed_hosts=listed,
        )
