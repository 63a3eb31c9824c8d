"""
dnsbl-registry - check IP addresses against DNS blacklists.

Loads the cached list of alive DNSBL hostnames (or rebuilds it from the
full list), then checks each target IP against every responsive list.

Environment Variables:
    DNSBL_DIR               Directory with blacklists.txt / blacklistsAlive.txt
    DNSBL_NAMESERVERS       Comma-separated resolvers (default: system)
    DNSBL_TIMEOUT           Per-server DNS timeout in seconds (default: 5)
    DNSBL_LIFETIME          Total DNS query lifetime in seconds (default: 10)
    DNSBL_MAX_WORKERS       Parallel DNS queries (default: 20)
    DNSBL_ROUND_TIMEOUT     Deadline for one listing round in seconds
    DNSBL_CHECK_RESPONSE    Re-check liveness between targets (default: true)
    DNSBL_IP_APIS           Comma-separated public IP detection APIs

Usage:
    dnsbl-registry [--ip IP[,IP...]] [--blacklists HOST[,HOST...]] [--rebuild]
"""

import argparse
import logging
from typing import Optional, Sequence

from .checker import BlacklistChecker
from .config import ProbeConfig
from .exceptions import DnsblRegistryError, SourceUnavailable
from .ip import detect_ip
from .probes import ResolverProbe
from .registry import ProbeRegistry
from .sources import FileBlacklistSource


def setup_logging(verbose: bool = False) -> None:
    """Configure logging"""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _split(value: str) -> list[str]:
    return [x.strip() for x in value.split(",") if x.strip()] if value else []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check IP addresses against DNS blacklists"
    )
    parser.add_argument(
        "--ip",
        type=str,
        default="",
        help="Comma-separated IPs to check (default: detect public IP)",
    )
    parser.add_argument(
        "--blacklists",
        type=str,
        default=None,
        help="Comma-separated DNSBL hostnames to use instead of the alive cache",
    )
    parser.add_argument(
        "--rebuild",
        action="store_true",
        help="Re-check the full blacklist list and refresh the alive cache",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Delete the alive cache before building",
    )
    parser.add_argument(
        "--dir",
        type=str,
        default="",
        help="Blacklist directory (overrides DNSBL_DIR)",
    )
    parser.add_argument(
        "--nameserver",
        type=str,
        default="",
        help="Comma-separated DNS resolvers (overrides DNSBL_NAMESERVERS)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="",
        help="YAML config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def build_registry(
    registry: ProbeRegistry,
    source: FileBlacklistSource,
    args: argparse.Namespace,
) -> None:
    """Populate the registry according to the command-line options."""
    logger = logging.getLogger(__name__)

    if args.clear_cache:
        source.delete_alive()

    # An option that yields no hostnames is rejected, not ignored
    if args.blacklists is not None:
        registry.build_from_alive_cache(_split(args.blacklists))
    elif args.rebuild:
        registry.rebuild_alive_cache_from_full()
    else:
        try:
            registry.build_from_alive_cache()
        except SourceUnavailable:
            logger.info("No alive cache found, building it from the full list")
            registry.rebuild_alive_cache_from_full()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = (
            ProbeConfig.from_file(args.config) if args.config else ProbeConfig.from_env()
        )
        if args.dir:
            config.blacklist_dir = args.dir
        if args.nameserver:
            config.nameservers = _split(args.nameserver)

        targets = _split(args.ip)
        if not targets:
            detected = detect_ip(config.ip_apis)
            if not detected:
                logger.error("Could not detect public IP. Use --ip")
                return 2
            targets = [detected]

        source = FileBlacklistSource(config.blacklist_dir)
        probe = ResolverProbe(config.nameservers, config.timeout, config.lifetime)
        registry = ProbeRegistry(source, probe, max_workers=config.max_workers)
        checker = BlacklistChecker(
            registry, probe, config.max_workers, config.round_timeout
        )

        build_registry(registry, source, args)

        total_listed = 0
        for i, target in enumerate(targets):
            if i > 0:
                registry.reset_round(config.check_response)

            logger.info(f"{'=' * 60}")
            logger.info(f"Checking IP: {target}")
            logger.info(f"{'=' * 60}")

            listed = checker.check(target)
            summary = checker.summary()
            if listed:
                logger.warning(
                    f"LISTED on {summary.listed} blacklist(s), "
                    f"clean on {summary.responsive - summary.listed}"
                )
                total_listed += len(listed)
            else:
                logger.info(f"Clean on all {summary.responsive} responsive blacklists")

    except DnsblRegistryError as e:
        logger.error(str(e))
        return 2

    if total_listed > 0:
        logger.warning(f"SUMMARY: Found {total_listed} listing(s)")
        return 1
    logger.info("SUMMARY: All targets clean!")
    return 0
