from __future__ import annotations

import argparse
import logging

from .config import MAX_THREADS, TIMEOUT_MS, ScanConfig
from .errors import MissingArgument, PortScanError
from .logger import setup_logging
from .output import print_results
from .ports import parse_ports
from .scanner import scan
from .targets import resolve_targets

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="portprobe", description="Concurrent TCP connect port scanner")
    p.add_argument("-t", "--target", action="append", default=[],
                   help="IP, CIDR, or hostname (repeatable)")
    p.add_argument("-p", "--ports", action="append", default=[],
                   help="Port spec: 1-1024, 22,80,443, common_ports, all or mixed (repeatable)")
    p.add_argument("--timeout", type=int, default=TIMEOUT_MS,
                   help=f"Per-probe connect timeout in ms (default: {TIMEOUT_MS})")
    p.add_argument("--threads", type=int, default=MAX_THREADS,
                   help=f"Worker thread ceiling (default: {MAX_THREADS})")
    p.add_argument("--progress-every", type=int, default=0,
                   help="Log progress every N probes (default: off)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every probe outcome")
    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if not args.target or not args.ports:
            raise MissingArgument("Usage: portprobe -t <target> -p <ports>")

        config = ScanConfig(
            timeout_ms=args.timeout,
            max_threads=args.threads,
            progress_every=args.progress_every,
        )
        addresses = resolve_targets(args.target)
        ports = parse_ports(args.ports)

        total = len(addresses) * len(ports)
        print(f"Scanning {len(addresses)} addrs x {len(ports)} ports = {total} total...")
        report = scan(addresses, ports, config=config)
    except PortScanError as e:
        log.error("%s", e)
        return 2

    print_results(report)
    return 0
