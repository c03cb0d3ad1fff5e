#!/usr/bin/env python3
"""
One-shot snapshot of process status and NFS server statistics.

Reads /proc/<pid>/status for each requested process and, unless disabled,
/proc/net/rpc/nfsd, then prints a summary and optionally saves JSON.

Usage (run from repo root):
    python scripts/procfs_snapshot.py --pid 1 --pid self
    python scripts/procfs_snapshot.py --no-nfsd --output status.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, List, Optional

# Add repo root to Python path for procscan package import
sys.path.insert(0, str(Path(__file__).parent.parent))

from procscan.core import ProcfsError
from procscan.constants import (
    STATUS_OK,
    STATUS_WARN,
    STATUS_ERROR,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    EXIT_INVALID_USAGE,
    PROC_ROOT,
    NFSD_STATS_PATH,
)
from procscan.collectors import ProcStatusCollector, NFSdCollector


def collect_snapshot(pids: List[str], proc_root: str = PROC_ROOT,
                     nfsd_path: Optional[str] = NFSD_STATS_PATH,
                     strict: bool = False) -> Dict[str, Any]:
    """
    Run every collector once.

    Args:
        pids: Process ids (or "self") to read status for
        proc_root: Mount point of procfs
        nfsd_path: NFS server statistics file, or None to skip it
        strict: Fail the NFS read on a malformed line

    Returns:
        Dictionary containing:
        - timestamp: ISO time of the snapshot
        - processes: Status dictionaries keyed by pid
        - nfsd: NFS server counters (when requested and readable)
        - failures: Messages from collectors that raised
    """
    results: Dict[str, Any] = {
        "timestamp": datetime.now().isoformat(),
        "processes": {},
        "failures": [],
    }

    for pid in pids:
        collector = ProcStatusCollector(pid=pid, proc_root=proc_root)
        try:
            results["processes"][pid] = collector.snapshot()["status"]
            print(f"Status {pid}: {STATUS_OK}")
        except ProcfsError as e:
            print(f"Status {pid}: {STATUS_ERROR} ({e})")
            results["failures"].append(str(e))

    if nfsd_path is not None:
        collector = NFSdCollector(path=nfsd_path, strict=strict)
        try:
            results.update(collector.snapshot())
            skipped = len(results["nfsd"]["errors"])
            status = STATUS_WARN if skipped else STATUS_OK
            print(f"NFS server stats: {status} ({len(results['nfsd']) - 1} tags, {skipped} skipped)")
        except ProcfsError as e:
            print(f"NFS server stats: {STATUS_ERROR} ({e})")
            results["failures"].append(str(e))

    return results


def print_summary(results: Dict[str, Any]) -> None:
    """
    Print snapshot summary.

    Args:
        results: Snapshot dictionary from collect_snapshot
    """
    print()
    print("=" * 60)
    print("Procfs Snapshot Summary")
    print("=" * 60)
    print(f"Timestamp: {results['timestamp']}")

    if results["processes"]:
        print("\n" + "-" * 60)
        print("Processes")
        print("-" * 60)
        print(f"{'PID':<10} {'RSS (kB)':>12} {'Size (kB)':>12} {'FDs':>6} {'Ctx sw':>12}")
        print("-" * 60)
        for pid, status in results["processes"].items():
            switches = status["voluntary_ctxt_switches"] + status["nonvoluntary_ctxt_switches"]
            print(f"{pid:<10} {status['vm_rss_kb']:>12,} {status['vm_size_kb']:>12,} "
                  f"{status['fd_size']:>6} {switches:>12,}")

    if "nfsd" in results:
        nfsd = results["nfsd"]
        print("\n" + "-" * 60)
        print("NFS Server")
        print("-" * 60)

        if "th" in nfsd:
            print(f"Threads: {nfsd['th']['threads']}")

        if "rc" in nfsd:
            rc = nfsd["rc"]
            print(f"Reply cache: {rc['hits']:,} hits, {rc['misses']:,} misses")

        if "rpc" in nfsd:
            print(f"RPC calls: {nfsd['rpc']['rpc_count']:,} ({nfsd['rpc']['bad_cnt']:,} bad)")

        for tag in ("proc2", "proc3", "proc4ops"):
            if tag in nfsd:
                print(f"{tag}: {nfsd[tag]['values']} counters reported")

        for error in nfsd["errors"]:
            print(f"Skipped: {error}")

    if results["failures"]:
        print(f"\nFailures: {len(results['failures'])}")

    print("=" * 60)


def save_results(results: Dict[str, Any], filename: str) -> str:
    """
    Save snapshot to JSON file.

    Args:
        results: Snapshot dictionary
        filename: Output filename

    Returns:
        Path to saved results file

    Raises:
        ProcfsError: If file cannot be saved
    """
    try:
        filepath = Path(filename)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved: {filename}")
        return str(filename)
    except OSError as e:
        raise ProcfsError(f"Failed to save results to {filename}: {e}") from e


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Snapshot /proc/<pid>/status and /proc/net/rpc/nfsd counters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Current process and NFS server counters
  python scripts/procfs_snapshot.py

  # Several processes, no NFS server
  python scripts/procfs_snapshot.py --pid 1 --pid 4242 --no-nfsd

  # Parse a captured proc tree
  python scripts/procfs_snapshot.py --proc-root ./capture --nfsd-path ./capture/nfsd
        """
    )

    parser.add_argument(
        "--pid",
        action="append",
        dest="pids",
        help="Process id to read status for, repeatable (default: self)"
    )

    parser.add_argument(
        "--proc-root",
        default=PROC_ROOT,
        help=f"procfs mount point (default: {PROC_ROOT})"
    )

    parser.add_argument(
        "--nfsd-path",
        default=NFSD_STATS_PATH,
        help=f"NFS server statistics file (default: {NFSD_STATS_PATH})"
    )

    parser.add_argument(
        "--no-nfsd",
        action="store_true",
        help="Skip NFS server statistics"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on malformed NFS statistics lines instead of skipping them"
    )

    parser.add_argument(
        "--output",
        help="Output JSON filename"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log parser diagnostics"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function to take one snapshot.

    Returns:
        Exit code: 0 for success, 1 if any collector failed, 2 for bad usage.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pids = args.pids or ["self"]
    invalid = [pid for pid in pids if pid != "self" and not pid.isdigit()]
    if invalid:
        print(f"ERROR: Invalid pid: {', '.join(invalid)}", file=sys.stderr)
        return EXIT_INVALID_USAGE

    try:
        results = collect_snapshot(
            pids,
            proc_root=args.proc_root,
            nfsd_path=None if args.no_nfsd else args.nfsd_path,
            strict=args.strict
        )

        print_summary(results)

        if args.output:
            save_results(results, args.output)

        return EXIT_FAILURE if results["failures"] else EXIT_SUCCESS

    except ProcfsError as e:
        print(f"ERROR: Snapshot failed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nSnapshot interrupted by user", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
