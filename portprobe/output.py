from __future__ import annotations

from .models import ScanReport, ScanResult


def format_row(r: ScanResult) -> str:
    return f"  {r}"


def print_results(report: ScanReport) -> None:
    print()
    print("Scan complete. Open ports found:")
    if not report.results:
        print("None")
    for r in report.results:
        print(format_row(r))

    if report.dropped:
        print(f"({report.dropped} open ports could not be recorded)")
