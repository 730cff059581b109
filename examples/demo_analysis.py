#!/usr/bin/env python3
"""
Demo: Route Analysis of an Access Log

This script analyzes an Apache combined-format access log:
- Overview per route (requests, aborted, failed, avg time, bandwidth)
- Status and method breakdowns
- Slowest URL per method (derived group)

Usage:
    python demo_analysis.py LOGFILE [--route ROUTE ...]

Examples:
    python demo_analysis.py access.log --route "GET /api/:resource" --route /static
    python demo_analysis.py access.log  # Overall statistics only
"""

import argparse
import json
import sys
import time
from pathlib import Path

from loganalyzer import Analyzer
from loganalyzer.config import parse_route

COMBINED_FORMAT = (
    ':remote-addr - :remote-user [:datetime] ":method :url HTTP/:http-version" '
    ':status :content-length ":referrer" ":user-agent"'
)


def slowest_url(records):
    """Derived group value: the url with the largest response time"""
    timed = [r for r in records if r.get('response-time')]
    if not timed:
        return None
    return max(timed, key=lambda r: r['response-time'])['url']


def main():
    parser = argparse.ArgumentParser(description="Analyze a combined-format access log")
    parser.add_argument("logfile")
    parser.add_argument("--route", action="append", default=[])
    args = parser.parse_args()

    log_path = Path(args.logfile)
    if not log_path.exists():
        print(f"❌ Log file not found: {log_path}")
        sys.exit(1)

    analyzer = Analyzer(COMBINED_FORMAT, ignore_mismatches=True)
    for route in args.route:
        analyzer.use(*parse_route(route))
    analyzer.group('status').group('method')
    analyzer.group('slowest', 'method', slowest_url)

    print(f"📂 Analyzing: {log_path}")
    start_time = time.time()
    outcome = analyzer.analyze_file(log_path)
    elapsed = time.time() - start_time

    if not outcome.ok:
        print(f"❌ {outcome.error}")
        sys.exit(1)

    print(f"✓ {outcome.record_count} records in {elapsed:.2f}s ({outcome.skipped} skipped)")
    for label, analysis in outcome.result.items():
        print(f"\n{'='*60}\n{label}\n{'='*60}")
        print(json.dumps(analysis, indent=2, default=str))


if __name__ == "__main__":
    main()
