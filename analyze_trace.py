#!/usr/bin/env python3
"""
Transaction Trace Analyzer - Command Line Interface
"""

import json
import sys
from txn_trace import WaterfallAnalyzer
from txn_trace.formatters import format_offset, format_time
from txn_trace.web import prepare_results


def print_summary(analyzer, result, top):
    print(f"\nTrace {result.trace_id} ({result.correlation_type.value})")
    print(f"  Duration: {format_time(result.total_duration_ms)}")
    print(f"  Spans: {result.span_count}, errors: {result.error_count}")
    print(f"  Primary user: {result.primary_user or '-'}, primary queue: {result.primary_queue or '-'}")
    breakdown = ', '.join(f"{k}={v}" for k, v in sorted(result.type_breakdown.items()))
    print(f"  Types: {breakdown}")
    if result.critical_path:
        print(f"  Critical path: {' -> '.join(result.critical_path)}")
    for span in analyzer.stats_aggregator.find_slowest_spans(result.flat_spans, top):
        marker = '*' if span.on_critical_path else ' '
        print(f"   {marker} {span.id:<24} {format_offset(span.start_offset_ms):>12} "
              f"{format_time(span.duration_ms):>12} {span.contribution_pct:6.2f}%")


def main():
    import argparse
    parser = argparse.ArgumentParser(
        description='Reconstruct call trees and critical paths from rule engine log entries.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_trace.py entries.json
  python analyze_trace.py entries.json --top 10
  python analyze_trace.py entries.json --no-critical-path -o waterfall.json
        """
    )
    parser.add_argument('input_file', help='Path to the entry JSON file')
    parser.add_argument('-o', '--output', dest='output_file', default=None,
                        help='Write the waterfall documents to this JSON file')
    parser.add_argument('--no-critical-path', action='store_true',
                        help='Skip critical path computation')
    parser.add_argument('--top', type=int, default=5,
                        help='Number of slowest spans to list per trace')
    args = parser.parse_args()

    analyzer = WaterfallAnalyzer(include_critical_path=not args.no_critical_path)

    try:
        print(f"\nConfiguration:")
        print(f"  Input file: {args.input_file}")
        print(f"  Critical path: {not args.no_critical_path}\n")
        results = analyzer.analyze_file(args.input_file)

        for result in results.values():
            print_summary(analyzer, result, args.top)

        if args.output_file:
            with open(args.output_file, 'w') as f:
                json.dump([prepare_results(r) for r in results.values()], f, indent=2)
            print(f"\nWrote {args.output_file}")

        print(f"\n✓ Analysis complete!")
    except FileNotFoundError:
        print(f"Error: File '{args.input_file}' not found.")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
