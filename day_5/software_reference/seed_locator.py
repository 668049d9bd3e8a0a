#!/usr/bin/env python3
"""
Seed Locator - command-line driver

Question 1: lowest location of the individual seeds.
Question 2: lowest location of the paired seed ranges, computed either by
interval splitting (split), by parallel enumeration of every seed
(enumerate), or by both with a comparison report (compare).

Usage:
    python -m software_reference.seed_locator [input_file] -q 2 --verbose
"""

import argparse
import sys
import time

from software_reference.almanac import (
    PAIRINGS,
    AlmanacError,
    expand_points,
    expand_ranges,
    minimize_points,
    minimize_ranges,
)
from software_reference.almanac_reader import build_pipeline, parse_almanac
from software_reference.brute_force import enumerate_minimum
from software_reference.intervals import total_length


STRATEGIES = ("split", "enumerate", "compare")


def solve_split(pipeline, ranges, verbose=False):
    """Interval-splitting answer to question 2, with per-stage statistics."""
    start_time = time.time()
    history = pipeline.trace_ranges(ranges, coalesce=True)
    elapsed = time.time() - start_time

    final = history[-1] if history else ranges
    result = minimize_ranges(final)

    if verbose:
        print(f"  Interval splitting: {elapsed:.3f}s", file=sys.stderr)
        for stage, fragments in zip(pipeline, history):
            print(f"    {stage.name or 'stage'}: {len(fragments)} fragments", file=sys.stderr)

    return result


def solve_enumerate(pipeline, ranges, workers=None, verbose=False):
    """Parallel enumeration answer to question 2."""
    start_time = time.time()
    result = enumerate_minimum(pipeline, ranges, max_workers=workers)
    elapsed = time.time() - start_time

    if verbose:
        print(f"  Enumeration: {total_length(ranges)} seeds in {elapsed:.3f}s", file=sys.stderr)

    return result


def compare_strategies(pipeline, ranges, workers=None, verbose=False):
    """Run both strategies; return (exit_code, split_result)."""
    print("=" * 70)
    print("Interval Splitting vs Enumeration")
    print("=" * 70)

    split_result = solve_split(pipeline, ranges, verbose=verbose)
    print(f"  Interval splitting: {split_result}")

    enumerate_result = solve_enumerate(pipeline, ranges, workers=workers, verbose=verbose)
    print(f"  Enumeration:        {enumerate_result}")

    print()
    if split_result == enumerate_result:
        print(f"[OK] Results match: {split_result}")
        return 0, split_result

    print("[BAD] Results differ:")
    print(f"    Interval splitting: {split_result}")
    print(f"    Enumeration:        {enumerate_result}")
    return 1, split_result


def build_parser():
    parser = argparse.ArgumentParser(
        description='Find the lowest location reachable from the almanac seeds'
    )
    parser.add_argument('input_file', nargs='?', type=argparse.FileType('r'),
                        default=sys.stdin,
                        help='Almanac input file (default: stdin)')
    parser.add_argument('--question', '-q', type=int, choices=(1, 2), default=2,
                        help='1: individual seeds, 2: seed ranges (default: 2)')
    parser.add_argument('--pairing', choices=PAIRINGS, default=None,
                        help='How seed pairs form ranges, question 2 only '
                             '(bounds: [min, max), length: [start, start+length); '
                             'default: bounds)')
    parser.add_argument('--strategy', choices=STRATEGIES, default=None,
                        help='Question 2 solver (default: split)')
    parser.add_argument('--workers', type=int, default=None,
                        help='Worker processes for enumeration, question 2 only '
                             '(default: CPU count)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print statistics to stderr')
    return parser


def main(argv=None):
    """Command-line interface for the seed locator."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.question == 1:
        if args.pairing or args.strategy or args.workers is not None:
            parser.error('--pairing, --strategy and --workers only apply to question 2')
    else:
        args.pairing = args.pairing or 'bounds'
        args.strategy = args.strategy or 'split'

    try:
        seeds, tables, names = parse_almanac(args.input_file.read())
        pipeline = build_pipeline(tables, names)

        if args.verbose:
            print(f"Seeds: {len(seeds)}", file=sys.stderr)
            print(f"Stages: {len(pipeline)}", file=sys.stderr)
            for stage in pipeline:
                print(f"  {stage.name or 'stage'}: {len(stage)} entries", file=sys.stderr)

        if args.question == 1:
            print(minimize_points(pipeline.apply_points(expand_points(seeds))))
            return 0

        ranges = expand_ranges(seeds, pairing=args.pairing)
        if args.verbose:
            print(f"Seed ranges: {len(ranges)} covering {total_length(ranges)} seeds",
                  file=sys.stderr)

        if args.strategy == 'split':
            result = solve_split(pipeline, ranges, verbose=args.verbose)
        elif args.strategy == 'enumerate':
            result = solve_enumerate(pipeline, ranges, workers=args.workers, verbose=args.verbose)
        else:
            exit_code, result = compare_strategies(pipeline, ranges, workers=args.workers,
                                                   verbose=args.verbose)
            return exit_code

    except (AlmanacError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result)
    return 0


if __name__ == '__main__':
    sys.exit(main())
