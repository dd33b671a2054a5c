#!/usr/bin/env python3
"""
Beacon Search - Part Two: Locate the Distress Beacon

Finds the only position inside the square [lo, hi] x [lo, hi] that no sensor
covers.

Scanning the whole square is out of the question (4M x 4M cells for the real
input). Because the free position is unique, each of its in-bounds neighbours
is covered by some sensor, which puts the free position at distance exactly
radius + 1 from that sensor. So only the diamond just outside each sensor's
disk needs to be walked:

    for k in 0..=radius+1:
        (sx + k, sy + d - k)   (sx - k, sy + d - k)
        (sx + k, sy - d + k)   (sx - k, sy - d + k)     with d = radius + 1

Each candidate inside the square is tested against every sensor, and the
first one nobody covers is the answer.

A row-by-row alternative (project, merge, look for a gap) is also provided.
It reuses the Part One machinery but is far slower on large squares.

Usage:
    python3 -m software_reference.beacon_search <input_file> [--row Y] [--bounds LO HI]
"""

import sys
import time
from typing import Iterator, List, Tuple

from software_reference.sensor_report import (
    Coordinate,
    NoSolutionFoundError,
    Sensor,
    SensorCoverageError,
    parse_report,
)
from software_reference.row_coverage import count_row_coverage, merge_all_spans, project_row


TUNING_SCALE = 4000000


def perimeter_points(sensor: Sensor) -> Iterator[Coordinate]:
    """
    Walk the diamond at distance radius + 1 around a sensor.

    Corner points are yielded twice; callers don't care.
    """
    sx, sy = sensor.position
    d = sensor.radius + 1
    for k in range(d + 1):
        yield (sx + k, sy + d - k)
        yield (sx - k, sy + d - k)
        yield (sx + k, sy - d + k)
        yield (sx - k, sy - d + k)


class BeaconSearch:
    """Perimeter search over an immutable report."""

    def __init__(self, report: List[Sensor]):
        # (sx, sy, radius) triples, so the radius is computed once per sensor
        self.discs = [(s.position[0], s.position[1], s.radius) for s in report]
        self.report = report
        self.candidates_tested = 0
        self.sensors_walked = 0

    def is_free(self, x: int, y: int) -> bool:
        for sx, sy, radius in self.discs:
            if abs(sx - x) + abs(sy - y) <= radius:
                return False
        return True

    def find(self, bounds: Tuple[int, int]) -> Coordinate:
        """
        Find the uncovered point inside the bounded square.

        Args:
            bounds: (lo, hi), inclusive on both axes

        Returns:
            tuple: (x, y) of the free position

        Raises:
            NoSolutionFoundError: if every candidate is covered
        """
        lo, hi = bounds
        self.candidates_tested = 0
        self.sensors_walked = 0

        # A one-cell square has no neighbours to pin the point to a perimeter
        if lo == hi:
            self.candidates_tested = 1
            if self.is_free(lo, lo):
                return (lo, lo)
            raise NoSolutionFoundError(f"({lo}, {lo}) is covered")

        for sensor in self.report:
            self.sensors_walked += 1
            for x, y in perimeter_points(sensor):
                if x < lo or x > hi or y < lo or y > hi:
                    continue
                self.candidates_tested += 1
                if self.is_free(x, y):
                    return (x, y)

        raise NoSolutionFoundError(
            f"no uncovered position in [{lo}, {hi}] x [{lo}, {hi}]"
        )

    def get_statistics(self) -> dict:
        """Return search statistics."""
        return {
            'sensors': len(self.report),
            'sensors_walked': self.sensors_walked,
            'candidates_tested': self.candidates_tested,
        }


def find_uncovered_point(report: List[Sensor], bounds: Tuple[int, int]) -> Coordinate:
    return BeaconSearch(report).find(bounds)


def find_uncovered_point_by_rows(report: List[Sensor], bounds: Tuple[int, int]) -> Coordinate:
    """
    Row-scan alternative: the first gap in the merged spans of any row.

    Args:
        report: Sensor records
        bounds: (lo, hi), inclusive on both axes

    Returns:
        tuple: First free (x, y) in row-major order

    Raises:
        NoSolutionFoundError: if every row is fully covered
    """
    lo, hi = bounds
    for y in range(lo, hi + 1):
        clipped = [
            (max(low, lo), min(high, hi))
            for low, high in project_row(report, y)
            if high >= lo and low <= hi
        ]

        x = lo
        for low, high in merge_all_spans(clipped):
            if low > x:
                return (x, y)
            x = max(x, high + 1)
        if x <= hi:
            return (x, y)

    raise NoSolutionFoundError(
        f"no uncovered position in [{lo}, {hi}] x [{lo}, {hi}]"
    )


def tuning_frequency(point: Coordinate, scale: int = TUNING_SCALE) -> int:
    x, y = point
    return x * scale + y


def main():
    """Command-line interface for both parts of the puzzle."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Count beacon-free positions and locate the distress beacon'
    )
    parser.add_argument('input_file', nargs='?', type=argparse.FileType('r'),
                        default=sys.stdin,
                        help='Input file with the sensor report (default: stdin)')
    parser.add_argument('--row', type=int, default=2000000,
                        help='Row inspected by part one (default: 2000000)')
    parser.add_argument('--bounds', type=int, nargs=2, metavar=('LO', 'HI'),
                        default=[0, 4000000],
                        help='Search square for part two (default: 0 4000000)')
    parser.add_argument('--scale', type=int, default=TUNING_SCALE,
                        help='Tuning frequency multiplier (default: 4000000)')
    parser.add_argument('--strategy', choices=['perimeter', 'rows'],
                        default='perimeter',
                        help='Part two search strategy (default: perimeter)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print timings and search statistics')
    args = parser.parse_args()

    try:
        report = parse_report(args.input_file.read())
        if args.verbose:
            print(f"Processing report with {len(report)} sensors", file=sys.stderr)

        start_time = time.time()
        count = count_row_coverage(report, args.row)
        part_one_elapsed = time.time() - start_time

        start_time = time.time()
        bounds = tuple(args.bounds)
        if args.strategy == 'rows':
            point = find_uncovered_point_by_rows(report, bounds)
            stats = None
        else:
            search = BeaconSearch(report)
            point = search.find(bounds)
            stats = search.get_statistics()
        part_two_elapsed = time.time() - start_time
    except SensorCoverageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(count)
    print(tuning_frequency(point, args.scale))

    if args.verbose:
        print(f"\nStatistics:", file=sys.stderr)
        print(f"  Part one time: {part_one_elapsed:.3f}s", file=sys.stderr)
        print(f"  Distress beacon: {point}", file=sys.stderr)
        print(f"  Part two time: {part_two_elapsed:.3f}s", file=sys.stderr)
        if stats:
            print(f"  Sensors walked: {stats['sensors_walked']}", file=sys.stderr)
            print(f"  Candidates tested: {stats['candidates_tested']}", file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
