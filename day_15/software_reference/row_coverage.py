"""
Row Coverage - Part One: Count Beacon-Free Positions on a Row

Projects every sensor's exclusion diamond onto a single row, merges the
resulting spans and counts the covered positions, minus the known beacons
that sit on that row.

Projection:
    At vertical offset k from the sensor, the diamond's half-width is
    radius - k. When that is negative the disk does not reach the row.

Usage:
    python3 -m software_reference.row_coverage <input_file> [row]
"""

import sys
from typing import Iterable, List, Optional, Tuple

from software_reference.sensor_report import (
    EmptyCoverageError,
    Sensor,
    known_beacons,
    read_input,
)


Span = Tuple[int, int]


def row_span(sensor: Sensor, y: int) -> Optional[Span]:
    """
    Horizontal slice of a sensor's exclusion disk on row y.

    Args:
        sensor: Sensor record
        y: Target row

    Returns:
        tuple: (low, high) closed span, or None if the disk misses the row
    """
    sx, sy = sensor.position
    d = sensor.radius - abs(sy - y)
    if d < 0:
        return None
    return (sx - d, sx + d)


def project_row(report: Iterable[Sensor], y: int) -> List[Span]:
    """Spans of every sensor that reaches row y, in report order."""
    spans = []
    for sensor in report:
        span = row_span(sensor, y)
        if span is not None:
            spans.append(span)
    return spans


def merge_all_spans(spans):
    """
    Merge all overlapping or adjacent spans in a single pass.

    Args:
        spans: List of (low, high) tuples

    Returns:
        list: Disjoint spans sorted by low, each one a maximal run

    Algorithm:
        1. Sort spans by low position
        2. Keep the last merged span as the running span
        3. A span starting at or before running.high + 1 extends it, since
           [.., 5] and [6, ..] leave no integer between them
        4. Otherwise the running span is final and a new one starts

    An empty input is a caller error; it yields an empty list.

    Time Complexity: O(n log n) where n is the number of spans
    """
    if not spans:
        return []

    sorted_spans = sorted(spans)
    merged = [sorted_spans[0]]

    for current_low, current_high in sorted_spans[1:]:
        last_low, last_high = merged[-1]

        if current_low <= last_high + 1:
            merged[-1] = (last_low, max(last_high, current_high))
        else:
            merged.append((current_low, current_high))

    return merged


def calculate_total_coverage(spans):
    """
    Calculate total number of integers covered by disjoint spans.

    Args:
        spans: List of (low, high) tuples, already merged

    Returns:
        int: Count of integers in all spans
    """
    total = 0
    for low, high in spans:
        total += high - low + 1
    return total


def is_in_spans(value, spans):
    """
    Check if a value falls within any of the merged spans using binary search.

    Args:
        value: Integer to check
        spans: List of (low, high) tuples, sorted by low, non-overlapping

    Returns:
        bool: True if value is in any span, False otherwise
    """
    left, right = 0, len(spans) - 1

    while left <= right:
        mid = (left + right) // 2
        low, high = spans[mid]

        if value < low:
            right = mid - 1
        elif value > high:
            left = mid + 1
        else:
            return True

    return False


def count_row_coverage(report: List[Sensor], y: int) -> int:
    """
    Count positions on row y that cannot contain a beacon.

    Args:
        report: Sensor records
        y: Row to inspect

    Returns:
        int: Covered positions minus known beacons lying on the row

    Raises:
        EmptyCoverageError: if no sensor disk reaches the row
    """
    spans = project_row(report, y)
    if not spans:
        raise EmptyCoverageError(f"no sensor reaches row y={y}")

    merged = merge_all_spans(spans)
    total = calculate_total_coverage(merged)

    # Only beacons are subtracted; a sensor's own cell is still beacon-free.
    beacons_on_row = [
        bx for bx, by in known_beacons(report)
        if by == y and is_in_spans(bx, merged)
    ]

    return total - len(beacons_on_row)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python3 -m software_reference.row_coverage <input_file> [row]")
        sys.exit(1)

    input_file = sys.argv[1]
    row = int(sys.argv[2]) if len(sys.argv) > 2 else 2000000
    report = read_input(input_file)

    print(f"Beacon-free positions on row {row}: {count_row_coverage(report, row)}")
