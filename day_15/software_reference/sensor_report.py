"""
Sensor Report - Input Parsing and Manhattan Geometry

Parses the sensor/beacon report and provides the geometric primitives shared
by both parts of the puzzle.

Each sensor knows the position of its closest beacon. Under the Manhattan
metric that beacon defines an exclusion disk (a diamond): no other beacon can
be closer to the sensor than the one it reported, so every position with
distance <= radius is known to be beacon-free (except the beacon itself).

Input format (one sensor per line):
    Sensor at x=2, y=18: closest beacon is at x=-2, y=15
"""

import re
from typing import Iterable, List, NamedTuple, Set, Tuple


Coordinate = Tuple[int, int]

INTEGER_PATTERN = re.compile(r"-?\d+")


class SensorCoverageError(Exception):
    """Base class for all errors raised by the sensor coverage solver."""


class ReportFormatError(SensorCoverageError, ValueError):
    """A report line could not be parsed into a sensor record."""


class EmptyCoverageError(SensorCoverageError, ValueError):
    """No sensor disk reaches the queried row."""


class NoSolutionFoundError(SensorCoverageError, LookupError):
    """The search exhausted every candidate without finding a free position."""


def manhattan_distance(a: Coordinate, b: Coordinate) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class Sensor(NamedTuple):
    """
    A sensor and the closest beacon it detected.

    The exclusion radius is derived from the two positions and never stored.
    """

    position: Coordinate
    beacon: Coordinate

    @property
    def radius(self) -> int:
        return manhattan_distance(self.position, self.beacon)

    def covers(self, point: Coordinate) -> bool:
        """Check if point lies inside this sensor's exclusion disk."""
        return manhattan_distance(self.position, point) <= self.radius


def is_covered(report: Iterable[Sensor], point: Coordinate) -> bool:
    """
    Check if any sensor in the report excludes the given point.

    Args:
        report: Sensors to test against
        point: (x, y) position

    Returns:
        bool: True if at least one sensor's disk contains the point
    """
    return any(sensor.covers(point) for sensor in report)


def known_beacons(report: Iterable[Sensor]) -> Set[Coordinate]:
    """Distinct beacon positions (several sensors may report the same one)."""
    return {sensor.beacon for sensor in report}


def parse_line(line: str, line_number: int = 0) -> Sensor:
    values = [int(v) for v in INTEGER_PATTERN.findall(line)]
    if len(values) != 4:
        raise ReportFormatError(
            f"line {line_number}: expected 4 integers, found {len(values)}: {line!r}"
        )
    sx, sy, bx, by = values
    return Sensor((sx, sy), (bx, by))


def parse_report(text: str) -> List[Sensor]:
    """
    Parse a full report.

    Args:
        text: Report text, one sensor per line

    Returns:
        list: Sensor records in input order

    Blank lines and carriage returns are ignored.
    """
    report = []
    for line_number, line in enumerate(text.replace("\r", "").split("\n"), start=1):
        line = line.strip()
        if not line:
            continue
        report.append(parse_line(line, line_number))
    return report


def read_input(filename):
    """
    Read input file containing the sensor report.

    Args:
        filename: Path to input file

    Returns:
        list: Sensor records in input order
    """
    with open(filename) as f:
        return parse_report(f.read())
