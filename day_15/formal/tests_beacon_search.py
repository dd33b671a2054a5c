"""
Tests for part two (distress beacon search), report parsing and the CLI.
"""

import os
import sys

import pytest
from hypothesis import given, settings, strategies as st

from software_reference.sensor_report import (
    NoSolutionFoundError,
    ReportFormatError,
    Sensor,
    is_covered,
    manhattan_distance,
    parse_report,
    read_input,
)
from software_reference.beacon_search import (
    BeaconSearch,
    find_uncovered_point,
    find_uncovered_point_by_rows,
    main,
    perimeter_points,
    tuning_frequency,
)


EXAMPLE_INPUT = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                             "..", "testcases", "example_input.txt")

EXAMPLE_REPORT = read_input(EXAMPLE_INPUT)


small = st.integers(min_value=-60, max_value=60)
sensor_strategy = st.builds(Sensor, st.tuples(small, small), st.tuples(small, small))

tiny = st.integers(min_value=-15, max_value=15)
tiny_sensor_strategy = st.builds(Sensor, st.tuples(tiny, tiny), st.tuples(tiny, tiny))


@given(sensor_strategy)
def test_perimeter_points_just_outside(sensor):
    points = list(perimeter_points(sensor))

    assert points
    for point in points:
        assert manhattan_distance(sensor.position, point) == sensor.radius + 1
        assert not sensor.covers(point)


@given(tiny_sensor_strategy)
@settings(max_examples=50)
def test_perimeter_is_complete(sensor):
    sx, sy = sensor.position
    d = sensor.radius + 1
    expected = {
        (x, y)
        for x in range(sx - d, sx + d + 1)
        for y in range(sy - d, sy + d + 1)
        if manhattan_distance(sensor.position, (x, y)) == d
    }

    assert set(perimeter_points(sensor)) == expected


def test_example_distress_beacon():
    point = find_uncovered_point(EXAMPLE_REPORT, (0, 20))

    assert point == (14, 11)
    assert not is_covered(EXAMPLE_REPORT, point)
    assert tuning_frequency(point) == 56000011


@given(st.permutations(EXAMPLE_REPORT))
@settings(max_examples=25)
def test_order_independence(report):
    assert find_uncovered_point(report, (0, 20)) == (14, 11)


def test_row_scan_agrees():
    assert find_uncovered_point_by_rows(EXAMPLE_REPORT, (0, 20)) == (14, 11)


def test_free_corner():
    # Radius 3 around (2, 2) covers the 3x3 square except (0, 0)
    report = [Sensor((2, 2), (2, -1))]

    assert find_uncovered_point(report, (0, 2)) == (0, 0)
    assert find_uncovered_point_by_rows(report, (0, 2)) == (0, 0)


def test_single_cell_square():
    report = [Sensor((5, 5), (5, 6))]

    assert find_uncovered_point(report, (0, 0)) == (0, 0)


def test_fully_covered_single_cell():
    with pytest.raises(NoSolutionFoundError):
        find_uncovered_point([Sensor((0, 0), (0, 0))], (0, 0))


def test_fully_covered_square():
    report = [Sensor((0, 0), (5, 5))]

    with pytest.raises(NoSolutionFoundError):
        find_uncovered_point(report, (0, 3))
    with pytest.raises(NoSolutionFoundError):
        find_uncovered_point_by_rows(report, (0, 3))


def test_search_statistics():
    search = BeaconSearch(EXAMPLE_REPORT)
    search.find((0, 20))
    stats = search.get_statistics()

    assert stats['sensors'] == 14
    assert 1 <= stats['sensors_walked'] <= 14
    assert stats['candidates_tested'] >= 1


def test_tuning_frequency_is_exact():
    assert tuning_frequency((4000000, 4000000)) == 16000004000000
    assert tuning_frequency((3, 7), scale=10) == 37


# Parsing
def test_parse_report():
    text = (
        "Sensor at x=2, y=18: closest beacon is at x=-2, y=15\r\n"
        "\n"
        "Sensor at x=-9, y=-16: closest beacon is at x=10, y=16\n"
    )
    assert parse_report(text) == [
        Sensor((2, 18), (-2, 15)),
        Sensor((-9, -16), (10, 16)),
    ]


def test_parse_report_rejects_malformed_line():
    text = "Sensor at x=2, y=18: closest beacon is at x=-2, y=15\nSensor at x=1, y=2\n"

    with pytest.raises(ReportFormatError, match="line 2"):
        parse_report(text)


def test_sensor_radius():
    sensor = Sensor((8, 7), (2, 10))

    assert sensor.radius == 9
    assert sensor.covers((2, 10))
    assert not sensor.covers((1, 10))


# Command line
def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, 'argv', ['beacon-zone', *args])
    return main()


def test_cli_example(monkeypatch, capsys):
    assert run_cli(monkeypatch, EXAMPLE_INPUT, '--row', '10', '--bounds', '0', '20') == 0
    assert capsys.readouterr().out.split() == ['26', '56000011']


def test_cli_row_strategy(monkeypatch, capsys):
    assert run_cli(monkeypatch, EXAMPLE_INPUT, '--row', '10', '--bounds', '0', '20',
                   '--strategy', 'rows', '--verbose') == 0
    captured = capsys.readouterr()
    assert captured.out.split() == ['26', '56000011']
    assert 'Distress beacon: (14, 11)' in captured.err


def test_cli_reports_errors(monkeypatch, capsys):
    assert run_cli(monkeypatch, EXAMPLE_INPUT, '--row', '1000', '--bounds', '0', '20') == 1
    assert capsys.readouterr().err.startswith('Error: no sensor reaches row')
