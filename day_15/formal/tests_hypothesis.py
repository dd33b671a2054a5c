"""
Property-based tests for the row coverage algorithms using Hypothesis.

Checks the invariants of the span projector, the span merger and the row
coverage counter for all generated inputs, then pins down the concrete
puzzle examples.
"""

import os

import pytest
from hypothesis import given, strategies as st, assume, settings
from hypothesis.strategies import lists, tuples, integers

from software_reference.sensor_report import (
    EmptyCoverageError,
    Sensor,
    manhattan_distance,
    read_input,
)
from software_reference.row_coverage import (
    calculate_total_coverage,
    count_row_coverage,
    is_in_spans,
    merge_all_spans,
    row_span,
)


EXAMPLE_INPUT = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                             "..", "testcases", "example_input.txt")


@st.composite
def valid_span(draw):
    """Generate a valid span where low <= high."""
    low = draw(integers(min_value=-10000, max_value=10000))
    high = draw(integers(min_value=low, max_value=low + 200))
    return (low, high)


spans_strategy = lists(valid_span(), min_size=0, max_size=60)

coordinate = tuples(integers(min_value=-500, max_value=500),
                    integers(min_value=-500, max_value=500))
sensor_strategy = st.builds(Sensor, coordinate, coordinate)


def spans_to_set(spans):
    """Convert a list of spans to the set of all integers covered."""
    result = set()
    for low, high in spans:
        result.update(range(low, high + 1))
    return result


# Property 1: projector misses the row exactly when the row is out of reach
@given(sensor_strategy, integers(min_value=-1500, max_value=1500))
def test_row_span_presence(sensor, y):
    span = row_span(sensor, y)
    reach = abs(sensor.position[1] - y)

    if reach > sensor.radius:
        assert span is None
    else:
        sx = sensor.position[0]
        half_width = sensor.radius - reach
        assert span == (sx - half_width, sx + half_width)


# Property 2: every cell of the span is inside the disk, its neighbours are not
@given(sensor_strategy, integers(min_value=-1500, max_value=1500))
def test_row_span_edges(sensor, y):
    span = row_span(sensor, y)
    assume(span is not None)
    low, high = span

    assert sensor.covers((low, y))
    assert sensor.covers((high, y))
    assert not sensor.covers((low - 1, y))
    assert not sensor.covers((high + 1, y))


# Property 3: merged spans cover the same integers
@given(spans_strategy)
@settings(max_examples=500)
def test_coverage_preservation(spans):
    merged = merge_all_spans(spans)
    assert spans_to_set(merged) == spans_to_set(spans)


# Property 4: output sorted, with a gap of at least one integer between spans
@given(spans_strategy)
def test_output_sorted_and_separated(spans):
    merged = merge_all_spans(spans)
    for (_, high_a), (low_b, _) in zip(merged, merged[1:]):
        assert high_a + 1 < low_b


# Property 5: idempotence
@given(spans_strategy)
def test_idempotence(spans):
    merged_once = merge_all_spans(spans)
    assert merge_all_spans(merged_once) == merged_once


# Property 6: order independence
@given(spans_strategy, st.randoms(use_true_random=False))
def test_order_independence(spans, rnd):
    shuffled = list(spans)
    rnd.shuffle(shuffled)
    assert merge_all_spans(shuffled) == merge_all_spans(spans)


# Property 7: total coverage counts unique integers
@given(spans_strategy)
def test_coverage_calculation(spans):
    merged = merge_all_spans(spans)
    assert calculate_total_coverage(merged) == len(spans_to_set(spans))


# Property 8: binary search agrees with membership
@given(spans_strategy, integers(min_value=-10500, max_value=10500))
def test_is_in_spans(spans, value):
    merged = merge_all_spans(spans)
    assert is_in_spans(value, merged) == (value in spans_to_set(merged))


# Property 9: row coverage equals brute force counting
@given(lists(sensor_strategy, min_size=1, max_size=6), integers(min_value=-600, max_value=600))
@settings(max_examples=200)
def test_row_coverage_brute_force(report, y):
    spans = [row_span(s, y) for s in report]
    assume(any(span is not None for span in spans))

    beacons = {s.beacon for s in report}
    lo = min(span[0] for span in spans if span is not None)
    hi = max(span[1] for span in spans if span is not None)
    expected = sum(
        1 for x in range(lo, hi + 1)
        if any(s.covers((x, y)) for s in report) and (x, y) not in beacons
    )

    assert count_row_coverage(report, y) == expected


# Property 10: adding a sensor never lowers the count
@given(lists(sensor_strategy, min_size=1, max_size=6), coordinate, integers(min_value=-600, max_value=600))
def test_row_coverage_monotonic(report, position, y):
    assume(any(row_span(s, y) is not None for s in report))

    # The new sensor reports a beacon the report already knows about
    extra = Sensor(position, report[0].beacon)
    assert count_row_coverage(report + [extra], y) >= count_row_coverage(report, y)


# Concrete test cases for edge cases
def test_manhattan_distance():
    assert manhattan_distance((0, 0), (0, 0)) == 0
    assert manhattan_distance((0, 0), (3, 4)) == 7
    assert manhattan_distance((-2, 15), (2, 18)) == 7


def test_touching_spans_merge():
    assert merge_all_spans([(0, 5), (6, 9)]) == [(0, 9)]


def test_gap_of_one_is_kept():
    assert merge_all_spans([(0, 5), (7, 9)]) == [(0, 5), (7, 9)]


def test_overlapping_chains():
    spans = [(1, 3), (5, 7), (2, 6), (10, 15), (12, 20)]
    assert merge_all_spans(spans) == [(1, 7), (10, 20)]


def test_single_point_spans_merge():
    assert merge_all_spans([(1, 1), (2, 2), (3, 3), (5, 5)]) == [(1, 3), (5, 5)]


def test_empty_input():
    assert merge_all_spans([]) == []


def test_single_sensor_row_example():
    # Radius 9, row 10 -> [2, 14], minus the beacon at (2, 10)
    report = [Sensor((8, 7), (2, 10))]
    assert row_span(report[0], 10) == (2, 14)
    assert count_row_coverage(report, 10) == 12


def test_sensor_on_row_is_not_subtracted():
    report = [Sensor((0, 0), (0, 2))]
    assert count_row_coverage(report, 0) == 5


def test_shared_beacon_subtracted_once():
    report = [Sensor((0, 0), (2, 0)), Sensor((4, 0), (2, 0))]
    assert count_row_coverage(report, 0) == 8


def test_disjoint_spans_each_lose_their_beacon():
    report = [Sensor((0, 0), (1, 0)), Sensor((10, 0), (12, 0))]
    # Row 0: [-1, 1] and [8, 12]
    assert count_row_coverage(report, 0) == 3 + 5 - 2


def test_beacon_on_other_row_ignored():
    report = [Sensor((0, 0), (1, 0)), Sensor((0, 5), (0, 1))]
    # Row 0: only [-1, 1]; the second disk stops at y=1 with its beacon
    assert count_row_coverage(report, 0) == 3 - 1


def test_empty_coverage_raises():
    with pytest.raises(EmptyCoverageError):
        count_row_coverage([Sensor((0, 0), (1, 1))], 10)


def test_empty_report_raises():
    with pytest.raises(EmptyCoverageError):
        count_row_coverage([], 0)


def test_example_input():
    report = read_input(EXAMPLE_INPUT)
    assert len(report) == 14
    assert count_row_coverage(report, 10) == 26
