"""
Comprehensive testbench for the span merger RTL implementation.

Feeds sorted spans to the hardware merger, compares the merged stream and the
accumulated coverage with the software reference, and finally chains
projector + merger to reproduce part one on the example report.

Usage:
    python3 -m amaranth_benchs.rtl_range_merger_tests [test_file] [row]

Default test file: testcases/example_input.txt (row 10)
"""

import os
import sys

from amaranth.sim import Simulator
from hypothesis import given, settings, strategies as st

from rtl.range_merger import RangeMerger
from software_reference.sensor_report import known_beacons, read_input
from software_reference.row_coverage import (
    calculate_total_coverage,
    count_row_coverage,
    merge_all_spans,
    is_in_spans,
)
from amaranth_benchs.rtl_span_projector_tests import simulate_projections


DEFAULT_INPUT = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                             "..", "testcases", "example_input.txt")


def simulate_merger(rows, width=64):
    """
    Stream each list of spans (one list per row) through a single merger.

    The merger returns to IDLE after every row, so rows are fed back to back.

    Returns:
        list: (merged_spans, total_coverage) per row
    """
    dut = RangeMerger(width=width, compute_coverage=True)
    results = []

    async def testbench(ctx):
        for spans in rows:
            merged = []
            sorted_spans = sorted(spans)

            for i, (start, end) in enumerate(sorted_spans):
                while not ctx.get(dut.ready):
                    ctx.set(dut.valid_in, 0)
                    await ctx.tick()

                ctx.set(dut.start_in, start)
                ctx.set(dut.end_in, end)
                ctx.set(dut.valid_in, 1)
                ctx.set(dut.last_in, 1 if i == len(sorted_spans) - 1 else 0)
                await ctx.tick()

                if ctx.get(dut.valid_out):
                    merged.append((ctx.get(dut.start_out), ctx.get(dut.end_out)))

            ctx.set(dut.valid_in, 0)
            ctx.set(dut.last_in, 0)

            # Drain the final span
            for _ in range(10):
                await ctx.tick()
                if ctx.get(dut.valid_out):
                    merged.append((ctx.get(dut.start_out), ctx.get(dut.end_out)))
                    if ctx.get(dut.last_out):
                        break

            results.append((merged, ctx.get(dut.total_coverage)))

    sim = Simulator(dut)
    sim.add_clock(1e-6)
    sim.add_testbench(testbench)
    sim.run()

    return results


def simulate_row_coverage(report, y):
    """Part one through the hardware: project, merge, then drop beacons."""
    projections = simulate_projections([(sensor, y) for sensor in report])
    spans = [span for span in projections if span is not None]

    [(merged, coverage)] = simulate_merger([spans])
    beacons = [bx for bx, by in known_beacons(report)
               if by == y and is_in_spans(bx, merged)]

    return coverage - len(beacons)


SMALL_EXAMPLES = [
    # (name, input, expected)
    ("Basic overlap", [(1, 5), (3, 10)], [(1, 10)]),
    ("Multiple overlaps", [(1, 5), (3, 10), (15, 20), (18, 25)], [(1, 10), (15, 25)]),
    ("Unsorted input", [(15, 20), (1, 5), (3, 10), (18, 25)], [(1, 10), (15, 25)]),
    ("Gap of one", [(0, 5), (7, 9)], [(0, 5), (7, 9)]),
    ("Adjacent spans", [(0, 5), (6, 9)], [(0, 9)]),
    ("Contained span", [(-10, 10), (-2, 3)], [(-10, 10)]),
    ("Negative spans", [(-10, -5), (-7, -3), (0, 5)], [(-10, -3), (0, 5)]),
    ("Single span", [(100, 200)], [(100, 200)]),
]


def test_small_examples():
    hw = simulate_merger([spans for _, spans, _ in SMALL_EXAMPLES])

    for (name, spans, expected), (merged, coverage) in zip(SMALL_EXAMPLES, hw):
        assert merge_all_spans(spans) == expected, name
        assert merged == expected, name
        assert coverage == calculate_total_coverage(expected), name


def test_row_coverage_example(test_file=DEFAULT_INPUT, row=10):
    report = read_input(test_file)

    assert simulate_row_coverage(report, row) == count_row_coverage(report, row) == 26


span = st.tuples(st.integers(min_value=-(10 ** 12), max_value=10 ** 12),
                 st.integers(min_value=0, max_value=10 ** 6)).map(lambda t: (t[0], t[0] + t[1]))


@given(st.lists(st.lists(span, min_size=1, max_size=12), min_size=1, max_size=4))
@settings(max_examples=50, deadline=None)
def test_merger_matches_software(rows):
    hw = simulate_merger(rows)

    for spans, (merged, coverage) in zip(rows, hw):
        expected = merge_all_spans(spans)
        assert merged == expected
        assert coverage == calculate_total_coverage(expected)


if __name__ == "__main__":
    test_file = DEFAULT_INPUT
    row = 10
    if len(sys.argv) > 1:
        test_file = sys.argv[1]
    if len(sys.argv) > 2:
        row = int(sys.argv[2])

    print("=" * 80)
    print("Amaranth HDL Span Merger Verification Suite")
    print("=" * 80)

    test_small_examples()
    print(f"  [OK] {len(SMALL_EXAMPLES)} small examples")

    report = read_input(test_file)
    sw = count_row_coverage(report, row)
    hw = simulate_row_coverage(report, row)
    print(f"  Software: {sw}")
    print(f"  Hardware: {hw}")

    if sw == hw:
        print("\n  [OK] Hardware and software results match!")
        sys.exit(0)
    else:
        print("\n  [BAD] MISMATCH!")
        sys.exit(1)
