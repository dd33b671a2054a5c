"""
Testbench for CoverageChecker RTL implementation.

Loads the sensors into the hardware once, then queries candidate points and
compares covered / free with the software reference. The last test runs the
whole perimeter search with the hardware doing every coverage test.

Usage:
    python3 -m amaranth_benchs.rtl_coverage_checker_tests [test_file] [lo hi]

Default test file: testcases/example_input.txt (bounds 0 20)
"""

import os
import sys

from amaranth.sim import Simulator
from hypothesis import given, settings, strategies as st

from rtl.coverage_checker import CoverageChecker
from software_reference.sensor_report import Sensor, is_covered, read_input
from software_reference.beacon_search import find_uncovered_point, perimeter_points


DEFAULT_INPUT = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                             "..", "testcases", "example_input.txt")


def simulate_checker(report, points, stop_at_free=False, max_sensors=64):
    """
    Query the checker for each point.

    Args:
        report: Sensors loaded before the first query
        points: Iterable of (x, y) candidates
        stop_at_free: Stop querying after the first free point

    Returns:
        list: (point, covered) for every queried point
    """
    dut = CoverageChecker(max_sensors=max_sensors, width=64)
    results = []

    async def testbench(ctx):
        # Load sensors
        for (sx, sy), (bx, by) in report:
            ctx.set(dut.sensor_x_in, sx)
            ctx.set(dut.sensor_y_in, sy)
            ctx.set(dut.beacon_x_in, bx)
            ctx.set(dut.beacon_y_in, by)
            ctx.set(dut.sensor_valid_in, 1)
            await ctx.tick()

        ctx.set(dut.sensor_valid_in, 0)
        ctx.set(dut.sensor_count_in, len(report))

        for x, y in points:
            while not ctx.get(dut.ready):
                await ctx.tick()

            ctx.set(dut.point_x_in, x)
            ctx.set(dut.point_y_in, y)
            ctx.set(dut.start, 1)
            await ctx.tick()
            ctx.set(dut.start, 0)

            for _ in range(4 * len(report) + 8):
                await ctx.tick()
                if ctx.get(dut.done):
                    break
            else:
                raise AssertionError(f"checker timed out on {(x, y)}")

            covered = bool(ctx.get(dut.covered))
            results.append(((x, y), covered))
            if stop_at_free and not covered:
                break

    sim = Simulator(dut)
    sim.add_clock(1e-6)
    sim.add_testbench(testbench)
    sim.run()

    return results


def hardware_perimeter_search(report, bounds):
    """Part two with the coverage test in hardware."""
    lo, hi = bounds
    candidates = [
        (x, y)
        for sensor in report
        for x, y in perimeter_points(sensor)
        if lo <= x <= hi and lo <= y <= hi
    ]
    results = simulate_checker(report, candidates, stop_at_free=True)
    free = [point for point, covered in results if not covered]
    return free[0] if free else None


def test_example_grid(test_file=DEFAULT_INPUT):
    report = read_input(test_file)
    points = [(x, y) for y in range(9, 13) for x in range(-2, 26, 3)] + [(14, 11)]

    for point, covered in simulate_checker(report, points):
        assert covered == is_covered(report, point), point


def test_empty_report_leaves_point_free():
    assert simulate_checker([], [(0, 0)]) == [((0, 0), False)]


def test_disk_boundary():
    # Radius 3 around the origin: distance 3 is covered, distance 4 is not
    sensor = Sensor((0, 0), (2, -1))
    points = [(3, 0), (0, -3), (-1, 2), (4, 0), (2, 2), (-2, -2)]
    results = simulate_checker([sensor], points)

    assert [covered for _, covered in results] == [True, True, True, False, False, False]


def test_hardware_perimeter_search(test_file=DEFAULT_INPUT, bounds=(0, 20)):
    report = read_input(test_file)

    assert hardware_perimeter_search(report, bounds) == find_uncovered_point(report, bounds) == (14, 11)


coordinate = st.integers(min_value=-(10 ** 6), max_value=10 ** 6)
sensor = st.builds(Sensor, st.tuples(coordinate, coordinate), st.tuples(coordinate, coordinate))


@given(st.lists(sensor, min_size=1, max_size=8),
       st.lists(st.tuples(coordinate, coordinate), min_size=1, max_size=8))
@settings(max_examples=30, deadline=None)
def test_checker_matches_software(report, points):
    for point, covered in simulate_checker(report, points, max_sensors=8):
        assert covered == is_covered(report, point)


if __name__ == "__main__":
    test_file = DEFAULT_INPUT
    bounds = (0, 20)
    if len(sys.argv) > 1:
        test_file = sys.argv[1]
    if len(sys.argv) > 3:
        bounds = (int(sys.argv[2]), int(sys.argv[3]))

    print("=" * 80)
    print("Amaranth HDL CoverageChecker Verification")
    print("=" * 80)

    report = read_input(test_file)
    sw = find_uncovered_point(report, bounds)
    hw = hardware_perimeter_search(report, bounds)
    print(f"  Software: {sw}")
    print(f"  Hardware: {hw}")

    if sw == hw:
        print("\n  [OK] Hardware and software results match!")
        sys.exit(0)
    else:
        print("\n  [BAD] MISMATCH!")
        sys.exit(1)
