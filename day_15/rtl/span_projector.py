"""
Row Span Projector - Hardware RTL Implementation

Combinational projection of one sensor's exclusion diamond onto a row.

    radius = |sx - bx| + |sy - by|
    d      = radius - |sy - row|
    hit    = d >= 0
    span   = [sx - d, sx + d]

All coordinates are two's complement, so inputs may be negative (puzzle
beacons regularly sit left of x=0).
"""

from amaranth import *


def abs_diff(a, b):
    """|a - b| as an Amaranth expression."""
    return Mux(a >= b, a - b, b - a)


def manhattan_distance(ax, ay, bx, by):
    """Manhattan distance between (ax, ay) and (bx, by) as an Amaranth expression."""
    return abs_diff(ax, bx) + abs_diff(ay, by)


class RowSpanProjector(Elaboratable):
    """
    Hardware module that slices a sensor disk on a given row.

    Ports:
        Input:
            - sensor_x, sensor_y: Sensor position (signed)
            - beacon_x, beacon_y: Closest beacon position (signed)
            - row: Row being projected onto (signed)

        Output:
            - low, high: Covered span on the row (valid only when hit)
            - hit: The disk reaches the row
            - radius: Derived exclusion radius
    """

    def __init__(self, width=64):
        self.width = width

        # Inputs
        self.sensor_x = Signal(signed(width))
        self.sensor_y = Signal(signed(width))
        self.beacon_x = Signal(signed(width))
        self.beacon_y = Signal(signed(width))
        self.row = Signal(signed(width))

        # Outputs
        self.low = Signal(signed(width))
        self.high = Signal(signed(width))
        self.hit = Signal()
        self.radius = Signal(signed(width + 2))

    def elaborate(self, platform):
        m = Module()

        half_width = Signal(signed(self.width + 3))

        m.d.comb += [
            self.radius.eq(manhattan_distance(
                self.sensor_x, self.sensor_y, self.beacon_x, self.beacon_y)),
            half_width.eq(self.radius - abs_diff(self.sensor_y, self.row)),
            self.hit.eq(half_width >= 0),
        ]

        with m.If(self.hit):
            m.d.comb += [
                self.low.eq(self.sensor_x - half_width),
                self.high.eq(self.sensor_x + half_width),
            ]

        return m
