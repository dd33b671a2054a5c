"""
Coverage Checker - Part Two: Is a Candidate Point Covered?

Hardware RTL implementation of the inner test of the perimeter search.
Sensors are loaded once into memory (position plus derived radius); every
query then scans them for the latched point and stops at the first sensor
whose diamond contains it.

Architecture:
    1. Load sensors into memory, radius computed on the way in
    2. On start, latch the candidate point
    3. Read one sensor per two cycles and compare distance against radius
    4. Report covered / free and return to IDLE for the next candidate

Components:
    - Memories for sensor x, sensor y and radius
    - Sequential scan FSM
"""

from amaranth import *
from amaranth.lib.memory import Memory

from rtl.span_projector import manhattan_distance


class CoverageChecker(Elaboratable):
    """
    Hardware module that checks a point against every loaded sensor.

    Ports:
        Input (sensor loading phase):
            - sensor_x_in, sensor_y_in: Sensor position (signed)
            - beacon_x_in, beacon_y_in: Closest beacon position (signed)
            - sensor_valid_in: Sensor input data valid signal
            - sensor_count_in: Total number of loaded sensors

        Input (query phase):
            - point_x_in, point_y_in: Candidate point (signed)

        Output:
            - covered: Latched point lies inside some sensor disk
            - done: Query complete, covered is valid
            - sensor_idx_out: Sensor being compared (for debug/sync)

        Control:
            - start: Latch the point and start scanning
            - ready: Ready to accept sensors or a new query
    """

    def __init__(self, max_sensors=64, width=64):
        self.max_sensors = max_sensors
        self.width = width

        # Sensor input interface
        self.sensor_x_in = Signal(signed(width))
        self.sensor_y_in = Signal(signed(width))
        self.beacon_x_in = Signal(signed(width))
        self.beacon_y_in = Signal(signed(width))
        self.sensor_valid_in = Signal()
        self.sensor_count_in = Signal(range(max_sensors + 1))

        # Query interface
        self.point_x_in = Signal(signed(width))
        self.point_y_in = Signal(signed(width))

        # Output interface
        self.covered = Signal()
        self.done = Signal()
        self.sensor_idx_out = Signal(range(max_sensors + 1))

        # Control
        self.start = Signal()
        self.ready = Signal()

    def elaborate(self, platform):
        m = Module()

        m.submodules.xs_mem = xs_mem = Memory(shape=signed(self.width), depth=self.max_sensors, init=[])
        m.submodules.ys_mem = ys_mem = Memory(shape=signed(self.width), depth=self.max_sensors, init=[])
        m.submodules.radii_mem = radii_mem = Memory(shape=signed(self.width + 2), depth=self.max_sensors, init=[])

        xs_rd = xs_mem.read_port()
        ys_rd = ys_mem.read_port()
        radii_rd = radii_mem.read_port()
        xs_wr = xs_mem.write_port()
        ys_wr = ys_mem.write_port()
        radii_wr = radii_mem.write_port()

        # State variables
        load_idx = Signal(range(self.max_sensors + 1))
        num_sensors = Signal(range(self.max_sensors + 1))
        sensor_idx = Signal(range(self.max_sensors + 1))
        point_x = Signal(signed(self.width))
        point_y = Signal(signed(self.width))

        m.d.comb += self.sensor_idx_out.eq(sensor_idx)

        # Distance from the latched point to the sensor just read
        distance = Signal(signed(self.width + 3))
        m.d.comb += distance.eq(manhattan_distance(point_x, point_y, xs_rd.data, ys_rd.data))

        with m.FSM():

            with m.State("IDLE"):
                m.d.comb += self.ready.eq(1)

                # Load sensors, deriving the radius as they arrive
                with m.If(self.sensor_valid_in):
                    m.d.comb += [
                        xs_wr.addr.eq(load_idx),
                        xs_wr.data.eq(self.sensor_x_in),
                        xs_wr.en.eq(1),
                        ys_wr.addr.eq(load_idx),
                        ys_wr.data.eq(self.sensor_y_in),
                        ys_wr.en.eq(1),
                        radii_wr.addr.eq(load_idx),
                        radii_wr.data.eq(manhattan_distance(
                            self.sensor_x_in, self.sensor_y_in,
                            self.beacon_x_in, self.beacon_y_in)),
                        radii_wr.en.eq(1),
                    ]
                    m.d.sync += load_idx.eq(load_idx + 1)

                with m.If(self.start):
                    m.d.sync += [
                        num_sensors.eq(self.sensor_count_in),
                        sensor_idx.eq(0),
                        point_x.eq(self.point_x_in),
                        point_y.eq(self.point_y_in),
                        self.covered.eq(0),
                        self.done.eq(0),
                    ]
                    m.next = "READ"

            with m.State("READ"):
                with m.If(sensor_idx >= num_sensors):
                    # Every sensor missed: the point is free
                    m.d.sync += [
                        self.covered.eq(0),
                        self.done.eq(1),
                    ]
                    m.next = "IDLE"
                with m.Else():
                    m.d.comb += [
                        xs_rd.addr.eq(sensor_idx),
                        ys_rd.addr.eq(sensor_idx),
                        radii_rd.addr.eq(sensor_idx),
                    ]
                    m.next = "COMPARE"

            with m.State("COMPARE"):
                # Memory data is valid one cycle after the address
                with m.If(distance <= radii_rd.data):
                    m.d.sync += [
                        self.covered.eq(1),
                        self.done.eq(1),
                    ]
                    m.next = "IDLE"
                with m.Else():
                    m.d.sync += sensor_idx.eq(sensor_idx + 1)
                    m.next = "READ"

        return m
