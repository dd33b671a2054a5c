"""
Span Merger Hardware Implementation using Amaranth HDL

Streaming merge of pre-sorted row spans. Unlike the day 5 merger, spans that
merely touch ([.., 5] followed by [6, ..]) are merged too: there is no
integer between them, so the covered run is contiguous.

Architecture:
- Input: Stream of signed (start, end) spans, sorted by start
- Output: Stream of merged (start, end) spans
- Processing: Single-pass merge using a register to hold the running span
- Framing: last_in closes the stream, last_out flags the final merged span,
  after which the merger returns to IDLE and accepts a new row
"""

from amaranth import *


class RangeMerger(Elaboratable):
    """
    Hardware module that merges overlapping or adjacent spans.

    Assumes input spans are sorted by start position.

    Ports:
        Input:
            - start_in: Current span start value (signed)
            - end_in: Current span end value (signed)
            - valid_in: Input data valid signal
            - last_in: Indicates last input span

        Output:
            - start_out: Merged span start value (signed)
            - end_out: Merged span end value (signed)
            - valid_out: Output data valid signal
            - last_out: Indicates last output span
            - total_coverage: Sum of merged span lengths (compute_coverage only)

        Control:
            - ready: Ready to accept input
    """

    def __init__(self, width=64, compute_coverage=False):
        """
        Initialize the Span Merger module.

        Args:
            width: Bit width for span values (default: 64)
            compute_coverage: If True, accumulate total coverage (default: False)
        """
        self.width = width
        self.compute_coverage = compute_coverage

        # Input interface
        self.start_in = Signal(signed(width))
        self.end_in = Signal(signed(width))
        self.valid_in = Signal()
        self.last_in = Signal()

        # Output interface
        self.start_out = Signal(signed(width))
        self.end_out = Signal(signed(width))
        self.valid_out = Signal()
        self.last_out = Signal()

        # 128-bit so a full row of 64-bit spans cannot overflow
        self.total_coverage = Signal(128)

        # Control
        self.ready = Signal()

    def elaborate(self, platform):
        m = Module()

        # Running span
        accum_start = Signal(signed(self.width))
        accum_end = Signal(signed(self.width))

        # Merge decision
        new_end = Signal(signed(self.width))
        joins = Signal()
        m.d.comb += [
            new_end.eq(Mux(self.end_in > accum_end, self.end_in, accum_end)),
            joins.eq(self.start_in <= accum_end + 1),
        ]

        if self.compute_coverage:
            coverage_accum = Signal(128)
            span_size = Signal(128)
            m.d.comb += [
                span_size.eq(accum_end - accum_start + 1),
                self.total_coverage.eq(coverage_accum),
            ]

        with m.FSM():

            with m.State("IDLE"):
                m.d.comb += self.ready.eq(1)
                m.d.sync += [
                    self.valid_out.eq(0),
                    self.last_out.eq(0),
                ]

                with m.If(self.valid_in):
                    m.d.sync += [
                        accum_start.eq(self.start_in),
                        accum_end.eq(self.end_in),
                    ]
                    if self.compute_coverage:
                        m.d.sync += coverage_accum.eq(0)

                    with m.If(self.last_in):
                        m.next = "OUTPUT_LAST"
                    with m.Else():
                        m.next = "PROCESS"

            with m.State("PROCESS"):
                m.d.comb += self.ready.eq(1)
                m.d.sync += [
                    self.valid_out.eq(0),
                    self.last_out.eq(0),
                ]

                with m.If(self.valid_in):
                    with m.If(joins):
                        m.d.sync += accum_end.eq(new_end)

                    with m.Else():
                        # Gap: emit the running span and start a new one
                        m.d.sync += [
                            self.start_out.eq(accum_start),
                            self.end_out.eq(accum_end),
                            self.valid_out.eq(1),
                            accum_start.eq(self.start_in),
                            accum_end.eq(self.end_in),
                        ]
                        if self.compute_coverage:
                            m.d.sync += coverage_accum.eq(coverage_accum + span_size)

                    with m.If(self.last_in):
                        m.next = "OUTPUT_LAST"

            with m.State("OUTPUT_LAST"):
                m.d.sync += [
                    self.start_out.eq(accum_start),
                    self.end_out.eq(accum_end),
                    self.valid_out.eq(1),
                    self.last_out.eq(1),
                ]
                if self.compute_coverage:
                    m.d.sync += coverage_accum.eq(coverage_accum + span_size)

                m.next = "DONE"

            with m.State("DONE"):
                # One idle cycle so the final span is seen before restarting
                m.d.sync += [
                    self.valid_out.eq(0),
                    self.last_out.eq(0),
                ]
                m.next = "IDLE"

        return m
