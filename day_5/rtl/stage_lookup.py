"""
Stage Lookup Hardware Implementation using Amaranth HDL

Maps one value per cycle through a single almanac stage.

Architecture:
- The stage table is fixed at elaboration time and baked into the logic
- One comparator pair (start <= value < end) and one adder per entry
- Values outside every domain pass through unchanged
- Output is registered: one cycle of latency
"""

from amaranth import *

from software_reference.almanac import ArithmeticOverflow, Stage


class StageLookup(Elaboratable):
    """
    Hardware module applying one almanac stage to a stream of values.

    Ports:
        Input:
            - value_in: Value to translate (64-bit)
            - valid_in: Input data valid signal

        Output:
            - value_out: Translated value, one cycle later (64-bit)
            - valid_out: Output data valid signal
    """

    def __init__(self, stage: Stage, width=64):
        """
        Initialize the Stage Lookup module.

        Args:
            stage: Software stage whose entries become constants
            width: Bit width for values (default: 64)
        """
        for entry in stage:
            if entry.domain.end > (1 << width) or entry.domain.start + entry.offset < 0 \
                    or entry.domain.end - 1 + entry.offset >= (1 << width):
                raise ArithmeticOverflow(f"{entry!r} does not fit a {width}-bit datapath")

        self.stage = stage
        self.width = width

        # Input interface
        self.value_in = Signal(width)
        self.valid_in = Signal()

        # Output interface
        self.value_out = Signal(width)
        self.valid_out = Signal()

    def elaborate(self, platform):
        m = Module()

        mapped = Signal(self.width)
        m.d.comb += mapped.eq(self.value_in)

        # Domains are disjoint, so at most one of these conditions holds
        for entry in self.stage:
            hit = (self.value_in >= entry.domain.start) & (self.value_in < entry.domain.end)
            with m.If(hit):
                m.d.comb += mapped.eq(self.value_in + entry.offset)

        m.d.sync += [
            self.value_out.eq(mapped),
            self.valid_out.eq(self.valid_in),
        ]

        return m
