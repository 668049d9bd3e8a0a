"""
Lookup Pipeline Hardware Implementation using Amaranth HDL

Chains one StageLookup per almanac stage and keeps a running minimum of the
final locations. Accepts a new seed every cycle.

Architecture:
- Input: Stream of seed values
- Processing: len(pipeline) registered lookup stages
- Output: Stream of locations plus the running minimum
"""

from amaranth import *

from rtl.stage_lookup import StageLookup
from software_reference.almanac import Pipeline


class LookupPipeline(Elaboratable):
    """
    Hardware module pushing seeds through every almanac stage.

    Ports:
        Input:
            - value_in: Seed value (64-bit)
            - valid_in: Input data valid signal
            - clear: Restart the running minimum; a location valid in the same
              cycle becomes the new minimum

        Output:
            - value_out: Location, ``latency`` cycles after the seed (64-bit)
            - valid_out: Output data valid signal
            - min_out: Lowest location seen since the last clear (64-bit)
            - found: At least one location seen since the last clear
    """

    def __init__(self, pipeline: Pipeline, width=64):
        """
        Initialize the Lookup Pipeline module.

        Args:
            pipeline: Software pipeline to implement
            width: Bit width for values (default: 64)
        """
        self.pipeline = pipeline
        self.width = width
        self.latency = len(pipeline)

        self.stages = [StageLookup(stage, width=width) for stage in pipeline]

        # Input interface
        self.value_in = Signal(width)
        self.valid_in = Signal()
        self.clear = Signal()

        # Output interface
        self.value_out = Signal(width)
        self.valid_out = Signal()
        self.min_out = Signal(width)
        self.found = Signal()

    def elaborate(self, platform):
        m = Module()

        value = self.value_in
        valid = self.valid_in

        for index, stage in enumerate(self.stages):
            m.submodules[f"stage_{index}"] = stage
            m.d.comb += [
                stage.value_in.eq(value),
                stage.valid_in.eq(valid),
            ]
            value = stage.value_out
            valid = stage.valid_out

        m.d.comb += [
            self.value_out.eq(value),
            self.valid_out.eq(valid),
        ]

        # Running minimum over valid outputs
        with m.If(self.clear):
            m.d.sync += [
                self.min_out.eq(self.value_out),
                self.found.eq(self.valid_out),
            ]
        with m.Elif(self.valid_out):
            with m.If(~self.found | (self.value_out < self.min_out)):
                m.d.sync += [
                    self.min_out.eq(self.value_out),
                    self.found.eq(1),
                ]

        return m
