"""
Transaction virtual size estimation.

Sizes depend only on the shape of inputs and outputs, never on actual
signatures: every input is assumed to carry a worst-case witness so a signed
transaction never exceeds the estimate.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from fractions import Fraction
from numbers import Real

from coinselect.constants import (
    SEGWIT_MARKER_FLAG_WEIGHT,
    TX_LOCKTIME_SIZE,
    TX_VERSION_SIZE,
    WITNESS_SCALE_FACTOR,
)
from coinselect.outputs import OutputHandle


def varint_size(n: int) -> int:
    """Length in bytes of a Bitcoin varint (CompactSize) encoding n."""
    if n < 0xFD:
        return 1
    elif n <= 0xFFFF:
        return 3
    elif n <= 0xFFFFFFFF:
        return 5
    else:
        return 9


def as_fraction(rate: Real) -> Fraction:
    """Exact value of a fee rate, so 1.1 sat/vB means 11/10 and not its binary float."""
    if isinstance(rate, Fraction):
        return rate
    return Fraction(str(rate))


def weight_to_vsize(weight: int) -> int:
    """Virtual size of a weight, rounded up to whole vbytes."""
    return -(-weight // WITNESS_SCALE_FACTOR)


def fee_for_vsize(vsize: int, fee_rate: Real) -> int:
    """Fee in satoshis for a given vsize, rounded up."""
    return math.ceil(as_fraction(fee_rate) * vsize)


@dataclass(frozen=True)
class TxShape:
    """
    Aggregate weight of a transaction's inputs and outputs.

    Shapes are immutable; with_input / without_input / with_output return
    updated copies in O(1), which lets selectors grow a candidate set without
    rescanning it.
    """

    input_weight: int = 0
    n_inputs: int = 0
    n_witness_inputs: int = 0
    output_weight: int = 0
    n_outputs: int = 0

    @classmethod
    def of(cls, inputs: Iterable[OutputHandle], outputs: Iterable[OutputHandle]) -> TxShape:
        shape = cls()
        for output in outputs:
            shape = shape.with_output(output)
        for inp in inputs:
            shape = shape.with_input(inp)
        return shape

    def with_input(self, output: OutputHandle) -> TxShape:
        return TxShape(
            input_weight=self.input_weight + output.input_weight(),
            n_inputs=self.n_inputs + 1,
            n_witness_inputs=self.n_witness_inputs + (1 if output.is_segwit() else 0),
            output_weight=self.output_weight,
            n_outputs=self.n_outputs,
        )

    def without_input(self, output: OutputHandle) -> TxShape:
        return TxShape(
            input_weight=self.input_weight - output.input_weight(),
            n_inputs=self.n_inputs - 1,
            n_witness_inputs=self.n_witness_inputs - (1 if output.is_segwit() else 0),
            output_weight=self.output_weight,
            n_outputs=self.n_outputs,
        )

    def with_output(self, output: OutputHandle) -> TxShape:
        return TxShape(
            input_weight=self.input_weight,
            n_inputs=self.n_inputs,
            n_witness_inputs=self.n_witness_inputs,
            output_weight=self.output_weight + output.output_weight(),
            n_outputs=self.n_outputs + 1,
        )

    @property
    def weight(self) -> int:
        overhead = (
            TX_VERSION_SIZE
            + TX_LOCKTIME_SIZE
            + varint_size(self.n_inputs)
            + varint_size(self.n_outputs)
        )
        weight = overhead * WITNESS_SCALE_FACTOR + self.input_weight + self.output_weight
        if self.n_witness_inputs:
            # Marker/flag, plus an empty witness stack (0x00) for each legacy input
            weight += SEGWIT_MARKER_FLAG_WEIGHT + (self.n_inputs - self.n_witness_inputs)
        return weight

    @property
    def vsize(self) -> int:
        return weight_to_vsize(self.weight)

    def fee(self, fee_rate: Real) -> int:
        return fee_for_vsize(self.vsize, fee_rate)


def vsize(inputs: Iterable[OutputHandle], outputs: Iterable[OutputHandle]) -> int:
    """
    Estimate the virtual size of a transaction.

    Args:
        inputs: Output handles being spent
        outputs: Output handles being created

    Returns:
        Virtual size in vbytes (weight / 4, rounded up)

    Raises:
        UnsupportedScriptError: If an input has no size model
    """
    return TxShape.of(inputs, outputs).vsize


def transaction_fee(
    inputs: Iterable[OutputHandle], outputs: Iterable[OutputHandle], fee_rate: Real
) -> int:
    """Fee required for a transaction at fee_rate (sat/vB), rounded up."""
    return TxShape.of(inputs, outputs).fee(fee_rate)
