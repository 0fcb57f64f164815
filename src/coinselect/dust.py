"""
Dust classification, matching Bitcoin Core's relay policy (GetDustThreshold).

An output is dust when its value is lower than the fee, at the dust relay fee
rate, of creating it and later spending it as the only input.
"""

from __future__ import annotations

from numbers import Real

from coinselect.constants import (
    DUST_SPEND_SIZE,
    DUST_WITNESS_SPEND_SIZE,
    WITNESS_SCALE_FACTOR,
)
from coinselect.outputs import OutputHandle
from coinselect.vsize import fee_for_vsize


def dust_spend_size(output: OutputHandle) -> int:
    """Size in vbytes of the output plus the input spending it."""
    size = output.output_weight() // WITNESS_SCALE_FACTOR
    if output.is_witness_program():
        return size + DUST_WITNESS_SPEND_SIZE
    return size + DUST_SPEND_SIZE


def dust_threshold(output: OutputHandle, dust_relay_fee_rate: Real) -> int:
    """Smallest non-dust value for output, in satoshis."""
    return fee_for_vsize(dust_spend_size(output), dust_relay_fee_rate)


def is_dust(output: OutputHandle, value: int, dust_relay_fee_rate: Real) -> bool:
    return value < dust_threshold(output, dust_relay_fee_rate)
