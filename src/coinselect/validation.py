"""
Input validation for coin selection.

All validators fail fast by raising a CoinSelectError subclass; none of them
return partial results.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import Decimal
from fractions import Fraction
from numbers import Real

from coinselect.config import get_settings
from coinselect.constants import MAX_OUTPUT_VALUE, MIN_FEE_RATE
from coinselect.dust import is_dust
from coinselect.models import (
    DustTargetError,
    EmptyGroupError,
    FeeAndVsize,
    InsufficientFeeError,
    InvalidFeeRateError,
    InvalidValueError,
    ValuedOutput,
)
from coinselect.vsize import as_fraction, vsize


def validate_output_with_values(outputs_with_values: Sequence[ValuedOutput]) -> None:
    """
    Check that a group of UTXOs or targets is usable.

    Raises:
        EmptyGroupError: If the group is empty
        InvalidValueError: If a value is not an integer in (0, 1e14]
    """
    if len(outputs_with_values) == 0:
        raise EmptyGroupError("Empty group")
    for output_with_value in outputs_with_values:
        value = output_with_value.value
        if (
            not isinstance(value, int)
            or isinstance(value, bool)
            or value <= 0
            or value > MAX_OUTPUT_VALUE
        ):
            raise InvalidValueError(f"Input value {value} not supported")


def validate_fee_rate(fee_rate: Real, max_fee_rate: Real | None = None) -> None:
    """
    Check that a fee rate (sat/vB) is finite and within [1, max_fee_rate].

    Raises:
        InvalidFeeRateError: If the rate is out of bounds
    """
    if max_fee_rate is None:
        max_fee_rate = get_settings().max_fee_rate
    if (
        not isinstance(fee_rate, (Real, Decimal))
        or isinstance(fee_rate, bool)
        or not math.isfinite(fee_rate)
        or fee_rate < MIN_FEE_RATE
        or fee_rate > max_fee_rate
    ):
        raise InvalidFeeRateError(f"Fee rate {fee_rate} not supported")


def validate_dust(
    targets: Sequence[ValuedOutput], dust_relay_fee_rate: Real | None = None
) -> None:
    """
    Raises:
        DustTargetError: For the first target whose value is dust
    """
    if dust_relay_fee_rate is None:
        dust_relay_fee_rate = get_settings().dust_relay_fee_rate
    for index, target in enumerate(targets):
        if is_dust(target.output, target.value, dust_relay_fee_rate):
            raise DustTargetError(index, target.value)


def validated_fee_and_vsize(
    utxos: Sequence[ValuedOutput], targets: Sequence[ValuedOutput], fee_rate: Real
) -> FeeAndVsize:
    """
    Compute the fee and vsize of spending utxos into targets.

    The fee is whatever the inputs leave over after paying the targets.

    Raises:
        InsufficientFeeError: If the resulting fee rate is below fee_rate
        InvalidFeeRateError: If the resulting fee rate is above the maximum
    """
    fee = sum(utxo.value for utxo in utxos) - sum(target.value for target in targets)
    tx_vsize = vsize([utxo.output for utxo in utxos], [target.output for target in targets])
    final_fee_rate = Fraction(fee, tx_vsize)
    if final_fee_rate < as_fraction(fee_rate):
        raise InsufficientFeeError(
            f"Final fee rate {float(final_fee_rate)} lower than required {fee_rate}"
        )
    validate_fee_rate(fee / tx_vsize)
    return FeeAndVsize(fee=fee, vsize=tx_vsize)
