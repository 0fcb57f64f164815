"""
Accumulative coin selection: add UTXOs until the targets and fee are covered.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from numbers import Real

from loguru import logger

from coinselect.config import get_settings
from coinselect.dust import is_dust
from coinselect.models import SelectionResult, ValuedOutput
from coinselect.outputs import OutputHandle
from coinselect.validation import (
    validate_dust,
    validate_fee_rate,
    validate_output_with_values,
    validated_fee_and_vsize,
)
from coinselect.vsize import TxShape


def add_until_reach(
    utxos: Sequence[ValuedOutput],
    targets: Sequence[ValuedOutput],
    change: OutputHandle,
    fee_rate: Real,
    dust_relay_fee_rate: Real | None = None,
) -> SelectionResult | None:
    """
    Select the shortest prefix of utxos that pays for targets plus fee.

    UTXOs are taken in the order given and never re-ordered, so callers control
    the preference (e.g. oldest first). If the leftover value is enough for a
    non-dust change output, one is appended to the targets; otherwise the
    leftover is added to the fee.

    Args:
        utxos: Candidate UTXOs, in order of preference
        targets: Payment outputs
        change: Template for the change output
        fee_rate: Required fee rate (sat/vB)
        dust_relay_fee_rate: Fee rate used to classify dust (defaults to settings)

    Returns:
        SelectionResult, or None if all utxos together cannot pay the targets
    """
    if dust_relay_fee_rate is None:
        dust_relay_fee_rate = get_settings().dust_relay_fee_rate
    validate_output_with_values(utxos)
    validate_output_with_values(targets)
    validate_fee_rate(fee_rate)
    validate_fee_rate(dust_relay_fee_rate)
    validate_dust(targets, dust_relay_fee_rate)

    return accumulate(utxos, range(len(utxos)), targets, change, fee_rate, dust_relay_fee_rate)


def accumulate(
    utxos: Sequence[ValuedOutput],
    order: Iterable[int],
    targets: Sequence[ValuedOutput],
    change: OutputHandle,
    fee_rate: Real,
    dust_relay_fee_rate: Real,
) -> SelectionResult | None:
    """Accumulate utxos[i] for i in order until sufficient. Inputs must be validated."""
    target_value = sum(target.value for target in targets)
    shape = TxShape.of([], [target.output for target in targets])

    selected: list[int] = []
    selected_value = 0
    for index in order:
        utxo = utxos[index]
        selected.append(index)
        selected_value += utxo.value
        shape = shape.with_input(utxo.output)
        if selected_value >= target_value + shape.fee(fee_rate):
            return finalize_with_change(
                utxos, selected, targets, change, shape, fee_rate, dust_relay_fee_rate
            )

    logger.debug(
        f"Insufficient funds: {selected_value} sats in {len(selected)} UTXOs "
        f"cannot pay {target_value} sats plus fee"
    )
    return None


def finalize_with_change(
    utxos: Sequence[ValuedOutput],
    selected: list[int],
    targets: Sequence[ValuedOutput],
    change: OutputHandle,
    shape: TxShape,
    fee_rate: Real,
    dust_relay_fee_rate: Real,
) -> SelectionResult:
    """Build the result for a sufficient selection, adding change if it is not dust."""
    selected_utxos = [utxos[index] for index in selected]
    selected_value = sum(utxo.value for utxo in selected_utxos)
    target_value = sum(target.value for target in targets)

    change_value = selected_value - target_value - shape.with_output(change).fee(fee_rate)
    final_targets = list(targets)
    has_change = change_value > 0 and not is_dust(change, change_value, dust_relay_fee_rate)
    if has_change:
        final_targets.append(ValuedOutput(output=change, value=change_value))
    else:
        logger.debug(f"Change of {change_value} sats is dust, adding it to the fee")

    fee, tx_vsize = validated_fee_and_vsize(selected_utxos, final_targets, fee_rate)
    return SelectionResult(
        utxos=selected_utxos,
        targets=final_targets,
        fee=fee,
        vsize=tx_vsize,
        utxo_indices=tuple(selected),
        has_change=has_change,
    )
