"""
Sweep selection: send everything worth spending to a single recipient.
"""

from __future__ import annotations

from collections.abc import Sequence
from numbers import Real

from loguru import logger

from coinselect.config import get_settings
from coinselect.dust import is_dust
from coinselect.models import SelectionResult, ValuedOutput
from coinselect.outputs import OutputHandle
from coinselect.validation import (
    validate_fee_rate,
    validate_output_with_values,
    validated_fee_and_vsize,
)
from coinselect.vsize import TxShape


def max_funds(
    utxos: Sequence[ValuedOutput],
    recipient: OutputHandle,
    fee_rate: Real,
    dust_relay_fee_rate: Real | None = None,
) -> SelectionResult | None:
    """
    Spend utxos into a single recipient output, minus the fee.

    A UTXO whose value does not exceed its marginal fee (the fee of the full
    sweep minus the fee of the sweep without it) is left out. UTXOs are not
    re-ordered. If nothing is left out, ``result.utxos`` is the very sequence
    object passed in, so callers recomputing on every change can compare by
    reference.

    Args:
        utxos: UTXOs to sweep
        recipient: Output receiving the funds
        fee_rate: Required fee rate (sat/vB)
        dust_relay_fee_rate: Fee rate used to classify dust (defaults to settings)

    Returns:
        SelectionResult with the recipient as the only target, or None if the
        swept amount would be dust
    """
    if dust_relay_fee_rate is None:
        dust_relay_fee_rate = get_settings().dust_relay_fee_rate
    validate_output_with_values(utxos)
    validate_fee_rate(fee_rate)
    validate_fee_rate(dust_relay_fee_rate)

    all_utxos_shape = TxShape.of([utxo.output for utxo in utxos], [recipient])
    all_utxos_fee = all_utxos_shape.fee(fee_rate)

    retained: list[int] = []
    retained_shape = all_utxos_shape
    for index, utxo in enumerate(utxos):
        fee_contribution = all_utxos_fee - all_utxos_shape.without_input(utxo.output).fee(
            fee_rate
        )
        if utxo.value > fee_contribution:
            retained.append(index)
        else:
            retained_shape = retained_shape.without_input(utxo.output)
            logger.debug(
                f"Leaving out UTXO #{index}: value {utxo.value} does not exceed "
                f"its fee contribution {fee_contribution}"
            )

    if not retained:
        logger.debug("No UTXO is worth sweeping at this fee rate")
        return None

    retained_fee = retained_shape.fee(fee_rate)
    retained_utxos = [utxos[index] for index in retained]
    recipient_value = sum(utxo.value for utxo in retained_utxos) - retained_fee
    if is_dust(recipient, recipient_value, dust_relay_fee_rate):
        logger.debug(f"Sweep of {recipient_value} sats would be dust")
        return None

    targets = [ValuedOutput(output=recipient, value=recipient_value)]
    fee, tx_vsize = validated_fee_and_vsize(retained_utxos, targets, fee_rate)
    return SelectionResult(
        # Same reference when nothing was pruned
        utxos=utxos if len(retained) == len(utxos) else retained_utxos,
        targets=targets,
        fee=fee,
        vsize=tx_vsize,
        utxo_indices=tuple(retained),
    )
