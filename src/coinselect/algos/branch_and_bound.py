"""
Branch-and-bound coin selection.

Searches for a set of UTXOs that pays the targets and fee without needing a
change output, i.e. whose excess over the exact requirement is smaller than
what a change output would cost. When no such set is found within the attempt
budget, falls back to largest-first accumulation with change.

The search follows Bitcoin Core's SelectCoinsBnB: candidates are sorted by
effective value (value minus the fee to spend them) and explored depth-first,
always trying inclusion before omission. It runs on an explicit selection
stack with an attempt counter, so it always terminates.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Real

from loguru import logger

from coinselect.algos.accumulative import accumulate
from coinselect.config import get_settings
from coinselect.dust import dust_threshold
from coinselect.models import SelectionResult, ValuedOutput
from coinselect.outputs import OutputHandle
from coinselect.validation import (
    validate_dust,
    validate_fee_rate,
    validate_output_with_values,
    validated_fee_and_vsize,
)
from coinselect.vsize import TxShape, fee_for_vsize, weight_to_vsize


@dataclass(frozen=True)
class Candidate:
    index: int
    utxo: ValuedOutput
    effective_value: int
    input_weight: int


@dataclass(frozen=True)
class Match:
    indices: tuple[int, ...]
    waste: int

    @property
    def rank(self) -> tuple[int, int, tuple[int, ...]]:
        # Fewer inputs, then less waste, then lower original indices
        return (len(self.indices), self.waste, self.indices)


def effective_candidates(utxos: Sequence[ValuedOutput], fee_rate: Real) -> list[Candidate]:
    """UTXOs worth spending at fee_rate, largest effective value first."""
    candidates = []
    for index, utxo in enumerate(utxos):
        input_weight = utxo.output.input_weight()
        input_fee = fee_for_vsize(weight_to_vsize(input_weight), fee_rate)
        effective_value = utxo.value - input_fee
        if effective_value > 0:
            candidates.append(Candidate(index, utxo, effective_value, input_weight))
        else:
            logger.debug(
                f"Skipping UTXO #{index}: value {utxo.value} does not cover its fee {input_fee}"
            )
    candidates.sort(key=lambda c: (-c.effective_value, c.index))
    return candidates


def search_changeless(
    candidates: list[Candidate],
    target_value: int,
    target_shape: TxShape,
    cost_of_change: int,
    fee_rate: Real,
    max_attempts: int,
) -> Match | None:
    """
    Depth-first search for the best selection with 0 <= excess <= cost_of_change.

    ``selection`` holds positions into candidates that are currently included;
    ``depth`` is the next position to decide. Backtracking walks depth back to
    the last included candidate and switches it to omitted.
    """
    selection: list[int] = []
    shapes = [target_shape]
    selected_value = 0
    selected_effective = 0
    remaining_effective = sum(c.effective_value for c in candidates)
    required_effective = target_value + target_shape.fee(fee_rate)

    best: Match | None = None
    depth = 0
    attempt = 0
    for attempt in range(max_attempts):
        excess = selected_value - target_value - shapes[-1].fee(fee_rate)

        backtrack = False
        if excess > cost_of_change:
            backtrack = True
        elif best is not None and len(selection) > len(best.indices):
            backtrack = True
        elif selection and excess >= 0:
            match = Match(
                indices=tuple(sorted(candidates[pos].index for pos in selection)),
                waste=excess,
            )
            if best is None or match.rank < best.rank:
                best = match
            backtrack = True
        elif selected_effective + remaining_effective < required_effective:
            backtrack = True
        elif depth >= len(candidates):
            backtrack = True

        if backtrack:
            if not selection:
                break
            # Return omitted candidates to the lookahead
            depth -= 1
            while depth > selection[-1]:
                remaining_effective += candidates[depth].effective_value
                depth -= 1
            # Now try omitting the last included candidate
            candidate = candidates[selection.pop()]
            shapes.pop()
            selected_value -= candidate.utxo.value
            selected_effective -= candidate.effective_value
        else:
            candidate = candidates[depth]
            remaining_effective -= candidate.effective_value
            previous = candidates[depth - 1] if depth > 0 else None
            # Including a twin of an omitted candidate can only repeat that
            # branch with higher indices
            skip = (
                previous is not None
                and (not selection or selection[-1] != depth - 1)
                and previous.effective_value == candidate.effective_value
                and previous.input_weight == candidate.input_weight
            )
            if not skip:
                selection.append(depth)
                shapes.append(shapes[-1].with_input(candidate.utxo.output))
                selected_value += candidate.utxo.value
                selected_effective += candidate.effective_value
        depth += 1
    else:
        logger.debug(f"Branch and bound exhausted its budget of {max_attempts} attempts")

    if best is not None:
        logger.debug(
            f"Branch and bound found a changeless selection of {len(best.indices)} inputs "
            f"(waste {best.waste}) after {attempt + 1} attempts"
        )
    return best


def branch_and_bound(
    utxos: Sequence[ValuedOutput],
    targets: Sequence[ValuedOutput],
    change: OutputHandle,
    fee_rate: Real,
    dust_relay_fee_rate: Real | None = None,
    max_attempts: int | None = None,
) -> SelectionResult | None:
    """
    Select UTXOs minimizing waste, avoiding a change output when possible.

    Args:
        utxos: Candidate UTXOs
        targets: Payment outputs
        change: Template for the change output, used if no changeless match exists
        fee_rate: Required fee rate (sat/vB)
        dust_relay_fee_rate: Fee rate used to classify dust (defaults to settings)
        max_attempts: Search budget (defaults to settings)

    Returns:
        SelectionResult, or None if the utxos cannot pay for the targets
    """
    settings = get_settings()
    if dust_relay_fee_rate is None:
        dust_relay_fee_rate = settings.dust_relay_fee_rate
    if max_attempts is None:
        max_attempts = settings.bnb_max_attempts
    validate_output_with_values(utxos)
    validate_output_with_values(targets)
    validate_fee_rate(fee_rate)
    validate_fee_rate(dust_relay_fee_rate)
    validate_dust(targets, dust_relay_fee_rate)

    target_value = sum(target.value for target in targets)
    target_shape = TxShape.of([], [target.output for target in targets])
    candidates = effective_candidates(utxos, fee_rate)
    if not candidates:
        logger.debug("No UTXO is worth spending at this fee rate")
        return None

    change_fee = fee_for_vsize(weight_to_vsize(change.output_weight()), fee_rate)
    cost_of_change = change_fee + dust_threshold(change, dust_relay_fee_rate)

    match = search_changeless(
        candidates, target_value, target_shape, cost_of_change, fee_rate, max_attempts
    )
    if match is not None:
        selected_utxos = [utxos[index] for index in match.indices]
        final_targets = list(targets)
        fee, tx_vsize = validated_fee_and_vsize(selected_utxos, final_targets, fee_rate)
        return SelectionResult(
            utxos=selected_utxos,
            targets=final_targets,
            fee=fee,
            vsize=tx_vsize,
            utxo_indices=match.indices,
        )

    logger.debug("No changeless selection found, falling back to largest-first accumulation")
    return accumulate(
        utxos,
        [c.index for c in candidates],
        targets,
        change,
        fee_rate,
        dust_relay_fee_rate,
    )
