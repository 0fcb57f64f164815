"""
Invariants every selector must uphold, checked over seeded random wallets.
"""

from __future__ import annotations

import random
from fractions import Fraction

import pytest

from coinselect.algos import add_until_reach, branch_and_bound, max_funds
from coinselect.dust import is_dust
from coinselect.models import SelectionResult, ValuedOutput
from coinselect.outputs import Output, ScriptType
from coinselect.vsize import as_fraction, vsize

SPENDABLE = [ScriptType.P2PKH, ScriptType.P2SH_P2WPKH, ScriptType.P2WPKH, ScriptType.P2TR]
FEE_RATES = [1, 2.5, 10, 33.3]
SEEDS = range(12)


def random_wallet(rng: random.Random) -> tuple[list[ValuedOutput], list[ValuedOutput], Output]:
    utxos = [
        ValuedOutput(Output(rng.choice(SPENDABLE)), rng.randint(1_000, 500_000))
        for _ in range(rng.randint(1, 15))
    ]
    targets = [
        ValuedOutput(Output(rng.choice(list(ScriptType))), rng.randint(10_000, 200_000))
        for _ in range(rng.randint(1, 3))
    ]
    return utxos, targets, Output(rng.choice(SPENDABLE))


def assert_consistent(
    result: SelectionResult, utxos: list[ValuedOutput], fee_rate: float
) -> None:
    assert result.fee == result.input_value - sum(t.value for t in result.targets)
    assert result.vsize == vsize(
        [u.output for u in result.utxos], [t.output for t in result.targets]
    )
    assert Fraction(result.fee, result.vsize) >= as_fraction(fee_rate)
    assert result.fee_rate == Fraction(result.fee, result.vsize)
    assert [utxos[index] for index in result.utxo_indices] == list(result.utxos)
    assert len(set(result.utxo_indices)) == len(result.utxo_indices)
    for target in result.targets:
        assert not is_dust(target.output, target.value, 3)


@pytest.mark.parametrize("fee_rate", FEE_RATES)
@pytest.mark.parametrize("seed", SEEDS)
class TestSelectorInvariants:
    def test_branch_and_bound(self, seed: int, fee_rate: float) -> None:
        utxos, targets, change = random_wallet(random.Random(seed))

        result = branch_and_bound(utxos, targets, change, fee_rate)

        if result is not None:
            assert_consistent(result, utxos, fee_rate)
            assert result.targets[: len(targets)] == targets
            assert len(result.targets) == len(targets) + result.has_change

    def test_add_until_reach(self, seed: int, fee_rate: float) -> None:
        utxos, targets, change = random_wallet(random.Random(seed))

        result = add_until_reach(utxos, targets, change, fee_rate)

        if result is None:
            return
        assert_consistent(result, utxos, fee_rate)
        assert result.targets[: len(targets)] == targets
        assert result.utxo_indices == tuple(range(len(result.utxo_indices)))

    def test_max_funds(self, seed: int, fee_rate: float) -> None:
        utxos, targets, _ = random_wallet(random.Random(seed))

        result = max_funds(utxos, targets[0].output, fee_rate)

        if result is None:
            return
        assert_consistent(result, utxos, fee_rate)
        assert len(result.targets) == 1
        assert list(result.utxo_indices) == sorted(result.utxo_indices)

    def test_deterministic(self, seed: int, fee_rate: float) -> None:
        utxos, targets, change = random_wallet(random.Random(seed))

        for select in (branch_and_bound, add_until_reach):
            assert select(utxos, targets, change, fee_rate) == select(
                list(utxos), list(targets), change, fee_rate
            )
        assert max_funds(utxos, change, fee_rate) == max_funds(list(utxos), change, fee_rate)


@pytest.mark.parametrize("seed", SEEDS)
def test_branch_and_bound_funds_what_accumulation_funds(seed: int) -> None:
    """Spending largest-first never fails where caller-order accumulation succeeds."""
    utxos, targets, change = random_wallet(random.Random(seed))

    if add_until_reach(utxos, targets, change, 1) is not None:
        assert branch_and_bound(utxos, targets, change, 1) is not None
