"""
Coin selection data models and errors.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from fractions import Fraction
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from coinselect.outputs import OutputHandle


class CoinSelectError(Exception):
    """Base class for validation failures. Infeasible selections return None instead."""

    pass


class EmptyGroupError(CoinSelectError):
    """Raised when a group of UTXOs or targets is empty"""

    pass


class InvalidValueError(CoinSelectError):
    """Raised when an output value is not a positive integer within range"""

    pass


class InvalidFeeRateError(CoinSelectError):
    """Raised when a fee rate is non-finite, too low or too high"""

    pass


class DustTargetError(CoinSelectError):
    """Raised when a target output would be dust"""

    def __init__(self, index: int, value: int | None = None):
        self.index = index
        self.value = value
        super().__init__(f"Target #{index} is dusty")


class InsufficientFeeError(CoinSelectError):
    """Raised when the realized fee rate is below the requested one"""

    pass


class UnsupportedScriptError(CoinSelectError):
    """Raised when an output has no known size model"""

    pass


@dataclass(frozen=True)
class ValuedOutput:
    """An output handle paired with a value in satoshis. Used for UTXOs and targets."""

    output: OutputHandle
    value: int


class FeeAndVsize(NamedTuple):
    fee: int
    vsize: int


@dataclass(frozen=True)
class SelectionResult:
    """
    Result of coin selection.

    ``utxo_indices[i]`` is the position of ``utxos[i]`` in the sequence the caller
    passed in. When ``has_change`` is set, the last entry of ``targets`` is the
    change output.
    """

    utxos: Sequence[ValuedOutput]
    targets: list[ValuedOutput]
    fee: int
    vsize: int
    utxo_indices: tuple[int, ...] = field(default=())
    has_change: bool = False

    @property
    def change(self) -> ValuedOutput | None:
        return self.targets[-1] if self.has_change else None

    @property
    def fee_rate(self) -> Fraction:
        """Realized fee rate in sat/vB"""
        return Fraction(self.fee, self.vsize)

    @property
    def input_value(self) -> int:
        return sum(utxo.value for utxo in self.utxos)
