"""
Test configuration for coinselect tests.
"""

from __future__ import annotations

import os
from collections.abc import Callable

import pytest

from coinselect.models import ValuedOutput
from coinselect.outputs import Output, ScriptType


@pytest.fixture(autouse=True)
def default_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep COINSELECT_* variables from the environment out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("COINSELECT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def p2wpkh() -> Output:
    return Output(ScriptType.P2WPKH)


@pytest.fixture
def p2pkh() -> Output:
    return Output(ScriptType.P2PKH)


@pytest.fixture
def wpkh_outputs() -> Callable[..., list[ValuedOutput]]:
    """Factory for P2WPKH outputs with the given values."""

    def make(*values: int) -> list[ValuedOutput]:
        return [ValuedOutput(Output(ScriptType.P2WPKH), value) for value in values]

    return make
