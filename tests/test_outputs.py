"""
Tests for output handles.
"""

from __future__ import annotations

import pytest

from coinselect.models import UnsupportedScriptError
from coinselect.outputs import Output, ScriptType, address_to_scriptpubkey


class TestWeights:
    """Worst-case weights per script type."""

    def test_input_weights(self) -> None:
        assert Output(ScriptType.P2PKH).input_weight() == 592
        assert Output(ScriptType.P2SH_P2WPKH).input_weight() == 364
        assert Output(ScriptType.P2WPKH).input_weight() == 272
        assert Output(ScriptType.P2TR).input_weight() == 231

    def test_output_weights(self) -> None:
        assert Output(ScriptType.P2PKH).output_weight() == 136
        assert Output(ScriptType.P2SH).output_weight() == 128
        assert Output(ScriptType.P2WPKH).output_weight() == 124
        assert Output(ScriptType.P2WSH).output_weight() == 172
        assert Output(ScriptType.P2TR).output_weight() == 172

    @pytest.mark.parametrize("script_type", [ScriptType.P2SH, ScriptType.P2WSH])
    def test_unknown_spending_size(self, script_type: ScriptType) -> None:
        with pytest.raises(UnsupportedScriptError, match=script_type.value):
            Output(script_type).input_weight()

    def test_segwit_flags(self) -> None:
        wrapped = Output(ScriptType.P2SH_P2WPKH)
        assert wrapped.is_segwit()
        assert not wrapped.is_witness_program()

        assert not Output(ScriptType.P2PKH).is_segwit()
        assert Output(ScriptType.P2TR).is_segwit()
        assert Output(ScriptType.P2WSH).is_witness_program()


class TestFromAddress:
    def test_p2wpkh_mainnet(self) -> None:
        output = Output.from_address("bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4")
        assert output.script_type == ScriptType.P2WPKH
        assert len(output.scriptpubkey) == 22

    def test_p2wpkh_testnet(self) -> None:
        output = Output.from_address("tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx")
        assert output.script_type == ScriptType.P2WPKH

    def test_p2wpkh_regtest(self) -> None:
        output = Output.from_address("bcrt1qw508d6qejxtdg4y5r3zarvary0c5xw7kygt080")
        assert output.script_type == ScriptType.P2WPKH

    def test_p2wsh_mainnet(self) -> None:
        output = Output.from_address(
            "bc1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3qccfmv3"
        )
        assert output.script_type == ScriptType.P2WSH
        assert output.scriptpubkey[:2] == bytes([0x00, 0x20])

    def test_p2pkh_mainnet(self) -> None:
        output = Output.from_address("1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2")
        assert output.script_type == ScriptType.P2PKH
        assert output.scriptpubkey[0] == 0x76  # OP_DUP
        assert output.scriptpubkey[-1] == 0xAC  # OP_CHECKSIG

    def test_p2sh_mainnet(self) -> None:
        output = Output.from_address("3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy")
        assert output.script_type == ScriptType.P2SH

    def test_invalid_bech32(self) -> None:
        with pytest.raises(ValueError, match="Invalid bech32"):
            address_to_scriptpubkey("bc1invalid")

    def test_invalid_base58(self) -> None:
        with pytest.raises(ValueError):
            address_to_scriptpubkey("1InvalidAddress")


class TestFromScriptPubKey:
    def test_p2tr(self) -> None:
        spk = bytes([0x51, 0x20]) + bytes(32)
        output = Output.from_scriptpubkey(spk)
        assert output.script_type == ScriptType.P2TR
        assert output.scriptpubkey == spk

    def test_p2wpkh(self) -> None:
        spk = bytes([0x00, 0x14]) + bytes(20)
        assert Output.from_scriptpubkey(spk).script_type == ScriptType.P2WPKH

    def test_op_return_unsupported(self) -> None:
        with pytest.raises(UnsupportedScriptError):
            Output.from_scriptpubkey(bytes([0x6A, 0x04]) + b"test")

    def test_handles_are_hashable_and_comparable(self) -> None:
        spk = bytes([0x00, 0x14]) + bytes(20)
        assert Output.from_scriptpubkey(spk) == Output(ScriptType.P2WPKH, spk)
        assert len({Output.from_scriptpubkey(spk), Output(ScriptType.P2WPKH, spk)}) == 1
