"""
Output handles: the size model of a script, seen as an input and as an output.

Selection only needs to know how much an output weighs when it is created and
when it is later spent. Callers may bring their own handles (e.g. built from
output descriptors) by implementing OutputHandle. Output covers the standard
single-key script types plus bare P2SH/P2WSH, which can be paid to but whose
spending size depends on an unknown script.

Weights are in weight units (WU). Non-witness bytes count 4 WU, witness bytes 1 WU.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from coinselect.constants import (
    COMPRESSED_PUBKEY_SIZE,
    ECDSA_SIGNATURE_SIZE,
    OUTPOINT_SIZE,
    OUTPUT_VALUE_SIZE,
    SCHNORR_SIGNATURE_SIZE,
    SEQUENCE_SIZE,
    WITNESS_SCALE_FACTOR,
)
from coinselect.models import UnsupportedScriptError


class OutputHandle(ABC):
    """
    Interface for anything that can be spent or paid to.

    Implementations must be deterministic: the same handle always reports the
    same weights.
    """

    @abstractmethod
    def input_weight(self) -> int:
        """
        Worst-case weight of an input spending this output, excluding the
        empty witness byte a non-witness input gets in a segwit transaction.

        Raises:
            UnsupportedScriptError: If the spending size is unknown
        """

    @abstractmethod
    def output_weight(self) -> int:
        """Weight of this output when created (value + scriptPubKey)"""

    @abstractmethod
    def is_segwit(self) -> bool:
        """True if spending this output carries witness data"""

    @abstractmethod
    def is_witness_program(self) -> bool:
        """True if the scriptPubKey is a witness program (relay dust policy)"""


class ScriptType(str, Enum):
    P2PKH = "p2pkh"
    P2SH_P2WPKH = "p2sh-p2wpkh"
    P2WPKH = "p2wpkh"
    P2TR = "p2tr"
    P2SH = "p2sh"
    P2WSH = "p2wsh"


SCRIPTPUBKEY_SIZES: dict[ScriptType, int] = {
    # OP_DUP OP_HASH160 <20> OP_EQUALVERIFY OP_CHECKSIG
    ScriptType.P2PKH: 25,
    # OP_HASH160 <20> OP_EQUAL
    ScriptType.P2SH_P2WPKH: 23,
    ScriptType.P2SH: 23,
    # OP_0 <20>
    ScriptType.P2WPKH: 22,
    # OP_0 <32>
    ScriptType.P2WSH: 34,
    # OP_1 <32>
    ScriptType.P2TR: 34,
}

WITNESS_PROGRAMS = frozenset({ScriptType.P2WPKH, ScriptType.P2WSH, ScriptType.P2TR})


def _input_weight(script_sig_size: int, witness_size: int = 0) -> int:
    # script_sig_size < 0xFD so its length prefix is always one byte
    non_witness = OUTPOINT_SIZE + 1 + script_sig_size + SEQUENCE_SIZE
    return non_witness * WITNESS_SCALE_FACTOR + witness_size


# <sig> <pubkey>, each with a one-byte push / length prefix
_SIG_AND_PUBKEY_SIZE = 1 + ECDSA_SIGNATURE_SIZE + 1 + COMPRESSED_PUBKEY_SIZE

INPUT_WEIGHTS: dict[ScriptType, int] = {
    ScriptType.P2PKH: _input_weight(_SIG_AND_PUBKEY_SIZE),
    # scriptSig pushes the 22-byte P2WPKH redeem script; witness: item count + items
    ScriptType.P2SH_P2WPKH: _input_weight(1 + 22, 1 + _SIG_AND_PUBKEY_SIZE),
    ScriptType.P2WPKH: _input_weight(0, 1 + _SIG_AND_PUBKEY_SIZE),
    # Key path spend
    ScriptType.P2TR: _input_weight(0, 1 + 1 + SCHNORR_SIGNATURE_SIZE),
}

SEGWIT_INPUTS = frozenset({ScriptType.P2SH_P2WPKH, ScriptType.P2WPKH, ScriptType.P2TR})


@dataclass(frozen=True)
class Output(OutputHandle):
    """Output handle for a standard script type."""

    script_type: ScriptType
    scriptpubkey: bytes = b""

    def input_weight(self) -> int:
        weight = INPUT_WEIGHTS.get(self.script_type)
        if weight is None:
            raise UnsupportedScriptError(
                f"Cannot estimate spending size of {self.script_type.value} output"
            )
        return weight

    def output_weight(self) -> int:
        # scriptPubKey sizes are < 0xFD so the length prefix is one byte
        size = OUTPUT_VALUE_SIZE + 1 + SCRIPTPUBKEY_SIZES[self.script_type]
        return size * WITNESS_SCALE_FACTOR

    def is_segwit(self) -> bool:
        return self.script_type in SEGWIT_INPUTS

    def is_witness_program(self) -> bool:
        return self.script_type in WITNESS_PROGRAMS

    @classmethod
    def from_scriptpubkey(cls, scriptpubkey: bytes) -> Output:
        """
        Classify a scriptPubKey.

        P2SH outputs are returned as bare P2SH since the redeem script is not
        known; use ScriptType.P2SH_P2WPKH explicitly for wrapped segwit UTXOs.

        Raises:
            UnsupportedScriptError: If the script is not a known template
        """
        spk = scriptpubkey
        if len(spk) == 25 and spk[:3] == bytes([0x76, 0xA9, 0x14]) and spk[-2:] == bytes(
            [0x88, 0xAC]
        ):
            return cls(ScriptType.P2PKH, spk)
        if len(spk) == 23 and spk[:2] == bytes([0xA9, 0x14]) and spk[-1] == 0x87:
            return cls(ScriptType.P2SH, spk)
        if len(spk) == 22 and spk[:2] == bytes([0x00, 0x14]):
            return cls(ScriptType.P2WPKH, spk)
        if len(spk) == 34 and spk[:2] == bytes([0x00, 0x20]):
            return cls(ScriptType.P2WSH, spk)
        if len(spk) == 34 and spk[:2] == bytes([0x51, 0x20]):
            return cls(ScriptType.P2TR, spk)
        raise UnsupportedScriptError(f"Unsupported scriptPubKey: {spk.hex()}")

    @classmethod
    def from_address(cls, address: str) -> Output:
        """Classify a Bitcoin address (see address_to_scriptpubkey)."""
        return cls.from_scriptpubkey(address_to_scriptpubkey(address))


def address_to_scriptpubkey(address: str) -> bytes:
    """
    Convert a Bitcoin address to scriptPubKey.

    Supports:
    - P2WPKH (bc1q..., tb1q..., bcrt1q...)
    - P2WSH (bc1q... 62 chars, tb1q... 62 chars)
    - P2PKH (1..., m..., n...)
    - P2SH (3..., 2...)

    Raises:
        ValueError: If the address cannot be decoded
    """
    import bech32

    # Bech32 (SegWit v0) addresses
    if address.lower().startswith(("bc1", "tb1", "bcrt1")):
        hrp_end = 4 if address.lower().startswith("bcrt") else 2
        hrp = address[:hrp_end].lower()

        witver, witprog_data = bech32.decode(hrp, address)
        if witver is None or witprog_data is None:
            raise ValueError(f"Invalid bech32 address: {address}")

        witprog = bytes(witprog_data)
        if witver == 0:
            if len(witprog) == 20:
                return bytes([0x00, 0x14]) + witprog
            elif len(witprog) == 32:
                return bytes([0x00, 0x20]) + witprog

        raise ValueError(f"Unsupported witness version: {witver}")

    # Base58 addresses (legacy)
    import base58

    decoded = base58.b58decode_check(address)
    version = decoded[0]
    payload = decoded[1:]

    if version in (0x00, 0x6F):  # Mainnet/Testnet P2PKH
        return bytes([0x76, 0xA9, 0x14]) + payload + bytes([0x88, 0xAC])
    elif version in (0x05, 0xC4):  # Mainnet/Testnet P2SH
        return bytes([0xA9, 0x14]) + payload + bytes([0x87])

    raise ValueError(f"Unknown address version: {version}")
