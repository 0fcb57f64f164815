"""
Bitcoin relay-policy and serialization constants used by coin selection.

Dust and fee-rate limits follow Bitcoin Core's policy defaults:
- DUST_RELAY_FEE_RATE: -dustrelayfee default of 3000 sat/kvB (3 sat/vB)
- MAX_FEE_RATE: upper bound on any fee rate we accept, guards against
  overflows and fat-finger fees
"""

from __future__ import annotations

# Fee rates are expressed in satoshis per virtual byte
DUST_RELAY_FEE_RATE = 3
MAX_FEE_RATE = 5000
MIN_FEE_RATE = 1

# 1M BTC
MAX_OUTPUT_VALUE = 10**14

# Bitcoin Core's BnB try limit (TOTAL_TRIES)
BNB_MAX_ATTEMPTS = 100_000

WITNESS_SCALE_FACTOR = 4

# Non-witness transaction fields (bytes)
TX_VERSION_SIZE = 4
TX_LOCKTIME_SIZE = 4
OUTPOINT_SIZE = 36  # txid (32) + vout (4)
SEQUENCE_SIZE = 4
OUTPUT_VALUE_SIZE = 8

# Segwit marker + flag, counted at witness weight (1 WU each)
SEGWIT_MARKER_FLAG_WEIGHT = 2

# Worst-case signature material
ECDSA_SIGNATURE_SIZE = 72  # DER signature incl. sighash byte
SCHNORR_SIGNATURE_SIZE = 65  # 64-byte signature + explicit sighash byte
COMPRESSED_PUBKEY_SIZE = 33

# Size of the input that spends an output, as used by GetDustThreshold
DUST_SPEND_SIZE = 32 + 4 + 1 + 107 + 4  # 148
DUST_WITNESS_SPEND_SIZE = 32 + 4 + 1 + (107 // WITNESS_SCALE_FACTOR) + 4  # 67
