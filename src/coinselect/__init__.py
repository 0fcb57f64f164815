"""
coinselect - UTXO selection for Bitcoin transactions

Picks the inputs that pay a set of outputs at a required fee rate, deciding
whether a change output is worth creating. Building, signing and broadcasting
the transaction is left to the caller.
"""

__version__ = "0.1.0"

from coinselect.algos import add_until_reach, branch_and_bound, max_funds
from coinselect.config import Settings, get_settings
from coinselect.constants import BNB_MAX_ATTEMPTS, DUST_RELAY_FEE_RATE, MAX_FEE_RATE
from coinselect.dust import dust_threshold, is_dust
from coinselect.models import (
    CoinSelectError,
    DustTargetError,
    EmptyGroupError,
    FeeAndVsize,
    InsufficientFeeError,
    InvalidFeeRateError,
    InvalidValueError,
    SelectionResult,
    UnsupportedScriptError,
    ValuedOutput,
)
from coinselect.outputs import Output, OutputHandle, ScriptType
from coinselect.validation import (
    validate_dust,
    validate_fee_rate,
    validate_output_with_values,
    validated_fee_and_vsize,
)
from coinselect.vsize import vsize

__all__ = [
    "BNB_MAX_ATTEMPTS",
    "CoinSelectError",
    "DUST_RELAY_FEE_RATE",
    "DustTargetError",
    "EmptyGroupError",
    "FeeAndVsize",
    "InsufficientFeeError",
    "InvalidFeeRateError",
    "InvalidValueError",
    "MAX_FEE_RATE",
    "Output",
    "OutputHandle",
    "ScriptType",
    "SelectionResult",
    "Settings",
    "UnsupportedScriptError",
    "ValuedOutput",
    "add_until_reach",
    "branch_and_bound",
    "dust_threshold",
    "get_settings",
    "is_dust",
    "max_funds",
    "validate_dust",
    "validate_fee_rate",
    "validate_output_with_values",
    "validated_fee_and_vsize",
    "vsize",
]
