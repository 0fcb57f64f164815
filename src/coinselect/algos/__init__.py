"""
Coin selection algorithms.
"""

from coinselect.algos.accumulative import add_until_reach
from coinselect.algos.branch_and_bound import branch_and_bound
from coinselect.algos.max_funds import max_funds

__all__ = [
    "add_until_reach",
    "branch_and_bound",
    "max_funds",
]
