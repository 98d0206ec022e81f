"""
Contract ABIs used by the wallet keeper.
"""

from .erc20 import ERC20_ABI

__all__ = ["ERC20_ABI"]
