"""
wallet_keeper - keep a set of HD-derived wallets funded from one treasury.
"""

__version__ = "0.1.0"
