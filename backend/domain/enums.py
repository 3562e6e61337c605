"""
Domain enums.
"""

from enum import Enum


class StellarNetwork(str, Enum):
    TESTNET = "testnet"
    MAINNET = "mainnet"
