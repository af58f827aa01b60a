"""
Payment Engine

Replays deposits, withdrawals, disputes, resolutions and chargebacks against
client accounts using exact Decimal arithmetic.
"""

__version__ = "1.0.0"
