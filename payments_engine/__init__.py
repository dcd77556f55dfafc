"""
Payments Engine

A streaming transaction engine that applies deposits, withdrawals and the
dispute/resolve/chargeback lifecycle to client accounts, using fixed-point
integer arithmetic for every monetary amount.
"""

__version__ = "1.0.0"
