"""
Wallet - Signing identity for Counterloop.
"""
