"""
Test suite for the Stellar XLM Blink backend.
"""
