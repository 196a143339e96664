"""
Test suite for the phone auth backend.
"""
