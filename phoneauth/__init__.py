"""
Phone Auth Backend

OTP phone verification, registration and session tokens.
"""

__version__ = "1.0.0"
