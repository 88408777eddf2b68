"""Database models for the pulse engine"""
from .concept import CanonicalTag, CanonicalTheme, SignalType

__all__ = ["CanonicalTag", "CanonicalTheme", "SignalType"]
