"""Canonical concept caches and signal baseline engine."""
