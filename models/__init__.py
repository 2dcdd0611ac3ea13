"""Data models and response decoders.

This package contains:
- types: Credentials, pairing states, sensor and temperature readings
- responses: Bridge reply classification and temperature decoding
- utils: Formatting helpers for the CLI
"""
