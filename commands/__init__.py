"""CLI command modules.

This package contains:
- setup: Help, discovery, pairing and configuration commands
- temperature: show and watch commands
- helpers: Shared output and widget construction helpers
"""
