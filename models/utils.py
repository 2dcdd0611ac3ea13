"""Utility functions for the Hue temperature CLI.

This module contains helper functions used by the commands:
- format_temperature: Render a reading for display
- format_connection: LIVE/OFFLINE label for a connection state
- format_updated: Short "Updated HH:MM" label
- similarity_score: Fuzzy string matching for command typo suggestions
"""

from models.types import ConnectionState, TemperatureReading


def format_temperature(reading: TemperatureReading | None, precise: bool = True) -> str:
    """Format a reading as e.g. '21.5°C'.

    Args:
        reading: Decoded reading, or None when nothing has been read yet
        precise: If False, round to whole degrees like the compact display
    """
    if reading is None:
        return '--°'
    if precise:
        return f"{reading.temperature_celsius:.1f}°C"
    return f"{round(reading.temperature_celsius)}°"


def format_connection(state: ConnectionState) -> str:
    return 'LIVE' if state is ConnectionState.CONNECTED else 'OFFLINE'


def format_updated(reading: TemperatureReading) -> str:
    return f"Updated {reading.observed_at.strftime('%H:%M')}"


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    Args:
        s1: First string to compare
        s2: Second string to compare

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Character sequence matching
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0
