"""
Fixed PPR fantasy scoring shared by the stats ingest and the aggregations
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

STAT_FIELDS = (
    'passing_yards', 'passing_tds', 'passing_ints',
    'rushing_yards', 'rushing_tds',
    'receiving_yards', 'receiving_tds', 'receptions',
    'fumbles',
)

def safe_float(value):
    """Helper function to safely convert values to float"""
    if value is None:
        return 0.0
    try:
        return float(value)
    except (ValueError, TypeError):
        return 0.0

def round_half_away(value, places: int = 2) -> float:
    """Round the exact binary value of `value`, ties away from zero"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))

def _stat(stats: Any, field: str) -> float:
    # Handle both database objects and dictionaries
    if isinstance(stats, dict):
        return safe_float(stats.get(field, 0))
    return safe_float(getattr(stats, field, 0))

def calculate_fantasy_points(stats) -> float:
    """
    Calculate PPR fantasy points for one player's line in one game

    Args:
        stats: Mapping or object exposing any of STAT_FIELDS; missing values count as 0

    Returns:
        Points rounded to 2 decimals
    """
    if not stats:
        return 0.0

    points = 0.0

    # Passing: 1 point per 25 yards
    points += _stat(stats, 'passing_yards') / 25
    points += _stat(stats, 'passing_tds') * 4
    points -= _stat(stats, 'passing_ints') * 2

    # Rushing: 1 point per 10 yards
    points += _stat(stats, 'rushing_yards') / 10
    points += _stat(stats, 'rushing_tds') * 6

    # Receiving: 1 point per 10 yards, 1 per reception
    points += _stat(stats, 'receiving_yards') / 10
    points += _stat(stats, 'receiving_tds') * 6
    points += _stat(stats, 'receptions')

    points -= _stat(stats, 'fumbles') * 2

    return round_half_away(points, 2)
