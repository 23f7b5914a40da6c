from datetime import date
from typing import Optional

# September: the first month of a new season
SEASON_START_MONTH = 9

def get_current_season(today: Optional[date] = None) -> int:
    """NFL season year for a date; January through August belong to the previous year's season"""
    today = today or date.today()
    if today.month >= SEASON_START_MONTH:
        return today.year
    return today.year - 1
