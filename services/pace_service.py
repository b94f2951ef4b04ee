"""
Pace Service
============
Average daily mileage over the trailing 30 and 90 days and over the whole
reading history, blended into a single forecasting pace.

Blend weights
-------------
  30-day window   0.5   (only when the window holds at least 2 aggregates)
  90-day window   0.3   (only when the window holds at least 2 aggregates)
  lifetime        0.2   (always)

A window with fewer than two points contributes a pace of 0 with weight 0; it
never falls back to a shorter window.  The blended pace is the weighted mean of
the contributing paces.
"""
from datetime import timedelta


THIRTY_DAY_WEIGHT = 0.5
NINETY_DAY_WEIGHT = 0.3
LIFETIME_WEIGHT = 0.2


class PaceService:
    """Miles-per-day pace calculations over a sorted aggregate series."""

    @staticmethod
    def _pace_between(first, last):
        days = (last['date'] - first['date']).days
        if days == 0:
            return 0.0
        return (last['miles'] - first['miles']) / days

    @staticmethod
    def window_pace(aggregates, days, today):
        """
        Pace over aggregates dated on or after ``today - days``.

        Returns:
            (pace, has_enough_points) - pace is 0.0 when fewer than two
            aggregates fall inside the window.
        """
        cutoff = today - timedelta(days=days)
        in_window = [a for a in aggregates if a['date'] >= cutoff]
        if len(in_window) < 2:
            return 0.0, False
        return PaceService._pace_between(in_window[0], in_window[-1]), True

    @staticmethod
    def lifetime_pace(aggregates):
        """Pace from the first to the last aggregate"""
        if len(aggregates) < 2:
            return 0.0
        return PaceService._pace_between(aggregates[0], aggregates[-1])

    @staticmethod
    def calculate_blended_pace(aggregates, today):
        """
        Compute 30-day, 90-day, lifetime and blended pace in miles/day.

        Args:
            aggregates: daily aggregates sorted by date ascending.
            today:      reference date for the trailing windows.

        Returns:
            dict with thirty_day_pace, ninety_day_pace, lifetime_pace and
            blended_pace, or None when fewer than two aggregates exist.
        """
        if len(aggregates) < 2:
            return None

        thirty_day_pace, has_thirty = PaceService.window_pace(aggregates, 30, today)
        ninety_day_pace, has_ninety = PaceService.window_pace(aggregates, 90, today)
        lifetime_pace = PaceService.lifetime_pace(aggregates)

        weights = [
            (thirty_day_pace, THIRTY_DAY_WEIGHT if has_thirty else 0.0),
            (ninety_day_pace, NINETY_DAY_WEIGHT if has_ninety else 0.0),
            (lifetime_pace, LIFETIME_WEIGHT),
        ]
        total_weight = sum(weight for _, weight in weights)
        if total_weight == 0:
            return None

        blended_pace = sum(pace * weight for pace, weight in weights) / total_weight

        return {
            'thirty_day_pace': thirty_day_pace,
            'ninety_day_pace': ninety_day_pace,
            'lifetime_pace': lifetime_pace,
            'blended_pace': blended_pace,
        }
