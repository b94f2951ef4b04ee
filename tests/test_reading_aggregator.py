"""
Unit tests for ReadingAggregator.

Readings are plain objects; nothing here touches the database.
"""
from datetime import date

from conftest import reading
from services.reading_aggregator import ReadingAggregator


class TestAggregate:
    def test_empty_input_gives_empty_list(self):
        assert ReadingAggregator.aggregate([]) == []

    def test_keeps_the_maximum_reading_per_day(self):
        result = ReadingAggregator.aggregate([
            reading(date(2025, 1, 1), 1000),
            reading(date(2025, 1, 2), 1050),
            reading(date(2025, 1, 2), 1040),
        ])
        assert result == [
            {'date': date(2025, 1, 1), 'miles': 1000, 'daily_miles': 0},
            {'date': date(2025, 1, 2), 'miles': 1050, 'daily_miles': 50},
        ]

    def test_sorts_unordered_input_by_date(self):
        result = ReadingAggregator.aggregate([
            reading(date(2025, 1, 3), 1100),
            reading(date(2025, 1, 1), 1000),
            reading(date(2025, 1, 2), 1040),
        ])
        assert [a['date'] for a in result] == [date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3)]
        assert [a['daily_miles'] for a in result] == [0, 40, 60]

    def test_decreasing_odometer_never_gives_negative_daily_miles(self):
        result = ReadingAggregator.aggregate([
            reading(date(2025, 1, 1), 1000),
            reading(date(2025, 1, 2), 900),
        ])
        assert result[1]['daily_miles'] == 0

    def test_first_aggregate_has_zero_daily_miles(self):
        result = ReadingAggregator.aggregate([reading(date(2025, 1, 1), 5000)])
        assert result == [{'date': date(2025, 1, 1), 'miles': 5000, 'daily_miles': 0}]

    def test_aggregating_a_daily_series_again_changes_nothing(self):
        once = ReadingAggregator.aggregate([
            reading(date(2025, 1, 1), 1000),
            reading(date(2025, 1, 1), 1010),
            reading(date(2025, 1, 3), 1060),
            reading(date(2025, 1, 4), 1055),
            reading(date(2025, 1, 6), 1120),
        ])
        twice = ReadingAggregator.aggregate([reading(a['date'], a['miles']) for a in once])
        assert twice == once
        assert [a['daily_miles'] for a in twice] == [0, 50, 0, 65]


class TestTodaysMiles:
    def test_returns_daily_miles_for_today(self):
        aggregates = ReadingAggregator.aggregate([
            reading(date(2025, 1, 1), 1000),
            reading(date(2025, 1, 2), 1032),
        ])
        assert ReadingAggregator.todays_miles(aggregates, date(2025, 1, 2)) == 32

    def test_returns_zero_without_a_reading_today(self):
        aggregates = ReadingAggregator.aggregate([reading(date(2025, 1, 1), 1000)])
        assert ReadingAggregator.todays_miles(aggregates, date(2025, 1, 5)) == 0
