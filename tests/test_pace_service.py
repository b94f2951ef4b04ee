"""
Unit tests for PaceService blended pace.
"""
from datetime import date, timedelta

import pytest

from services.pace_service import PaceService


TODAY = date(2025, 6, 30)


def _agg(days_ago, miles):
    return {'date': TODAY - timedelta(days=days_ago), 'miles': miles, 'daily_miles': 0}


class TestWindowPace:
    def test_needs_two_points_inside_the_window(self):
        aggregates = [_agg(60, 1000), _agg(0, 1600)]
        assert PaceService.window_pace(aggregates, 30, TODAY) == (0.0, False)

    def test_pace_between_first_and_last_in_window(self):
        aggregates = [_agg(60, 0), _agg(20, 1000), _agg(0, 1400)]
        assert PaceService.window_pace(aggregates, 30, TODAY) == (20.0, True)

    def test_same_day_points_give_zero_pace(self):
        aggregates = [_agg(0, 1000), _agg(0, 1000)]
        assert PaceService.window_pace(aggregates, 30, TODAY) == (0.0, True)


class TestCalculateBlendedPace:
    def test_returns_none_with_fewer_than_two_aggregates(self):
        assert PaceService.calculate_blended_pace([], TODAY) is None
        assert PaceService.calculate_blended_pace([_agg(0, 100)], TODAY) is None

    def test_uniform_pace_blends_to_the_same_value(self):
        aggregates = [_agg(days, (200 - days) * 30) for days in (200, 90, 60, 30, 10, 0)]
        result = PaceService.calculate_blended_pace(aggregates, TODAY)
        assert result['thirty_day_pace'] == pytest.approx(30.0)
        assert result['ninety_day_pace'] == pytest.approx(30.0)
        assert result['lifetime_pace'] == pytest.approx(30.0)
        assert result['blended_pace'] == pytest.approx(30.0)

    def test_weights_recent_windows_more_heavily(self):
        aggregates = [_agg(365, 0), _agg(90, 2750), _agg(30, 3350), _agg(0, 4850)]
        result = PaceService.calculate_blended_pace(aggregates, TODAY)
        thirty = 1500 / 30
        ninety = 2100 / 90
        lifetime = 4850 / 365
        expected = thirty * 0.5 + ninety * 0.3 + lifetime * 0.2
        assert result['blended_pace'] == pytest.approx(expected)

    def test_sparse_windows_drop_out_of_the_blend(self):
        # Only the lifetime pace has two points; it is the whole blend
        aggregates = [_agg(400, 0), _agg(200, 4000)]
        result = PaceService.calculate_blended_pace(aggregates, TODAY)
        assert result['thirty_day_pace'] == 0.0
        assert result['ninety_day_pace'] == 0.0
        assert result['blended_pace'] == pytest.approx(20.0)

    def test_thirty_days_of_steady_driving(self):
        # 1000 on day 0 and 1900 on day 30 is 30 miles a day on every measure
        aggregates = [_agg(30, 1000), _agg(0, 1900)]
        result = PaceService.calculate_blended_pace(aggregates, TODAY)
        assert result == pytest.approx({
            'thirty_day_pace': 30.0,
            'ninety_day_pace': 30.0,
            'lifetime_pace': 30.0,
            'blended_pace': 30.0,
        })

    @pytest.mark.parametrize('aggregates', [
        [_agg(365, 0), _agg(90, 2750), _agg(30, 3350), _agg(0, 4850)],
        [_agg(300, 0), _agg(80, 9000), _agg(20, 9100), _agg(0, 9150)],
        [_agg(120, 500), _agg(60, 800), _agg(25, 2300), _agg(5, 2310)],
    ])
    def test_blend_stays_between_the_slowest_and_fastest_pace(self, aggregates):
        result = PaceService.calculate_blended_pace(aggregates, TODAY)
        paces = [result['thirty_day_pace'], result['ninety_day_pace'], result['lifetime_pace']]
        assert len(set(paces)) == 3
        assert min(paces) <= result['blended_pace'] <= max(paces)
