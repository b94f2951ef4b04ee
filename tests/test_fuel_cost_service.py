"""
Unit tests for FuelCostService spend estimates and the daily price policy.
"""
from datetime import date, datetime, timedelta

import pytest

from conftest import FakeFetcher, price_sample
from services.fuel_cost_service import FuelCostService
from services.mileage_store import MileageStoreError, UnconfiguredStore


NOW = datetime(2025, 6, 30, 9, 0)
TODAY = NOW.date()


def _agg(days_ago, miles):
    return {'date': TODAY - timedelta(days=days_ago), 'miles': miles, 'daily_miles': 0}


class MemoryPriceStore:
    """Just the price methods of a MileageStore, kept in a list."""

    def __init__(self, samples=None):
        self.samples = list(samples or [])

    def price_for_day(self, station_id, day):
        todays = [s for s in self.samples if s.recorded_at.date() == day]
        return todays[-1] if todays else None

    def latest_price(self, station_id):
        return max(self.samples, key=lambda s: s.recorded_at) if self.samples else None

    def add_price(self, station_id, price, recorded_at):
        sample = price_sample(recorded_at, price)
        self.samples.append(sample)
        return sample


class BrokenSaveStore(MemoryPriceStore):
    def add_price(self, station_id, price, recorded_at):
        raise MileageStoreError('Error saving fuel price')


# ---------------------------------------------------------------------------
# estimate
# ---------------------------------------------------------------------------

class TestEstimate:
    def test_month_of_driving_at_a_flat_price(self):
        aggregates = [_agg(30, 1000), _agg(0, 1900)]
        stats = FuelCostService.estimate(aggregates, 30, [], 3.60, {'blended_pace': 20.0}, NOW)

        assert stats['spent_month'] == 108.00
        assert stats['spent_quarter'] == 108.00
        assert stats['spent_week'] == 0.0
        assert stats['forecast_week'] == pytest.approx(16.80)
        assert stats['forecast_month'] == pytest.approx(72.00)
        assert stats['forecast_quarter'] == pytest.approx(216.00)

    def test_uses_average_sample_price_inside_each_window(self):
        aggregates = [_agg(7, 1000), _agg(0, 1300)]
        samples = [
            price_sample(NOW - timedelta(days=40), 5.00),
            price_sample(NOW - timedelta(days=3), 3.00),
            price_sample(NOW - timedelta(days=1), 4.00),
        ]
        stats = FuelCostService.estimate(aggregates, 30, samples, 4.00, None, NOW)
        # 300 miles / 30 mpg = 10 gallons at the 7-day mean of 3.50
        assert stats['spent_week'] == 35.00
        assert stats['forecast_month'] == 0.0

    @pytest.mark.parametrize('price, mpg, aggregates', [
        (None, 30, [_agg(30, 1000), _agg(0, 1900)]),
        (3.60, 0, [_agg(30, 1000), _agg(0, 1900)]),
        (3.60, 30, []),
    ])
    def test_all_zero_without_price_readings_or_mpg(self, price, mpg, aggregates):
        stats = FuelCostService.estimate(aggregates, mpg, [], price, {'blended_pace': 20.0}, NOW)
        assert set(stats.values()) == {0.0}
        assert len(stats) == 6


# ---------------------------------------------------------------------------
# acquire_price
# ---------------------------------------------------------------------------

class TestAcquirePrice:
    def test_reuses_todays_stored_price_without_fetching(self):
        store = MemoryPriceStore([price_sample(NOW - timedelta(hours=2), 3.459)])
        fetcher = FakeFetcher(price=9.99)

        result = FuelCostService.acquire_price(store, '26449', fetcher, NOW)

        assert result == {'price': 3.459, 'source': 'stored'}
        assert fetcher.calls == []

    def test_fetches_and_saves_when_nothing_stored_today(self):
        store = MemoryPriceStore([price_sample(NOW - timedelta(days=1), 3.20)])
        fetcher = FakeFetcher(price=3.35)

        result = FuelCostService.acquire_price(store, '26449', fetcher, NOW)

        assert result == {'price': 3.35, 'source': 'fetched'}
        assert fetcher.calls == ['26449']
        assert store.samples[-1].recorded_at == NOW

    def test_falls_back_to_last_known_price_when_fetch_fails(self):
        store = MemoryPriceStore([
            price_sample(NOW - timedelta(days=5), 3.10),
            price_sample(NOW - timedelta(days=2), 3.25),
        ])
        result = FuelCostService.acquire_price(store, '26449', FakeFetcher(), NOW)
        assert result == {'price': 3.25, 'source': 'fallback'}

    def test_no_price_anywhere(self):
        result = FuelCostService.acquire_price(MemoryPriceStore(), '26449', FakeFetcher(), NOW)
        assert result == {'price': None, 'source': None}

    def test_fetched_price_is_returned_even_if_saving_fails(self):
        result = FuelCostService.acquire_price(BrokenSaveStore(), '26449', FakeFetcher(3.40), NOW)
        assert result == {'price': 3.40, 'source': 'fetched'}

    def test_unconfigured_store_still_uses_the_fetcher(self):
        result = FuelCostService.acquire_price(UnconfiguredStore(), '26449', FakeFetcher(3.40), NOW)
        assert result == {'price': 3.40, 'source': 'fetched'}


# ---------------------------------------------------------------------------
# price_trend
# ---------------------------------------------------------------------------

class TestPriceTrend:
    def test_averages_samples_per_day_inside_the_window(self):
        samples = [
            price_sample(NOW - timedelta(days=45), 4.00),
            price_sample(datetime(2025, 6, 20, 8, 0), 3.00),
            price_sample(datetime(2025, 6, 20, 18, 0), 3.50),
            price_sample(datetime(2025, 6, 29, 8, 0), 3.40),
        ]
        trend = FuelCostService.price_trend(samples, NOW)
        assert [point['date'] for point in trend] == [date(2025, 6, 20).isoformat(), '2025-06-29']
        assert trend[0]['price'] == pytest.approx(3.25)
        assert trend[0]['label'] == 'Jun 20'
