"""
Tests for DashboardService.build against the in-memory store.
"""
from datetime import datetime, timedelta

import pytest

from conftest import FakeFetcher
from services.dashboard_service import DashboardService
from services.mileage_store import UnconfiguredStore


# ---------------------------------------------------------------------------
# Fuel figures
# ---------------------------------------------------------------------------

class TestFuelFigures:
    def test_price_fetched_on_this_load_counts_toward_spend(self, app, store):
        now = datetime.now()
        today = now.date()
        store.add_reading('truck', today - timedelta(days=6), 1000)
        store.add_reading('truck', today, 1300)
        store.add_price('26449', 3.00, now - timedelta(days=2))
        fetcher = FakeFetcher(4.00)

        context = DashboardService.build(store, 'truck', '26449', app.config, fetcher, now)

        assert context['gas_price'] == {'price': 4.0, 'source': 'fetched'}
        # 300 miles at 30 mpg is 10 gallons at the $3.50 mean of both samples
        assert context['fuel_stats']['spent_week'] == pytest.approx(35.00)
        assert [p['price'] for p in context['price_trend']] == pytest.approx([3.00, 4.00])
        assert context['errors'] == []

    def test_stored_price_for_today_skips_the_fetcher(self, app, store):
        now = datetime.now()
        store.add_price('26449', 3.25, now)
        fetcher = FakeFetcher(9.99)

        context = DashboardService.build(store, 'truck', '26449', app.config, fetcher, now)

        assert context['gas_price'] == {'price': 3.25, 'source': 'stored'}
        assert fetcher.calls == []


# ---------------------------------------------------------------------------
# Store failures
# ---------------------------------------------------------------------------

class TestStoreFailures:
    def test_unconfigured_store_still_builds_a_context(self, app):
        now = datetime.now()
        fetcher = FakeFetcher(4.00)

        context = DashboardService.build(UnconfiguredStore(), 'truck', '26449', app.config, fetcher, now)

        assert context['has_readings'] is False
        assert context['gas_price'] == {'price': 4.0, 'source': 'fetched'}
        assert context['price_trend'] == []
        assert context['weekly_page']['weeks'] == []
        assert any('readings' in error for error in context['errors'])
