"""
Dashboard Service
=================
Loads one vehicle's data from the store and runs every calculator over it to
produce the context the dashboard template renders.

Load failures never stop the page: each failed load is logged, recorded in
``errors`` and replaced with an empty collection, so derived figures fall back
to zero.

Control flow
------------
  readings ─► ReadingAggregator ─► aggregates ─┬─► PaceService ─────────┐
                                               ├─► AllowanceService ────┤
  vehicle ──► lease terms ─────────────────────┘                        ├─► ForecastService
  trips ────────────────────────────────────────────────────────────────┘
  prices ───► FuelCostService (with aggregates + blended pace)
"""
import logging
from datetime import timedelta

from services.allowance_service import AllowanceService
from services.forecast_service import ForecastService
from services.fuel_cost_service import FuelCostService
from services.mileage_store import MileageStoreError
from services.pace_service import PaceService
from services.reading_aggregator import ReadingAggregator

logger = logging.getLogger(__name__)

PRICE_HISTORY_DAYS = 90


class DashboardService:
    """Compose the full dashboard view model for a vehicle."""

    @staticmethod
    def _load(errors, label, default, fn):
        try:
            return fn()
        except MileageStoreError as e:
            logger.error(f'Error loading {label}: {e}')
            errors.append(f'Could not load {label}: {e}')
            return default

    @staticmethod
    def load_lease_terms(store, vehicle_id, defaults, errors=None):
        """Lease terms for ``vehicle_id``, falling back to configured defaults"""
        errors = errors if errors is not None else []
        vehicle = DashboardService._load(
            errors, 'vehicle settings', None, lambda: store.get_vehicle(vehicle_id)
        )
        lease = AllowanceService.lease_terms(vehicle, defaults)
        lease['vehicle_id'] = vehicle_id
        return lease

    @staticmethod
    def build(store, vehicle_id, station_id, defaults, fetch_price, now, usage_range='month',
              weeks_page=0):
        """
        Args:
            store:       MileageStore.
            vehicle_id:  selected vehicle (from the session).
            station_id:  selected fuel station (from the session).
            defaults:    configuration mapping with DEFAULT_* keys.
            fetch_price: callable(station_id) -> float | None.
            now:         current datetime.
            usage_range: 'week' | 'month' | 'year' | 'lease' for the usage chart.
            weeks_page:  page of the weekly chart, 0 = most recent weeks.
        """
        today = now.date()
        errors = []

        lease = DashboardService.load_lease_terms(store, vehicle_id, defaults, errors)
        readings = DashboardService._load(errors, 'readings', [], lambda: store.list_readings(vehicle_id))
        trips = DashboardService._load(errors, 'trip events', [], lambda: store.list_trips(vehicle_id))

        # Acquire first so a price fetched on this load is part of the history
        current_price = FuelCostService.acquire_price(store, station_id, fetch_price, now)
        price_history = DashboardService._load(
            errors, 'fuel price history', [],
            lambda: store.price_history(station_id, now - timedelta(days=PRICE_HISTORY_DAYS))
        )

        aggregates = ReadingAggregator.aggregate(readings)
        pace = PaceService.calculate_blended_pace(aggregates, today)
        allowance = AllowanceService.project(aggregates, lease, today)
        weekly_trend = ForecastService.weekly_trend(aggregates, lease['annual_allowance'])
        weekly_page = ForecastService.page_weeks(weekly_trend, weeks_page)

        fuel_stats = FuelCostService.estimate(
            aggregates, lease['mpg'], price_history, current_price['price'], pace, now
        )

        trip_impact = ForecastService.trip_impact(trips, allowance['available_miles'], today)

        return {
            'vehicle_id': vehicle_id,
            'station_id': station_id,
            'lease': lease,
            'aggregates': aggregates,
            'has_readings': bool(aggregates),
            'todays_miles': ReadingAggregator.todays_miles(aggregates, today),
            'pace': pace,
            'allowance': allowance,
            'lease_progress': AllowanceService.lease_progress(lease, today),
            'current_progress': AllowanceService.centered_progress(allowance['available_miles']),
            'usage_range': usage_range,
            'usage_series': AllowanceService.usage_series(aggregates, lease, today, usage_range),
            'weekly_trend': weekly_trend,
            'weekly_page': weekly_page,
            'weekly_projection': ForecastService.project_weekly_regression(weekly_trend),
            'long_horizon': ForecastService.project_long_horizon(
                allowance['total_miles_driven'], pace, lease, today
            ),
            'lease_end_projection': ForecastService.project_lease_end(
                allowance['total_miles_driven'], pace, lease, today
            ),
            'trips': trips,
            'upcoming_trips': ForecastService.upcoming_trips(trips, today),
            'trip_impact': trip_impact,
            'projected_progress': AllowanceService.centered_progress(trip_impact['projected_available']),
            'gas_price': current_price,
            'fuel_stats': fuel_stats,
            'price_trend': FuelCostService.price_trend(price_history, now),
            'errors': errors,
        }
