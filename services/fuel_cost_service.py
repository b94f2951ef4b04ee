"""
Fuel Cost Service
=================
Estimates fuel spend from odometer history, a vehicle MPG figure and scraped
station prices.

Spend and forecast
------------------
  spent(N)    = miles driven in the trailing N days / mpg × mean price over the
                trailing N days (latest known price when no sample falls in range)
  forecast(N) = blended pace × N / mpg × latest price

for N in 7 / 30 / 90 days (week / month / quarter).

Price acquisition
-----------------
``acquire_price()`` scrapes at most once per station per calendar day:

1. A sample already stored for today is reused.
2. Otherwise the fetcher is called once; a price is persisted and returned.
3. Otherwise the most recent stored sample is returned.

There are no retries.  A store failure is logged and treated as "nothing stored".
"""
import logging
from datetime import timedelta

from services.mileage_store import MileageStoreError

logger = logging.getLogger(__name__)

SPEND_WINDOWS = [
    (7, 'week'),
    (30, 'month'),
    (90, 'quarter'),
]


class FuelCostService:
    """Fuel spend estimates and the once-a-day price acquisition policy."""

    @staticmethod
    def miles_in_window(aggregates, days, today):
        """Odometer change across aggregates in the trailing ``days`` days"""
        cutoff = today - timedelta(days=days)
        in_window = [a for a in aggregates if a['date'] >= cutoff]
        if len(in_window) < 2:
            return 0
        return in_window[-1]['miles'] - in_window[0]['miles']

    @staticmethod
    def average_price(samples, days, now, fallback_price):
        """Mean sample price over the trailing ``days`` days"""
        cutoff = now - timedelta(days=days)
        prices = [float(s.price) for s in samples if s.recorded_at >= cutoff]
        if not prices:
            return fallback_price
        return sum(prices) / len(prices)

    @staticmethod
    def estimate(aggregates, mpg, samples, latest_price, blended_pace, now):
        """
        Spend over the trailing week/month/quarter and forecast spend for the
        next week/month/quarter.

        Args:
            aggregates:   daily aggregates sorted by date ascending.
            mpg:          vehicle miles per gallon.
            samples:      FuelPrice rows (price, recorded_at).
            latest_price: current price per gallon, or None if unknown.
            blended_pace: PaceService result dict, or None.
            now:          current datetime.

        Returns:
            dict of spent_<window> / forecast_<window> figures rounded to cents.
            All zero when there is no price, no readings or no usable mpg.
        """
        stats = {}
        for _, name in SPEND_WINDOWS:
            stats[f'spent_{name}'] = 0.0
            stats[f'forecast_{name}'] = 0.0

        mpg = float(mpg or 0)
        if latest_price is None or not aggregates or mpg <= 0:
            return stats

        today = now.date()
        pace = blended_pace['blended_pace'] if blended_pace else 0.0

        for days, name in SPEND_WINDOWS:
            miles = FuelCostService.miles_in_window(aggregates, days, today)
            price = FuelCostService.average_price(samples, days, now, latest_price)
            stats[f'spent_{name}'] = round(miles / mpg * price, 2)
            stats[f'forecast_{name}'] = round(pace * days / mpg * latest_price, 2)

        return stats

    @staticmethod
    def acquire_price(store, station_id, fetch_price, now):
        """
        Current price for a station, scraping at most once per day.

        Args:
            store:       MileageStore.
            station_id:  fuel station identifier.
            fetch_price: callable(station_id) -> float | None.
            now:         current datetime.

        Returns:
            {'price': float | None, 'source': 'stored' | 'fetched' | 'fallback' | None}
        """
        try:
            todays_sample = store.price_for_day(station_id, now.date())
        except MileageStoreError as e:
            logger.warning(f'Could not check stored price for station {station_id}: {e}')
            todays_sample = None

        if todays_sample is not None:
            return {'price': float(todays_sample.price), 'source': 'stored'}

        fetched = fetch_price(station_id)
        if fetched is not None:
            try:
                store.add_price(station_id, fetched, now)
            except MileageStoreError as e:
                logger.warning(f'Could not save fetched price for station {station_id}: {e}')
            return {'price': float(fetched), 'source': 'fetched'}

        try:
            latest = store.latest_price(station_id)
        except MileageStoreError as e:
            logger.warning(f'Could not load fallback price for station {station_id}: {e}')
            latest = None

        if latest is not None:
            logger.info(f'Using last known price for station {station_id} from {latest.recorded_at}')
            return {'price': float(latest.price), 'source': 'fallback'}

        return {'price': None, 'source': None}

    @staticmethod
    def price_trend(samples, now, days=30):
        """Mean price per calendar day over the trailing ``days`` days"""
        cutoff = now - timedelta(days=days)
        buckets = {}
        for sample in samples:
            if sample.recorded_at < cutoff:
                continue
            day = sample.recorded_at.date()
            total, count = buckets.get(day, (0.0, 0))
            buckets[day] = (total + float(sample.price), count + 1)

        return [
            {
                'date': day.isoformat(),
                'label': f"{day.strftime('%b')} {day.day}",
                'price': total / count,
            }
            for day, (total, count) in sorted(buckets.items())
        ]
