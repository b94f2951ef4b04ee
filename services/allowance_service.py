"""
Allowance Service
=================
Converts a lease's annual mileage allowance into an allowance-to-date figure and
compares it with the miles actually driven.

Lease terms
-----------
Lease terms are a plain dict built by ``lease_terms()`` from a stored Vehicle
row, falling back to the configured defaults field by field::

    {'vehicle_id', 'name', 'mpg', 'lease_start', 'lease_end',
     'annual_allowance', 'overage_rate'}

Balance sign
------------
``balance`` is positive when the driver is *over* allowance.  The dashboard also
shows the inverse ``available_miles`` (positive = credit remaining).

Alert tiers (on balance_percent, upper edges inclusive)
-------------------------------------------------------
  <= 0            on-track
  (0, 0.05]       slightly-over
  (0.05, 0.10]    warning
  > 0.10          over-limit
"""
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta


DAYS_PER_YEAR = 365.25
PROGRESS_SCALE_MILES = 660

USAGE_RANGES = {
    'week': 7,
    'month': 30,
    'year': 365,
    'lease': None,
}


def _parse_date(value):
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class AllowanceService:
    """Allowance-to-date, balance and alert tier calculations."""

    @staticmethod
    def lease_terms(vehicle, defaults):
        """
        Build lease terms for a vehicle.

        Args:
            vehicle:  Vehicle row, or None when nothing is stored for the id.
            defaults: mapping holding the DEFAULT_* configuration keys
                      (normally ``current_app.config``).
        """
        def pick(attr, default_key, cast):
            value = getattr(vehicle, attr, None) if vehicle is not None else None
            if value is None:
                value = defaults.get(default_key)
            return cast(value) if value is not None else None

        return {
            'vehicle_id': vehicle.id if vehicle is not None else defaults.get('DEFAULT_VEHICLE_ID'),
            'name': (vehicle.name if vehicle is not None else None) or '',
            'mpg': pick('mpg', 'DEFAULT_MPG', float),
            'lease_start': pick('lease_start', 'DEFAULT_LEASE_START', _parse_date),
            'lease_end': pick('lease_end', 'DEFAULT_LEASE_END', _parse_date),
            'annual_allowance': pick('annual_allowance', 'DEFAULT_ANNUAL_ALLOWANCE', float),
            'overage_rate': pick('overage_rate', 'DEFAULT_OVERAGE_RATE', float),
        }

    @staticmethod
    def daily_allowance(annual_allowance):
        return annual_allowance / DAYS_PER_YEAR

    @staticmethod
    def days_into_lease(lease, today):
        return max(0, (today - lease['lease_start']).days)

    @staticmethod
    def alert_tier(balance_percent):
        """Classify how far mileage has drifted past allowance-to-date"""
        if balance_percent <= 0:
            return 'on-track'
        if balance_percent <= 0.05:
            return 'slightly-over'
        if balance_percent <= 0.10:
            return 'warning'
        return 'over-limit'

    @staticmethod
    def project(aggregates, lease, today):
        """
        Compare miles driven with the allowance earned so far.

        Args:
            aggregates: daily aggregates sorted by date ascending.
            lease:      lease terms dict.
            today:      the current date.

        Returns:
            dict with total_miles_driven, current_miles, daily_allowance,
            days_into_lease, allowance_to_date, balance, balance_percent,
            available_miles and alert_tier.  No readings gives all zeros and
            'on-track'.
        """
        if not aggregates:
            return {
                'total_miles_driven': 0,
                'current_miles': 0,
                'daily_allowance': 0.0,
                'days_into_lease': 0,
                'allowance_to_date': 0.0,
                'balance': 0.0,
                'balance_percent': 0.0,
                'available_miles': 0.0,
                'alert_tier': 'on-track',
            }

        daily_allowance = AllowanceService.daily_allowance(lease['annual_allowance'])
        days_into_lease = AllowanceService.days_into_lease(lease, today)
        allowance_to_date = daily_allowance * days_into_lease

        total_miles_driven = aggregates[-1]['miles'] - aggregates[0]['miles']
        balance = total_miles_driven - allowance_to_date
        balance_percent = balance / allowance_to_date if allowance_to_date > 0 else 0.0

        return {
            'total_miles_driven': total_miles_driven,
            'current_miles': aggregates[-1]['miles'],
            'daily_allowance': daily_allowance,
            'days_into_lease': days_into_lease,
            'allowance_to_date': allowance_to_date,
            'balance': balance,
            'balance_percent': balance_percent,
            'available_miles': allowance_to_date - total_miles_driven,
            'alert_tier': AllowanceService.alert_tier(balance_percent),
        }

    @staticmethod
    def lease_progress(lease, today):
        """
        Elapsed lease days and percent complete (clamped to 0-100), plus the
        term and remaining whole months for display.
        """
        total_days = (lease['lease_end'] - lease['lease_start']).days
        elapsed_days = AllowanceService.days_into_lease(lease, today)
        if total_days <= 0:
            percent = 100.0
        else:
            percent = min(100.0, max(0.0, elapsed_days / total_days * 100))

        term = relativedelta(lease['lease_end'], lease['lease_start'])
        remaining = relativedelta(lease['lease_end'], max(today, lease['lease_start']))
        return {
            'total_days': total_days,
            'elapsed_days': min(elapsed_days, max(total_days, 0)),
            'percent': percent,
            'term_months': max(0, term.years * 12 + term.months),
            'months_remaining': max(0, remaining.years * 12 + remaining.months),
        }

    @staticmethod
    def centered_progress(value, scale=PROGRESS_SCALE_MILES):
        """
        Split an available-miles figure into the credit/debt halves of a
        bar centred on zero.  Each half is capped at 50% of the bar width.
        """
        credit = value if value > 0 else 0
        debt = abs(value) if value < 0 else 0
        return {
            'delta': value,
            'range': scale,
            'credit': credit,
            'debt': debt,
            'credit_width': min(50.0, credit / scale * 50) if scale else 0.0,
            'debt_width': min(50.0, debt / scale * 50) if scale else 0.0,
        }

    @staticmethod
    def usage_series(aggregates, lease, today, range_key='month'):
        """
        Actual miles versus allowance for the usage chart.

        ``miles`` is measured from the first aggregate ever recorded, so the
        line keeps its lease-long meaning when the range is narrowed.
        """
        if not aggregates:
            return []

        days = USAGE_RANGES.get(range_key, USAGE_RANGES['month'])
        start = lease['lease_start'] if days is None else today - timedelta(days=days)
        daily_allowance = AllowanceService.daily_allowance(lease['annual_allowance'])
        start_miles = aggregates[0]['miles']
        label_format = '%b %d, %Y' if range_key in ('year', 'lease') else '%b %d'

        series = []
        for aggregate in aggregates:
            if aggregate['date'] < start:
                continue
            days_from_start = (aggregate['date'] - lease['lease_start']).days
            series.append({
                'date': aggregate['date'].isoformat(),
                'label': aggregate['date'].strftime(label_format),
                'miles': aggregate['miles'] - start_miles,
                'allowance': daily_allowance * max(0, days_from_start),
            })
        return series
