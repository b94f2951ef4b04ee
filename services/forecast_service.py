"""
Forecast Service
================
Weekly mileage trend plus two independent forecasts of future usage.

  project_weekly_regression()  : least-squares line through the most recent
                                 weeks of the weekly trend, extrapolated forward.
  project_long_horizon()       : total miles so far plus blended pace × horizon,
                                 compared with the allowance earned by then.

The two methods can disagree; the dashboard shows both side by side.

Trip impact
-----------
Planned trips that have not yet ended reduce the "projected available" figure
shown next to the plain available balance.  Stored readings and lease figures
are never touched.
"""
import math
from datetime import timedelta

from services.allowance_service import AllowanceService


LONG_HORIZONS = [
    (30, '1 month'),
    (90, '3 months'),
    (182, '6 months'),
    (365, '12 months'),
]

WEEKS_PER_PAGE = 4


def _week_start(day):
    """Most recent Sunday on or before ``day``"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _week_label(start):
    end = start + timedelta(days=6)
    return f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}"


class ForecastService:
    """Weekly trend, regression/pace projections and trip impact."""

    @staticmethod
    def weekly_trend(aggregates, annual_allowance):
        """
        Sum positive day-to-day deltas into Sunday-started weeks.

        Each delta is attributed to the week containing the later of the two
        aggregates.  Weeks with no positive delta are omitted.
        """
        if len(aggregates) < 2:
            return []

        weekly_allowance = AllowanceService.daily_allowance(annual_allowance) * 7
        weeks = {}
        for previous, current in zip(aggregates, aggregates[1:]):
            delta = current['miles'] - previous['miles']
            if delta <= 0:
                continue
            start = _week_start(current['date'])
            weeks[start] = weeks.get(start, 0) + delta

        return [
            {
                'week_start': start,
                'week_end': start + timedelta(days=6),
                'label': _week_label(start),
                'miles': miles,
                'allowance': weekly_allowance,
            }
            for start, miles in sorted(weeks.items())
        ]

    @staticmethod
    def fit_line(values):
        """
        Ordinary least squares fit of ``values`` against x = 0..n-1.

        Returns:
            (slope, intercept).  Fewer than two values, or a degenerate
            denominator, gives a flat line at the mean.
        """
        n = len(values)
        if n == 0:
            return 0.0, 0.0
        mean = sum(values) / n
        if n < 2:
            return 0.0, mean

        sum_x = sum(range(n))
        sum_y = sum(values)
        sum_xy = sum(i * y for i, y in enumerate(values))
        sum_x2 = sum(i * i for i in range(n))
        denominator = n * sum_x2 - sum_x * sum_x
        if denominator == 0:
            return 0.0, mean

        slope = (n * sum_xy - sum_x * sum_y) / denominator
        intercept = (sum_y - slope * sum_x) / n
        return slope, intercept

    @staticmethod
    def project_weekly_regression(weekly_trend, weeks_ahead=4, lookback=4):
        """
        Project the next ``weeks_ahead`` weeks from the last ``lookback`` weeks.

        Returns:
            list of {'week_start', 'week_end', 'label', 'projected'} dicts,
            projected miles clamped at >= 0.  Empty when there is no trend.
        """
        if not weekly_trend:
            return []

        recent = weekly_trend[-lookback:]
        slope, intercept = ForecastService.fit_line([week['miles'] for week in recent])
        last_start = weekly_trend[-1]['week_start']

        projection = []
        for index in range(weeks_ahead):
            x = len(recent) + index
            start = last_start + timedelta(days=7 * (index + 1))
            projection.append({
                'week_start': start,
                'week_end': start + timedelta(days=6),
                'label': _week_label(start),
                'projected': max(0.0, intercept + slope * x),
            })
        return projection

    @staticmethod
    def _projection_row(total_miles_driven, pace, lease, days_into_lease, horizon_days):
        daily_allowance = AllowanceService.daily_allowance(lease['annual_allowance'])
        projected_miles = total_miles_driven + pace * horizon_days
        projected_allowance = daily_allowance * (days_into_lease + horizon_days)
        projected_balance = projected_miles - projected_allowance
        overage_rate = lease.get('overage_rate') or 0.0
        return {
            'horizon_days': horizon_days,
            'projected_miles': projected_miles,
            'projected_allowance': projected_allowance,
            'projected_balance': projected_balance,
            'projected_overage_cost': round(max(0.0, projected_balance) * overage_rate, 2),
        }

    @staticmethod
    def project_long_horizon(total_miles_driven, blended_pace, lease, today):
        """
        Projected miles versus projected allowance 1, 3, 6 and 12 months out.

        Args:
            total_miles_driven: miles driven so far (allowance projector output).
            blended_pace:       PaceService result dict, or None (treated as 0/day).
            lease:              lease terms dict.
            today:              the current date.
        """
        pace = blended_pace['blended_pace'] if blended_pace else 0.0
        days_into_lease = AllowanceService.days_into_lease(lease, today)

        rows = []
        for horizon_days, label in LONG_HORIZONS:
            row = ForecastService._projection_row(
                total_miles_driven, pace, lease, days_into_lease, horizon_days
            )
            row['label'] = label
            rows.append(row)
        return rows

    @staticmethod
    def project_lease_end(total_miles_driven, blended_pace, lease, today):
        """Same blended-pace projection evaluated at the lease end date"""
        pace = blended_pace['blended_pace'] if blended_pace else 0.0
        days_into_lease = AllowanceService.days_into_lease(lease, today)
        remaining_days = max(0, (lease['lease_end'] - today).days)
        row = ForecastService._projection_row(
            total_miles_driven, pace, lease, days_into_lease, remaining_days
        )
        row['label'] = 'Lease end'
        return row

    @staticmethod
    def page_weeks(weekly_trend, page=0, per_page=WEEKS_PER_PAGE):
        """
        One page of the weekly trend for the chart.  Page 0 holds the most
        recent weeks; higher pages step back in time.  Out-of-range pages are
        clamped.

        Returns:
            dict with weeks (oldest first), page, total_pages, has_older and
            has_newer.
        """
        total = len(weekly_trend)
        total_pages = max(1, math.ceil(total / per_page))
        page = min(max(0, page), total_pages - 1)

        end = total - page * per_page
        start = max(0, end - per_page)
        return {
            'weeks': weekly_trend[start:end],
            'page': page,
            'total_pages': total_pages,
            'has_older': page < total_pages - 1,
            'has_newer': page > 0,
        }

    @staticmethod
    def upcoming_trips(trips, today):
        """Trips that are still in the future or under way"""
        return [trip for trip in trips if trip.end_date >= today]

    @staticmethod
    def trip_impact(trips, available_miles, today):
        """
        Effect of planned trips on the available balance.

        Returns:
            dict with planned_miles, trip_count, available_miles and
            projected_available (available minus planned miles).
        """
        upcoming = ForecastService.upcoming_trips(trips, today)
        planned_miles = sum(trip.est_miles or 0 for trip in upcoming)
        return {
            'planned_miles': planned_miles,
            'trip_count': len(upcoming),
            'available_miles': available_miles,
            'projected_available': available_miles - planned_miles,
        }
