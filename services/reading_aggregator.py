"""
Reading Aggregator
==================
Collapses raw odometer readings into one end-of-day value per calendar date.

Several readings can be logged on the same day (manual re-entries, a reading at
each fill-up).  The end-of-day value is the *maximum* reading for the date, so a
mistyped lower entry never masks a later correct one.  ``daily_miles`` is the
difference from the previous date's end-of-day value, clamped at zero so that an
out-of-order or decreasing entry never produces negative mileage.

Aggregates are plain dicts::

    {'date': date, 'miles': int, 'daily_miles': int}

They are recomputed from the raw readings on every load and never persisted.
"""


class ReadingAggregator:
    """Build the daily odometer series every other calculator consumes."""

    @staticmethod
    def aggregate(readings):
        """
        Group raw readings by date and derive daily deltas.

        Args:
            readings: iterable of objects exposing ``reading_date`` and
                      ``reading_miles`` (OdometerReading rows).

        Returns:
            list of aggregate dicts sorted by date ascending.  Empty input
            gives an empty list.
        """
        per_day = {}
        for reading in readings:
            day = reading.reading_date
            miles = int(reading.reading_miles)
            if day not in per_day or miles > per_day[day]:
                per_day[day] = miles

        aggregates = []
        previous_miles = None
        for day in sorted(per_day):
            miles = per_day[day]
            daily_miles = max(0, miles - previous_miles) if previous_miles is not None else 0
            aggregates.append({
                'date': day,
                'miles': miles,
                'daily_miles': daily_miles,
            })
            previous_miles = miles

        return aggregates

    @staticmethod
    def todays_miles(aggregates, today):
        """Miles driven on ``today`` (0 when there is no reading for today)"""
        for aggregate in aggregates:
            if aggregate['date'] == today:
                return aggregate['daily_miles']
        return 0
