"""
Tests for the flask CLI commands registered by the app factory.
"""
from datetime import date, timedelta

from services.mileage_store import MileageStoreError, SQLAlchemyMileageStore


class TestImportReadings:
    def test_imports_valid_rows_and_skips_bad_ones(self, app, store, tmp_path):
        csv_file = tmp_path / 'readings.csv'
        csv_file.write_text(
            'date,miles,note\n'
            '2025-06-01,"1,000",bought\n'
            '2025-06-02,1040,\n'
            'yesterday,1100,\n'
            '2025-06-04,-3,\n'
        )
        result = app.test_cli_runner().invoke(args=['readings', 'import', str(csv_file), '--vehicle', 'civic'])

        assert 'imported 2 reading(s) for "civic", skipped 2' in result.output
        readings = store.list_readings('civic')
        assert [(r.reading_date, r.reading_miles, r.note) for r in readings] == [
            (date(2025, 6, 1), 1000, 'bought'),
            (date(2025, 6, 2), 1040, None),
        ]

    def test_store_failure_reports_rows_already_imported(self, app, store, tmp_path, monkeypatch):
        class FailsOnSecondReading(SQLAlchemyMileageStore):
            def add_reading(self, *args, **kwargs):
                if self.list_readings('civic'):
                    raise MileageStoreError('Error adding reading')
                return super().add_reading(*args, **kwargs)

        monkeypatch.setitem(app.extensions, 'mileage_store', FailsOnSecondReading())
        csv_file = tmp_path / 'readings.csv'
        csv_file.write_text(
            'date,miles,tag\n'
            'soon,900,\n'
            '2025-06-01,1000,commute\n'
            '2025-06-02,1040,\n'
        )
        result = app.test_cli_runner().invoke(args=['readings', 'import', str(csv_file), '--vehicle', 'civic'])

        assert 'ERROR: line 4: Error adding reading' in result.output
        assert 'Stopped after importing 1 reading(s) for "civic", skipped 1.' in result.output
        assert 'SUCCESS' not in result.output
        assert [(r.reading_miles, r.tag) for r in store.list_readings('civic')] == [(1000, 'commute')]


class TestFuelPriceRefresh:
    def test_prints_fetched_price(self, app, fetcher):
        fetcher.price = 3.289
        result = app.test_cli_runner().invoke(args=['fuel-price', 'refresh', '--station', '777'])
        assert 'Station 777: $3.289/gal (fetched)' in result.output
        assert fetcher.calls == ['777']

    def test_reports_missing_price(self, app):
        result = app.test_cli_runner().invoke(args=['fuel-price', 'refresh'])
        assert 'no price available for station 26449' in result.output


class TestLeaseSummary:
    def test_summary_for_stored_vehicle(self, app, store):
        today = date.today()
        store.save_vehicle('truck', lease_start=today - timedelta(days=100),
                           lease_end=today + timedelta(days=900), annual_allowance=12000)
        store.add_reading('truck', today - timedelta(days=100), 10000)
        store.add_reading('truck', today, 14000)

        result = app.test_cli_runner().invoke(args=['lease', 'summary'])

        assert 'Miles driven:       4,000' in result.output
        assert 'Alert tier:         over-limit' in result.output
        assert 'Blended pace:       40.0 mi/day' in result.output

    def test_summary_without_readings(self, app):
        result = app.test_cli_runner().invoke(args=['lease', 'summary'])
        assert 'Blended pace:       not enough readings' in result.output
        assert 'Alert tier:         on-track' in result.output
