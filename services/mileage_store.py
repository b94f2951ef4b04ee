"""
Mileage Store
=============
Capability interface for everything the dashboard persists, with two
implementations chosen once at startup by ``create_store()``:

  SQLAlchemyMileageStore : backed by the Flask-SQLAlchemy models.
  UnconfiguredStore      : inert stub used when no database URI is configured;
                           every call raises StoreNotConfiguredError without
                           any I/O.

Views fetch the active store with ``get_store()`` and pass it into services,
so no call site needs to know which one it has.
"""
import logging
from datetime import datetime, time, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.fuel import FuelPrice
from models.readings import OdometerReading
from models.trip_events import TripEvent
from models.vehicles import Vehicle

logger = logging.getLogger(__name__)

VEHICLE_FIELDS = ('name', 'mpg', 'lease_start', 'lease_end', 'annual_allowance', 'overage_rate')


class MileageStoreError(Exception):
    """The backing store could not complete an operation"""


class StoreNotConfiguredError(MileageStoreError):
    """No backing store is configured for this process"""

    def __init__(self, message='Mileage store not configured'):
        super().__init__(message)


class MileageStore:
    """Interface shared by the real store and the unconfigured stub."""

    backend = 'abstract'

    def list_readings(self, vehicle_id):
        raise NotImplementedError

    def add_reading(self, vehicle_id, reading_date, reading_miles, note=None, tag=None):
        raise NotImplementedError

    def delete_reading(self, vehicle_id, reading_id):
        raise NotImplementedError

    def list_trips(self, vehicle_id):
        raise NotImplementedError

    def add_trip(self, vehicle_id, name, start_date, end_date, est_miles):
        raise NotImplementedError

    def delete_trip(self, vehicle_id, trip_id):
        raise NotImplementedError

    def get_vehicle(self, vehicle_id):
        raise NotImplementedError

    def save_vehicle(self, vehicle_id, **fields):
        raise NotImplementedError

    def price_for_day(self, station_id, day):
        raise NotImplementedError

    def latest_price(self, station_id):
        raise NotImplementedError

    def price_history(self, station_id, since):
        raise NotImplementedError

    def add_price(self, station_id, price, recorded_at):
        raise NotImplementedError


class SQLAlchemyMileageStore(MileageStore):
    """Store backed by the application database."""

    backend = 'sqlalchemy'

    def _commit(self, action):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error {action}: {e}')
            raise MileageStoreError(f'Error {action}') from e

    def _query(self, action, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Error {action}: {e}')
            raise MileageStoreError(f'Error {action}') from e

    # ===== READINGS =====

    def list_readings(self, vehicle_id):
        return self._query('loading readings', lambda: OdometerReading.query.filter_by(
            vehicle_id=vehicle_id
        ).order_by(OdometerReading.reading_date.asc(), OdometerReading.id.asc()).all())

    def add_reading(self, vehicle_id, reading_date, reading_miles, note=None, tag=None):
        reading = OdometerReading(
            vehicle_id=vehicle_id,
            reading_date=reading_date,
            reading_miles=reading_miles,
            note=note or None,
            tag=(tag or '').strip() or None
        )
        db.session.add(reading)
        self._commit('adding reading')
        return reading

    def delete_reading(self, vehicle_id, reading_id):
        reading = self._query('loading reading', lambda: OdometerReading.query.filter_by(
            id=reading_id, vehicle_id=vehicle_id
        ).first())
        if not reading:
            return False
        db.session.delete(reading)
        self._commit('deleting reading')
        return True

    # ===== TRIPS =====

    def list_trips(self, vehicle_id):
        return self._query('loading trip events', lambda: TripEvent.query.filter_by(
            vehicle_id=vehicle_id
        ).order_by(TripEvent.start_date.asc()).all())

    def add_trip(self, vehicle_id, name, start_date, end_date, est_miles):
        trip = TripEvent(
            vehicle_id=vehicle_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
            est_miles=est_miles
        )
        db.session.add(trip)
        self._commit('adding trip')
        return trip

    def delete_trip(self, vehicle_id, trip_id):
        trip = self._query('loading trip', lambda: TripEvent.query.filter_by(
            id=trip_id, vehicle_id=vehicle_id
        ).first())
        if not trip:
            return False
        db.session.delete(trip)
        self._commit('deleting trip')
        return True

    # ===== VEHICLES =====

    def get_vehicle(self, vehicle_id):
        return self._query('loading vehicle config', lambda: db.session.get(Vehicle, vehicle_id))

    def save_vehicle(self, vehicle_id, **fields):
        """Insert or update the vehicle row keyed by ``vehicle_id``"""
        vehicle = self.get_vehicle(vehicle_id)
        if vehicle is None:
            vehicle = Vehicle(id=vehicle_id)
            db.session.add(vehicle)
        for field in VEHICLE_FIELDS:
            if field in fields:
                setattr(vehicle, field, fields[field])
        self._commit('saving vehicle settings')
        return vehicle

    # ===== FUEL PRICES =====

    def price_for_day(self, station_id, day):
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        return self._query('loading today\'s fuel price', lambda: FuelPrice.query.filter(
            FuelPrice.station_id == station_id,
            FuelPrice.recorded_at >= start,
            FuelPrice.recorded_at < end
        ).order_by(FuelPrice.recorded_at.desc()).first())

    def latest_price(self, station_id):
        return self._query('loading latest fuel price', lambda: FuelPrice.query.filter_by(
            station_id=station_id
        ).order_by(FuelPrice.recorded_at.desc()).first())

    def price_history(self, station_id, since):
        return self._query('loading fuel price history', lambda: FuelPrice.query.filter(
            FuelPrice.station_id == station_id,
            FuelPrice.recorded_at >= since
        ).order_by(FuelPrice.recorded_at.asc()).all())

    def add_price(self, station_id, price, recorded_at):
        sample = FuelPrice(station_id=station_id, price=price, recorded_at=recorded_at)
        db.session.add(sample)
        self._commit('saving fuel price')
        return sample


class UnconfiguredStore(MileageStore):
    """Stub that refuses every operation without attempting any I/O."""

    backend = 'unconfigured'

    def _fail(self, *args, **kwargs):
        raise StoreNotConfiguredError()

    list_readings = _fail
    add_reading = _fail
    delete_reading = _fail
    list_trips = _fail
    add_trip = _fail
    delete_trip = _fail
    get_vehicle = _fail
    save_vehicle = _fail
    price_for_day = _fail
    latest_price = _fail
    price_history = _fail
    add_price = _fail


def store_is_configured(app):
    return bool(app.config.get('SQLALCHEMY_DATABASE_URI'))


def create_store(app):
    """Pick the store implementation for this app, once, at startup."""
    if store_is_configured(app):
        store = SQLAlchemyMileageStore()
    else:
        store = UnconfiguredStore()
    app.extensions['mileage_store'] = store
    return store


def get_store():
    """The store chosen for the current app"""
    return current_app.extensions['mileage_store']
