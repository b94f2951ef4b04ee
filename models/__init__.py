# Models package - Import all models for Flask-SQLAlchemy

from models.fuel import FuelPrice
from models.readings import OdometerReading
from models.trip_events import TripEvent
from models.vehicles import Vehicle

__all__ = [
    'FuelPrice',
    'OdometerReading',
    'TripEvent',
    'Vehicle',
]
