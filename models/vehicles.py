from extensions import db
from datetime import datetime, timezone


class Vehicle(db.Model):
    """Per-vehicle lease settings, keyed by a free-text vehicle identifier"""
    __tablename__ = 'vehicles'

    id = db.Column(db.String(100), primary_key=True)  # e.g. 'truck'
    name = db.Column(db.String(100))
    mpg = db.Column(db.Numeric(6, 2))
    lease_start = db.Column(db.Date)
    lease_end = db.Column(db.Date)
    annual_allowance = db.Column(db.Numeric(10, 2))
    overage_rate = db.Column(db.Numeric(6, 3))  # Currency per mile over allowance
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), onupdate=lambda: datetime.now(timezone.utc).replace(tzinfo=None))
    
    def __repr__(self):
        return f'<Vehicle {self.id}: {self.name}>'
