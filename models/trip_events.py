from extensions import db
from datetime import datetime


class TripEvent(db.Model):
    """A planned (or past) trip whose estimated miles count against the allowance"""
    __tablename__ = 'trip_events'
    
    id = db.Column(db.Integer, primary_key=True)
    vehicle_id = db.Column(db.String(100), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    est_miles = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.Index('idx_trip_events_vehicle_dates', 'vehicle_id', 'start_date', 'end_date'),
    )
    
    def __repr__(self):
        return f'<TripEvent {self.name}: {self.start_date} - {self.end_date} ({self.est_miles}mi)>'
