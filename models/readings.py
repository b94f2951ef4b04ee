from extensions import db
from datetime import datetime


class OdometerReading(db.Model):
    """A single odometer observation. Several may share a date."""
    __tablename__ = 'odometer_logs'

    id = db.Column(db.Integer, primary_key=True)
    vehicle_id = db.Column(db.String(100), nullable=False)
    reading_date = db.Column(db.Date, nullable=False)
    reading_miles = db.Column(db.Integer, nullable=False)  # Cumulative odometer value
    note = db.Column(db.Text)
    tag = db.Column(db.String(50))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.Index('idx_odometer_logs_vehicle_date', 'vehicle_id', 'reading_date'),
    )

    def __repr__(self):
        return f'<OdometerReading {self.vehicle_id} {self.reading_date}: {self.reading_miles}mi>'
