from extensions import db
from datetime import datetime


class FuelPrice(db.Model):
    """A scraped per-gallon price for a fuel station"""
    __tablename__ = 'gas_prices'
    
    id = db.Column(db.Integer, primary_key=True)
    station_id = db.Column(db.String(50), nullable=False, index=True)
    price = db.Column(db.Numeric(6, 3), nullable=False)  # Currency per gallon
    recorded_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    
    def __repr__(self):
        return f'<FuelPrice {self.station_id} {self.recorded_at}: {self.price}>'
