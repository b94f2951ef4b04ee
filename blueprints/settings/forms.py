"""
Settings Forms
Vehicle and lease preferences
"""
from flask_wtf import FlaskForm
from wtforms import StringField, DecimalField, DateField, SubmitField
from wtforms.validators import DataRequired, NumberRange, Optional, Length, ValidationError


class VehicleSettingsForm(FlaskForm):
    """Vehicle and lease configuration, saved per vehicle id"""
    vehicle_id = StringField('Vehicle ID', validators=[
        DataRequired(message='Vehicle ID is required'),
        Length(max=100)
    ])
    name = StringField('Vehicle name', validators=[Optional(), Length(max=100)])
    mpg = DecimalField('MPG', places=2, validators=[
        Optional(),
        NumberRange(min=0.1, message='MPG must be greater than zero')
    ])
    lease_start = DateField('Lease start', validators=[
        DataRequired(message='Lease start date is required')
    ])
    lease_end = DateField('Lease end', validators=[
        DataRequired(message='Lease end date is required')
    ])
    annual_allowance = DecimalField('Annual allowance (miles)', places=0, validators=[
        DataRequired(message='Annual allowance is required'),
        NumberRange(min=1, message='Annual allowance must be a positive number')
    ])
    overage_rate = DecimalField('Overage rate (per mile)', places=3, validators=[
        Optional(),
        NumberRange(min=0, message='Overage rate cannot be negative')
    ])
    submit = SubmitField('Save Settings')

    def validate_lease_end(self, field):
        if self.lease_start.data and field.data and field.data <= self.lease_start.data:
            raise ValidationError('Lease end must be after lease start')
