"""
Vehicle Forms
Odometer readings, planned trips and fuel station selection
"""
from datetime import date
from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, DateField, SubmitField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional, Length, ValidationError


class ReadingForm(FlaskForm):
    """Add an odometer reading"""
    date = DateField('Date', default=date.today, validators=[
        DataRequired(message='Please enter both date and miles')
    ])
    miles = IntegerField('Odometer Reading (miles)', validators=[
        InputRequired(message='Please enter both date and miles'),
        NumberRange(min=0, message='Miles cannot be negative')
    ])
    note = StringField('Notes (optional)', validators=[
        Optional(),
        Length(max=500)
    ])
    tag = StringField('Tag (optional)', validators=[
        Optional(),
        Length(max=50, message='Tag must be 50 characters or fewer')
    ])
    submit = SubmitField('Add Reading')


class TripForm(FlaskForm):
    """Plan a trip"""
    name = StringField('Trip name', validators=[
        DataRequired(message='Please fill in all trip fields'),
        Length(max=255)
    ])
    start_date = DateField('Start date', default=date.today, validators=[
        DataRequired(message='Please fill in all trip fields')
    ])
    end_date = DateField('End date', default=date.today, validators=[
        DataRequired(message='Please fill in all trip fields')
    ])
    estimated_miles = IntegerField('Estimated miles', validators=[
        InputRequired(message='Please enter a valid number for estimated miles'),
        NumberRange(min=0, message='Please enter a valid number for estimated miles')
    ])
    submit = SubmitField('Add Trip')

    def validate_end_date(self, field):
        if self.start_date.data and field.data and field.data < self.start_date.data:
            raise ValidationError('End date must be on or after the start date')


class StationForm(FlaskForm):
    """Choose the fuel station used for prices"""
    station_id = StringField('Station ID', validators=[
        DataRequired(message='Station ID is required'),
        Length(max=50)
    ])
    submit = SubmitField('Use Station')


def first_error(form):
    """
    First validation message on a form, for flashing.

    A blank input reports its required-field message, not the parse error
    WTForms records before the validators run.
    """
    for field in form:
        if not field.errors:
            continue
        if field.process_errors and not (field.raw_data and field.raw_data[0]):
            return field.errors[-1]
        return field.errors[0]
    return 'Invalid input'
