from flask import render_template, request, redirect, url_for, flash, jsonify, current_app
from . import vehicles_bp
from .forms import ReadingForm, TripForm, StationForm, first_error
from services.gas_price_scraper import get_fetcher
from services.mileage_store import get_store, MileageStoreError
from services.reading_aggregator import ReadingAggregator
from services.forecast_service import ForecastService
from utils.session_prefs import get_vehicle_id, set_station_id
from datetime import date


# ===== ODOMETER READINGS =====

@vehicles_bp.route('/readings')
def readings():
    """Odometer history for the selected vehicle"""
    vehicle_id = get_vehicle_id()
    raw_readings = []
    try:
        raw_readings = get_store().list_readings(vehicle_id)
    except MileageStoreError as e:
        current_app.logger.error(f'Error loading readings: {e}')
        flash(f'Could not load readings: {e}', 'warning')

    aggregates = ReadingAggregator.aggregate(raw_readings)

    return render_template(
        'vehicles/readings.html',
        vehicle_id=vehicle_id,
        readings=list(reversed(raw_readings)),
        aggregates=list(reversed(aggregates)),
        form=ReadingForm()
    )


@vehicles_bp.route('/readings/add', methods=['POST'])
def add_reading():
    """Add an odometer reading"""
    form = ReadingForm()
    if not form.validate_on_submit():
        flash(first_error(form), 'danger')
        return redirect(request.referrer or url_for('vehicles.readings'))

    vehicle_id = get_vehicle_id()
    try:
        get_store().add_reading(vehicle_id, form.date.data, form.miles.data, form.note.data, form.tag.data)
        flash(f'Reading added: {form.miles.data:,} miles on {form.date.data:%b %d, %Y}', 'success')
    except MileageStoreError as e:
        current_app.logger.error(f'Error adding reading: {e}')
        flash('Error adding reading. Please try again.', 'danger')

    return redirect(request.referrer or url_for('dashboard.index'))


@vehicles_bp.route('/readings/delete/<int:reading_id>', methods=['POST'])
def delete_reading(reading_id):
    """Delete an odometer reading"""
    try:
        if get_store().delete_reading(get_vehicle_id(), reading_id):
            flash('Reading deleted successfully', 'success')
        else:
            flash('Reading not found', 'warning')
    except MileageStoreError as e:
        current_app.logger.error(f'Error deleting reading: {e}')
        flash('Error deleting reading. Please try again.', 'danger')

    return redirect(url_for('vehicles.readings'))


# ===== TRIP EVENTS =====

@vehicles_bp.route('/trips')
def trips():
    """Planned trips for the selected vehicle"""
    vehicle_id = get_vehicle_id()
    trip_events = []
    try:
        trip_events = get_store().list_trips(vehicle_id)
    except MileageStoreError as e:
        current_app.logger.error(f'Error loading trip events: {e}')
        flash(f'Could not load trips: {e}', 'warning')

    today = date.today()
    upcoming = ForecastService.upcoming_trips(trip_events, today)

    return render_template(
        'vehicles/trips.html',
        vehicle_id=vehicle_id,
        trips=trip_events,
        upcoming_ids={trip.id for trip in upcoming},
        planned_miles=sum(trip.est_miles or 0 for trip in upcoming),
        form=TripForm(),
        today=today
    )


@vehicles_bp.route('/trips/add', methods=['POST'])
def add_trip():
    """Add a planned trip"""
    form = TripForm()
    if not form.validate_on_submit():
        flash(first_error(form), 'danger')
        return redirect(url_for('vehicles.trips'))

    try:
        get_store().add_trip(
            get_vehicle_id(),
            form.name.data.strip(),
            form.start_date.data,
            form.end_date.data,
            form.estimated_miles.data
        )
        flash(f'Trip added: {form.name.data.strip()} ({form.estimated_miles.data:,} miles)', 'success')
    except MileageStoreError as e:
        current_app.logger.error(f'Error adding trip: {e}')
        flash('Error adding trip. Please try again.', 'danger')

    return redirect(url_for('vehicles.trips'))


@vehicles_bp.route('/trips/delete/<int:trip_id>', methods=['POST'])
def delete_trip(trip_id):
    """Delete a planned trip"""
    try:
        if get_store().delete_trip(get_vehicle_id(), trip_id):
            flash('Trip deleted successfully', 'success')
        else:
            flash('Trip not found', 'warning')
    except MileageStoreError as e:
        current_app.logger.error(f'Error deleting trip: {e}')
        flash('Error deleting trip. Please try again.', 'danger')

    return redirect(url_for('vehicles.trips'))


# ===== FUEL PRICES =====

@vehicles_bp.route('/station', methods=['POST'])
def select_station():
    """Choose the fuel station used for price lookups"""
    form = StationForm()
    if not form.validate_on_submit():
        flash(first_error(form), 'danger')
    else:
        station_id = set_station_id(form.station_id.data)
        flash(f'Fuel prices now tracked for station {station_id}', 'success')

    return redirect(request.referrer or url_for('dashboard.index'))


@vehicles_bp.route('/api/gas-price')
def gas_price():
    """Scrape the current price for a station: ?stationId=<id>"""
    station_id = request.args.get('stationId')
    if not station_id:
        return jsonify({'error': 'stationId query parameter is required'}), 400

    price = get_fetcher()(station_id)
    if price is None:
        return jsonify({'error': 'Failed to fetch gas price'}), 500

    return jsonify({'price': price})
