from flask import render_template, request, redirect, url_for, flash, current_app
from . import settings_bp
from .forms import VehicleSettingsForm
from blueprints.vehicles.forms import first_error
from services.dashboard_service import DashboardService
from services.mileage_store import get_store, MileageStoreError
from utils.session_prefs import get_vehicle_id, set_vehicle_id


@settings_bp.route('/settings')
def index():
    """Vehicle and lease settings, prefilled from the store or the defaults"""
    vehicle_id = request.args.get('vehicle_id') or get_vehicle_id()
    errors = []
    lease = DashboardService.load_lease_terms(get_store(), vehicle_id, current_app.config, errors)
    for error in errors:
        flash(error, 'warning')

    form = VehicleSettingsForm(data={
        'vehicle_id': vehicle_id,
        'name': lease['name'],
        'mpg': lease['mpg'],
        'lease_start': lease['lease_start'],
        'lease_end': lease['lease_end'],
        'annual_allowance': lease['annual_allowance'],
        'overage_rate': lease['overage_rate'],
    })

    return render_template('settings/index.html', form=form, vehicle_id=vehicle_id)


@settings_bp.route('/settings/update', methods=['POST'])
def update():
    """Save vehicle settings and switch the dashboard to that vehicle"""
    form = VehicleSettingsForm()
    if not form.validate_on_submit():
        flash(first_error(form), 'danger')
        return render_template('settings/index.html', form=form, vehicle_id=form.vehicle_id.data), 400

    vehicle_id = form.vehicle_id.data.strip()
    try:
        get_store().save_vehicle(
            vehicle_id,
            name=(form.name.data or '').strip() or None,
            mpg=form.mpg.data,
            lease_start=form.lease_start.data,
            lease_end=form.lease_end.data,
            annual_allowance=form.annual_allowance.data,
            overage_rate=form.overage_rate.data
        )
    except MileageStoreError as e:
        current_app.logger.error(f'Error saving settings for {vehicle_id}: {e}')
        flash(f'Failed to save settings: {e}', 'danger')
        return redirect(url_for('settings.index', vehicle_id=vehicle_id))

    set_vehicle_id(vehicle_id)
    flash('Settings saved.', 'success')
    return redirect(url_for('settings.index'))
