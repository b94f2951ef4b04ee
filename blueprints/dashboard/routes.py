from flask import render_template, request, redirect, url_for, flash, current_app
from . import dashboard_bp
from services.allowance_service import USAGE_RANGES
from services.dashboard_service import DashboardService
from services.gas_price_scraper import get_fetcher
from services.mileage_store import get_store
from utils.session_prefs import get_vehicle_id, get_station_id, set_vehicle_id, toggle_theme
from datetime import datetime


ALERT_STYLES = {
    'on-track': ('On Track', 'Your mileage is pacing comfortably within your allowance.'),
    'slightly-over': ('Slightly Over', 'You are a little ahead of your allowance. Keep an eye on it.'),
    'warning': ('Warning', 'Mileage is running 5-10% over allowance.'),
    'over-limit': ('Over Limit', 'Mileage is more than 10% over allowance.'),
}


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
def index():
    """Main mileage dashboard for the selected vehicle"""
    usage_range = request.args.get('range', 'month')
    if usage_range not in USAGE_RANGES:
        usage_range = 'month'
    weeks_page = request.args.get('weeks_page', 0, type=int)

    context = DashboardService.build(
        store=get_store(),
        vehicle_id=get_vehicle_id(),
        station_id=get_station_id(),
        defaults=current_app.config,
        fetch_price=get_fetcher(),
        now=datetime.now(),
        usage_range=usage_range,
        weeks_page=weeks_page
    )

    for error in context['errors']:
        flash(error, 'warning')

    alert_label, alert_description = ALERT_STYLES[context['allowance']['alert_tier']]

    return render_template(
        'dashboard/index.html',
        alert_label=alert_label,
        alert_description=alert_description,
        usage_ranges=list(USAGE_RANGES),
        **context
    )


@dashboard_bp.route('/vehicle/select', methods=['POST'])
def select_vehicle():
    """Switch the dashboard to another vehicle id"""
    try:
        vehicle_id = set_vehicle_id(request.form.get('vehicle_id'))
        flash(f'Showing vehicle {vehicle_id}', 'success')
    except ValueError as e:
        flash(str(e), 'danger')
    return redirect(url_for('dashboard.index'))


@dashboard_bp.route('/theme/toggle', methods=['POST'])
def theme_toggle():
    """Flip between light and dark theme"""
    toggle_theme()
    return redirect(request.referrer or url_for('dashboard.index'))
