"""
Flask-Admin panel for Miles Ahead
Accessible at /admin - raw table access for correcting readings, trips and prices
"""
from flask import redirect, url_for, flash, request
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.theme import Bootstrap4Theme
from flask_login import current_user


# ---------------------------------------------------------------------------
# Base secure views
# ---------------------------------------------------------------------------

class SecureAdminIndexView(AdminIndexView):
    """Admin home page - requires the dashboard login."""

    @expose('/')
    def index(self):
        if not current_user.is_authenticated:
            flash('Please log in to access this page.', 'info')
            return redirect(url_for('auth.login', next=request.url))
        return super().index()

    def is_accessible(self):
        return current_user.is_authenticated

    def inaccessible_callback(self, name, **kwargs):
        return redirect(url_for('auth.login', next=request.url))


class SecureModelView(ModelView):
    """Full CRUD model view - login required."""

    can_export = True
    page_size = 50
    column_display_pk = True

    def __init__(self, model, session, **kwargs):
        # Prefix endpoints with 'admin_' so they never clash with blueprint names
        if 'endpoint' not in kwargs:
            kwargs['endpoint'] = f'admin_{model.__name__.lower()}'
        super().__init__(model, session, **kwargs)

    def is_accessible(self):
        return current_user.is_authenticated

    def inaccessible_callback(self, name, **kwargs):
        return redirect(url_for('auth.login', next=request.url))


class ReadOnlyModelView(SecureModelView):
    """Read-only model view for scraped data."""

    can_create = False
    can_edit = False


# ---------------------------------------------------------------------------
# Customised model views
# ---------------------------------------------------------------------------

class ReadingAdminView(SecureModelView):
    column_searchable_list = ['vehicle_id', 'note']
    column_filters = ['vehicle_id', 'reading_date']
    column_default_sort = ('reading_date', True)


class TripEventAdminView(SecureModelView):
    column_searchable_list = ['vehicle_id', 'name']
    column_filters = ['vehicle_id', 'start_date', 'end_date']
    column_default_sort = ('start_date', True)


class VehicleAdminView(SecureModelView):
    column_searchable_list = ['id', 'name']
    form_columns = ['id', 'name', 'mpg', 'lease_start', 'lease_end', 'annual_allowance', 'overage_rate']


class FuelPriceAdminView(ReadOnlyModelView):
    column_filters = ['station_id', 'recorded_at']
    column_default_sort = ('recorded_at', True)


# ---------------------------------------------------------------------------
# Admin factory
# ---------------------------------------------------------------------------

def init_admin(app, db):
    """Create the Flask-Admin instance and register all model views."""

    admin = Admin(
        app,
        name='Miles Ahead Admin',
        theme=Bootstrap4Theme(),
        index_view=SecureAdminIndexView(),
        url='/admin',
    )

    from models.readings import OdometerReading
    from models.trip_events import TripEvent
    from models.vehicles import Vehicle
    from models.fuel import FuelPrice

    admin.add_view(ReadingAdminView(OdometerReading, db.session, name='Odometer Readings', category='Mileage'))
    admin.add_view(TripEventAdminView(TripEvent, db.session, name='Trips', category='Mileage'))
    admin.add_view(VehicleAdminView(Vehicle, db.session, name='Vehicles', category='Settings'))
    admin.add_view(FuelPriceAdminView(FuelPrice, db.session, name='Fuel Prices', category='Fuel'))

    return admin
