"""
Session-scoped dashboard preferences.

The selected vehicle, fuel station and theme are remembered per browser session
(the dashboard has a single shared login).  Views read them here and pass the
values into services explicitly; calculators never look at the session.

Usage
-----
In any blueprint route::

    from utils.session_prefs import get_vehicle_id, get_station_id

    context = DashboardService.build(get_store(), get_vehicle_id(), get_station_id(), ...)
"""

from flask import current_app, session


VEHICLE_KEY = 'selected_vehicle_id'
STATION_KEY = 'selected_station_id'
THEME_KEY = 'theme'
THEMES = ('light', 'dark')


# ---------------------------------------------------------------------------
# Vehicle
# ---------------------------------------------------------------------------

def get_vehicle_id():
    """Return the session's vehicle id, or the configured default."""
    return session.get(VEHICLE_KEY) or current_app.config['DEFAULT_VEHICLE_ID']


def set_vehicle_id(vehicle_id):
    vehicle_id = (vehicle_id or '').strip()
    if not vehicle_id:
        raise ValueError('Vehicle id cannot be empty')
    session[VEHICLE_KEY] = vehicle_id
    return vehicle_id


# ---------------------------------------------------------------------------
# Fuel station
# ---------------------------------------------------------------------------

def get_station_id():
    """Return the session's fuel station id, or the configured default."""
    return session.get(STATION_KEY) or current_app.config['DEFAULT_STATION_ID']


def set_station_id(station_id):
    station_id = (station_id or '').strip()
    if not station_id:
        raise ValueError('Station id cannot be empty')
    session[STATION_KEY] = station_id
    return station_id


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------

def get_theme():
    theme = session.get(THEME_KEY)
    return theme if theme in THEMES else 'light'


def toggle_theme():
    session[THEME_KEY] = 'dark' if get_theme() == 'light' else 'light'
    return session[THEME_KEY]
