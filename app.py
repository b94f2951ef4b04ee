import os
import csv
import logging
import click
from datetime import date, datetime
from logging.handlers import RotatingFileHandler
from flask import Flask
from flask_wtf.csrf import CSRFError
from config import config
from extensions import db, migrate, login_manager, csrf, limiter
from services.mileage_store import create_store, store_is_configured, MileageStoreError
from services.gas_price_scraper import configured_fetcher


def configure_logging(app):
    """Configure application logging"""
    if not app.debug and not app.testing:
        # Create logs directory if it doesn't exist
        if not os.path.exists('logs'):
            os.mkdir('logs')
        
        # File handler for errors
        file_handler = RotatingFileHandler(
            'logs/miles_ahead.log',
            maxBytes=10240000,  # 10MB
            backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s '
            '[in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        # Service modules log through their own module loggers
        logging.getLogger('services').addHandler(file_handler)
        logging.getLogger('services').setLevel(logging.INFO)
        
        app.logger.setLevel(logging.INFO)
        app.logger.info('Miles Ahead startup')
    else:
        # Development logging to console
        app.logger.setLevel(logging.DEBUG)
        app.logger.info('Miles Ahead startup (DEBUG mode)')


def create_app(config_name=None):
    """Application factory pattern"""
    
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')
    
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)
    
    # Configure logging
    configure_logging(app)
    
    # Pick the backing store once; without a database URI the inert stub is used
    store = create_store(app)
    app.logger.info(f'Mileage store backend: {store.backend}')
    app.extensions['gas_price_fetcher'] = configured_fetcher(app)
    
    # Initialize extensions
    if store_is_configured(app):
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') and \
                ':memory:' not in app.config['SQLALCHEMY_DATABASE_URI']:
            os.makedirs(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'instance'), exist_ok=True)
        db.init_app(app)
        migrate.init_app(app, db)
    else:
        app.logger.warning('DATABASE_URL not set - readings, trips and settings will not be saved')
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    
    # Add security headers
    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        headers = app.config.get('SECURITY_HEADERS', {})
        for header, value in headers.items():
            response.headers[header] = value
        return response
    
    # Configure Flask-Login
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'
    
    # User loader callback for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        from models.users import DashboardUser
        return DashboardUser.load(user_id)
    
    # Import models to ensure they're registered with SQLAlchemy
    with app.app_context():
        import models
    
    # Register blueprints
    from blueprints.auth import auth_bp
    from blueprints.dashboard import dashboard_bp
    from blueprints.vehicles import vehicles_bp
    from blueprints.settings import settings_bp
    
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(vehicles_bp)
    app.register_blueprint(settings_bp)

    # ── Optional IP allow-list ────────────────────────────────────────────
    @app.before_request
    def enforce_ip_allow_list():
        """Abort 403 for clients outside ALLOWED_IPS (when configured)."""
        from utils.permissions import check_ip_access
        check_ip_access()
    
    # Add context processors
    @app.context_processor
    def utility_processor():
        from utils.session_prefs import get_theme, get_vehicle_id, get_station_id
        return dict(
            today=lambda: date.today().strftime('%Y-%m-%d'),
            theme=get_theme(),
            selected_vehicle_id=get_vehicle_id(),
            selected_station_id=get_station_id(),
            store_backend=app.extensions['mileage_store'].backend,
        )

    if store_is_configured(app):
        # Create database tables
        with app.app_context():
            db.create_all()

        # Register Flask-Admin (must come after db.init_app and all models are loaded)
        from admin_panel import init_admin
        init_admin(app, db)
        # Flask-Admin generates its own form tokens; exempt its blueprint from
        # Flask-WTF's global CSRF so the two don't conflict.
        csrf.exempt(app.blueprints['admin'])

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_commands(app)

    return app


def register_error_handlers(app):
    """Register global error handlers"""
    
    @app.errorhandler(404)
    def not_found_error(error):
        from flask import render_template
        return render_template('errors/404.html'), 404
    
    @app.errorhandler(500)
    def internal_error(error):
        from flask import render_template
        if store_is_configured(app):
            db.session.rollback()
        app.logger.error(f'Internal Server Error: {error}')
        return render_template('errors/500.html'), 500
    
    @app.errorhandler(403)
    def forbidden_error(error):
        from flask import render_template
        return render_template('errors/403.html'), 403
    
    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        from flask import render_template, flash
        flash('CSRF token validation failed. Please try again.', 'danger')
        return render_template('errors/csrf.html', reason=error.description), 400


def register_commands(app):
    """Register Flask CLI commands."""

    @app.cli.group()
    def readings():
        """Manage odometer readings."""
        pass

    @readings.command('import')
    @click.argument('csv_path', type=click.Path(exists=True, dir_okay=False))
    @click.option('--vehicle', 'vehicle_id', default=None, help='Vehicle id (defaults to DEFAULT_VEHICLE_ID).')
    def import_readings(csv_path, vehicle_id):
        """Import readings from a CSV with date,miles[,note][,tag] columns."""
        from services.mileage_store import get_store
        store = get_store()
        vehicle_id = vehicle_id or app.config['DEFAULT_VEHICLE_ID']

        imported = 0
        skipped = 0
        with open(csv_path, newline='', encoding='utf-8') as f:
            for line_no, row in enumerate(csv.DictReader(f), start=2):
                try:
                    reading_date = datetime.strptime((row.get('date') or '').strip(), '%Y-%m-%d').date()
                    miles = int((row.get('miles') or '').replace(',', '').strip())
                    if miles < 0:
                        raise ValueError('negative miles')
                except ValueError as e:
                    click.echo(f'Line {line_no}: skipped ({e})', err=True)
                    skipped += 1
                    continue
                try:
                    store.add_reading(vehicle_id, reading_date, miles,
                                      (row.get('note') or '').strip() or None, row.get('tag'))
                except MileageStoreError as e:
                    click.echo(f'ERROR: line {line_no}: {e}', err=True)
                    click.echo(f'Stopped after importing {imported} reading(s) for "{vehicle_id}", skipped {skipped}.')
                    return
                imported += 1

        click.echo(f'SUCCESS: imported {imported} reading(s) for "{vehicle_id}", skipped {skipped}.')

    @app.cli.group('fuel-price')
    def fuel_price():
        """Manage scraped fuel prices."""
        pass

    @fuel_price.command('refresh')
    @click.option('--station', 'station_id', default=None, help='Station id (defaults to DEFAULT_STATION_ID).')
    def refresh_fuel_price(station_id):
        """Fetch today's price for a station (reuses a price already saved today)."""
        from services.fuel_cost_service import FuelCostService
        from services.mileage_store import get_store
        station_id = station_id or app.config['DEFAULT_STATION_ID']
        result = FuelCostService.acquire_price(
            get_store(), station_id, app.extensions['gas_price_fetcher'], datetime.now()
        )
        if result['price'] is None:
            click.echo(f'ERROR: no price available for station {station_id}', err=True)
            return
        click.echo(f'Station {station_id}: ${result["price"]:.3f}/gal ({result["source"]})')

    @app.cli.group()
    def lease():
        """Lease allowance reports."""
        pass

    @lease.command('summary')
    @click.option('--vehicle', 'vehicle_id', default=None, help='Vehicle id (defaults to DEFAULT_VEHICLE_ID).')
    def lease_summary(vehicle_id):
        """Print allowance balance, pace and alert tier for a vehicle."""
        from services.allowance_service import AllowanceService
        from services.dashboard_service import DashboardService
        from services.mileage_store import get_store
        from services.pace_service import PaceService
        from services.reading_aggregator import ReadingAggregator
        store = get_store()
        vehicle_id = vehicle_id or app.config['DEFAULT_VEHICLE_ID']
        today = date.today()

        lease_terms = DashboardService.load_lease_terms(store, vehicle_id, app.config)
        try:
            aggregates = ReadingAggregator.aggregate(store.list_readings(vehicle_id))
        except MileageStoreError as e:
            click.echo(f'ERROR: {e}', err=True)
            return

        summary = AllowanceService.project(aggregates, lease_terms, today)
        pace = PaceService.calculate_blended_pace(aggregates, today)

        click.echo(f'Vehicle:            {vehicle_id}')
        click.echo(f'Lease:              {lease_terms["lease_start"]} to {lease_terms["lease_end"]}')
        click.echo(f'Miles driven:       {summary["total_miles_driven"]:,}')
        click.echo(f'Allowance to date:  {summary["allowance_to_date"]:,.0f}')
        click.echo(f'Balance:            {summary["balance"]:+,.0f} ({summary["balance_percent"]:+.1%})')
        click.echo(f'Alert tier:         {summary["alert_tier"]}')
        if pace:
            click.echo(f'Blended pace:       {pace["blended_pace"]:.1f} mi/day')
        else:
            click.echo('Blended pace:       not enough readings')


if __name__ == '__main__':
    app = create_app()
    # SECURITY: Only bind to localhost in development
    # Never use 0.0.0.0 with debug mode - it exposes the debugger to the network
    app.run(host='127.0.0.1', port=5000, debug=True)
