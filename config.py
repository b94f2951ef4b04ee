import os
from datetime import timedelta


basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    """Base configuration"""
    
    # Secret key for session management
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    
    # Backing store. An empty URI leaves the app running against the inert store stub.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'miles_ahead.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False  # Set to True for SQL query logging during development
    
    # Session configuration
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    
    # CSRF Protection
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None  # No time limit for a single-user dashboard
    
    # Rate Limiting
    RATELIMIT_STORAGE_URI = 'memory://'
    RATELIMIT_STRATEGY = 'fixed-window'
    RATELIMIT_HEADERS_ENABLED = True
    
    # Security Headers
    SECURITY_HEADERS = {
        'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'SAMEORIGIN',
        'X-XSS-Protection': '1; mode=block',
        'Referrer-Policy': 'strict-origin-when-cross-origin'
    }
    
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }
    
    # Dashboard password gate (single shared password)
    DASHBOARD_PASSWORD_HASH = os.environ.get('DASHBOARD_PASSWORD_HASH')
    DASHBOARD_PASSWORD = os.environ.get('DASHBOARD_PASSWORD') or 'milesahead25'
    
    # Optional IP allow-list, comma separated. Empty allows everyone.
    ALLOWED_IPS = [ip.strip() for ip in os.environ.get('ALLOWED_IPS', '').split(',') if ip.strip()]
    
    # Vehicle / lease defaults used when no vehicle record is stored
    DEFAULT_VEHICLE_ID = os.environ.get('DEFAULT_VEHICLE_ID') or 'truck'
    DEFAULT_LEASE_START = os.environ.get('DEFAULT_LEASE_START') or '2024-05-12'
    DEFAULT_LEASE_END = os.environ.get('DEFAULT_LEASE_END') or '2027-11-12'
    DEFAULT_ANNUAL_ALLOWANCE = float(os.environ.get('DEFAULT_ANNUAL_ALLOWANCE') or 12000)
    DEFAULT_OVERAGE_RATE = float(os.environ.get('DEFAULT_OVERAGE_RATE') or 0.11)
    DEFAULT_MPG = float(os.environ.get('DEFAULT_MPG') or 30)
    
    # Fuel price scraping
    DEFAULT_STATION_ID = os.environ.get('DEFAULT_STATION_ID') or '26449'
    GAS_PRICE_URL_TEMPLATE = os.environ.get('GAS_PRICE_URL_TEMPLATE') or \
        'https://www.gasbuddy.com/station/{station_id}'
    GAS_PRICE_TIMEOUT = 10


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False  # Set to True only when debugging SQL queries
    
    # SECURITY: Only safe because Flask binds to 127.0.0.1 by default
    # Never use --host=0.0.0.0 with debug mode enabled


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    
    # MUST set these environment variables in production
    SECRET_KEY = os.environ.get('SECRET_KEY')  # Generate with: python -c 'import secrets; print(secrets.token_hex(32))'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or os.environ.get('SQLALCHEMY_DATABASE_URI')
    DASHBOARD_PASSWORD = os.environ.get('DASHBOARD_PASSWORD')
    
    # Security settings for production
    SESSION_COOKIE_SECURE = True  # Requires HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    
    PREFERRED_URL_SCHEME = 'https'
    
    # Validate required settings
    @classmethod
    def init_app(cls, app):
        Config.init_app(app)
        
        # Ensure SECRET_KEY is set in production
        if not app.config.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production!")
        
        if not app.config.get('DASHBOARD_PASSWORD_HASH') and not app.config.get('DASHBOARD_PASSWORD'):
            import warnings
            warnings.warn("No dashboard password configured; nobody will be able to log in.")
        
        # Warn if using SQLite in production
        if 'sqlite' in (app.config.get('SQLALCHEMY_DATABASE_URI') or ''):
            import warnings
            warnings.warn("Using SQLite in production is not recommended. Use PostgreSQL or MySQL.")


# Add init_app to base config
Config.init_app = classmethod(lambda cls, app: None)


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    DASHBOARD_PASSWORD_HASH = None
    DASHBOARD_PASSWORD = 'test-password'
    ALLOWED_IPS = []
    DEFAULT_VEHICLE_ID = 'truck'
    DEFAULT_LEASE_START = '2024-05-12'
    DEFAULT_LEASE_END = '2027-11-12'
    DEFAULT_ANNUAL_ALLOWANCE = 12000.0
    DEFAULT_OVERAGE_RATE = 0.11
    DEFAULT_MPG = 30.0
    DEFAULT_STATION_ID = '26449'


class UnconfiguredStoreConfig(TestingConfig):
    """Testing configuration with no backing store"""
    SQLALCHEMY_DATABASE_URI = None


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'testing_unconfigured': UnconfiguredStoreConfig,
    'default': DevelopmentConfig
}
