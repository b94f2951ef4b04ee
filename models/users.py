"""
User Model for Authentication
Single shared dashboard login, no user table
"""
import hmac
from flask_login import UserMixin
from werkzeug.security import check_password_hash


class DashboardUser(UserMixin):
    """The one user of the dashboard. Flask-Login only needs a stable id."""

    ID = 'owner'

    def __init__(self):
        self.id = self.ID
        self.name = 'Driver'

    @classmethod
    def load(cls, user_id):
        """User loader for Flask-Login"""
        if user_id == cls.ID:
            return cls()
        return None

    @staticmethod
    def check_password(password, config):
        """
        Check the shared dashboard password.

        Prefers DASHBOARD_PASSWORD_HASH (werkzeug hash); falls back to the
        plain DASHBOARD_PASSWORD.  No configured password rejects everything.
        """
        if not password:
            return False
        password_hash = config.get('DASHBOARD_PASSWORD_HASH')
        if password_hash:
            return check_password_hash(password_hash, password)
        expected = config.get('DASHBOARD_PASSWORD')
        if not expected:
            return False
        return hmac.compare_digest(expected.encode('utf-8'), password.encode('utf-8'))
