"""
Authentication Routes
Password gate login and logout
"""
from flask import render_template, redirect, url_for, flash, request, current_app
from flask_login import login_user, logout_user, current_user
from urllib.parse import urlparse
from . import auth_bp
from .forms import LoginForm
from models.users import DashboardUser
from extensions import limiter
from utils.permissions import get_client_ip


@auth_bp.route('/login', methods=['GET', 'POST'])
@limiter.limit("10 per minute")  # Rate limit password attempts
def login():
    """Dashboard password gate"""
    # Redirect if already logged in
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.index'))
    
    form = LoginForm()
    
    if form.validate_on_submit():
        if DashboardUser.check_password(form.password.data, current_app.config):
            login_user(DashboardUser(), remember=form.remember.data)
            current_app.logger.info(f'Dashboard unlocked from {get_client_ip()}')
            
            # Redirect to next page or dashboard
            next_page = request.args.get('next')
            if not next_page or urlparse(next_page).netloc != '':
                next_page = url_for('dashboard.index')
            
            return redirect(next_page)

        current_app.logger.warning(f'Failed dashboard login from {get_client_ip()}')
        flash('Incorrect password', 'danger')
    
    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout')
def logout():
    """Lock the dashboard again"""
    logout_user()
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))
