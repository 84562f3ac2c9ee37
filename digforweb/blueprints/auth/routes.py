"""
Authentication routes.
"""
import logging
from flask import render_template, redirect, url_for, flash, request, session
from flask_login import login_user, logout_user, current_user, login_required
from digforweb.blueprints.auth import auth_bp
from digforweb.blueprints.auth.forms import LoginForm, RegistrationForm
from digforweb.exceptions import AuthError, ValidationError
from digforweb.extensions import limiter
from digforweb.services.auth_service import authenticate, register_user

logger = logging.getLogger(__name__)


@auth_bp.route('/login', methods=['GET', 'POST'])
@limiter.limit("5 per minute")
def login():
    """User login."""
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.index'))

    form = LoginForm()

    if form.validate_on_submit():
        try:
            user = authenticate(form.email.data, form.password.data)
        except AuthError as e:
            # Shown inline on the form rather than through the app-wide handler
            form.password.errors.append(e.message)
            return render_template('auth/login.html', form=form), 401

        login_user(user, remember=form.remember_me.data)
        user.update_last_login()
        logger.info(f'User {user.email} logged in')

        flash(f'Welcome back, {user.name}.', 'success')

        # Redirect to next page or dashboard
        next_page = request.args.get('next')
        if next_page and next_page.startswith('/'):
            return redirect(next_page)
        return redirect(url_for('dashboard.index'))

    return render_template('auth/login.html', form=form)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """Register a new officer or viewer account."""
    if current_user.is_authenticated:
        return redirect(url_for('dashboard.index'))

    form = RegistrationForm()

    if form.validate_on_submit():
        try:
            register_user(
                form.name.data,
                form.email.data,
                form.password.data,
                form.role.data,
                contact=form.contact.data
            )
        except ValidationError as e:
            for field, messages in e.errors.items():
                target = getattr(form, field, None)
                if target is not None:
                    target.errors.extend(messages)
                else:
                    for message in messages:
                        flash(message, 'danger')
            return render_template('auth/register.html', form=form), 400

        flash('Registration successful. You can now log in.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html', form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    """User logout."""
    logger.info(f'User {current_user.email} logged out')
    logout_user()
    session.clear()
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))
