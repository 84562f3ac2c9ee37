"""
Application factory for DigForWeb.

This module creates and configures the Flask application instance.
"""
import os
import logging
from logging.handlers import RotatingFileHandler
from flask import Flask, flash, jsonify, redirect, render_template, request, url_for
from werkzeug.middleware.proxy_fix import ProxyFix
from digforweb.config import config
from digforweb.exceptions import (
    AuthError, DigForWebError, NotFoundError, PermissionDeniedError, TransportError,
    ValidationError
)
from digforweb.extensions import (
    db, login_manager, bcrypt, csrf, limiter, cache, talisman
)


def create_app(config_name=None):
    """
    Application factory pattern.

    Args:
        config_name: Configuration name ('development', 'production', 'testing')

    Returns:
        Configured Flask application instance
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'production')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Trust one proxy for client IP / scheme (rate limiting keys on the IP)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    ensure_sqlite_directory(app)

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register template helpers
    register_template_context(app)

    # Register CLI commands
    register_cli_commands(app)

    # Configure logging
    configure_logging(app)

    return app


def ensure_sqlite_directory(app):
    """Create the directory of a file-based SQLite database."""
    uri = app.config['SQLALCHEMY_DATABASE_URI']
    if uri.startswith('sqlite:///') and ':memory:' not in uri:
        directory = os.path.dirname(uri[len('sqlite:///'):])
        if directory:
            os.makedirs(directory, exist_ok=True)


def initialize_extensions(app):
    """Initialize Flask extensions."""
    db.init_app(app)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    cache.init_app(app)

    # Configure Talisman (security headers)
    if not app.config['DEBUG'] and not app.config['TESTING']:
        talisman.init_app(
            app,
            force_https=False,  # Set to True in production with HTTPS
            content_security_policy={
                'default-src': "'self'",
                'style-src': ["'self'", "'unsafe-inline'"],
                'img-src': ["'self'", "data:"],
            }
        )

    # Import models so db.create_all() sees every table
    from digforweb import models  # noqa: F401


def register_blueprints(app):
    """Register application blueprints."""
    from digforweb.blueprints.auth import auth_bp
    from digforweb.blueprints.dashboard import dashboard_bp
    from digforweb.blueprints.victims import victims_bp
    from digforweb.blueprints.cases import cases_bp
    from digforweb.blueprints.evidence import evidence_bp
    from digforweb.blueprints.actions import actions_bp
    from digforweb.blueprints.api import api_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(victims_bp, url_prefix='/victims')
    app.register_blueprint(cases_bp, url_prefix='/cases')
    app.register_blueprint(evidence_bp, url_prefix='/evidence')
    app.register_blueprint(actions_bp, url_prefix='/actions')
    app.register_blueprint(api_bp, url_prefix='/api')

    # The REST API authenticates with bearer tokens, not session cookies
    csrf.exempt(api_bp)

    # Root route
    @app.route('/')
    def index():
        """Redirect to dashboard."""
        from flask_login import current_user
        if current_user.is_authenticated:
            return redirect(url_for('dashboard.index'))
        return redirect(url_for('auth.login'))


def _wants_json():
    return request.path.startswith('/api/') or request.path == '/api'


def register_error_handlers(app):
    """Register error handlers."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        if _wants_json():
            return jsonify(error.to_dict()), 400
        for field, messages in error.errors.items():
            for message in messages:
                flash(f'{field}: {message}', 'danger')
        return render_template('errors/400.html', error=error), 400

    @app.errorhandler(NotFoundError)
    def record_not_found(error):
        if _wants_json():
            return jsonify(error.to_dict()), 404
        return render_template('errors/not_found.html', error=error), 404

    @app.errorhandler(PermissionDeniedError)
    def permission_denied(error):
        if _wants_json():
            return jsonify(error.to_dict()), 403
        return render_template('errors/403.html', error=error), 403

    @app.errorhandler(AuthError)
    def auth_error(error):
        if _wants_json():
            return jsonify(error.to_dict()), 401
        flash(error.message, 'danger')
        return redirect(url_for('auth.login'))

    @app.errorhandler(TransportError)
    def transport_error(error):
        app.logger.error(f'Storage failure on {request.method} {request.path}: {error.message}')
        if _wants_json():
            return jsonify(error.to_dict()), 503
        return render_template('errors/transport.html', error=error, retry_url=request.url), 503

    @app.errorhandler(DigForWebError)
    def domain_error(error):
        if _wants_json():
            return jsonify(error.to_dict()), error.status_code
        return render_template('errors/500.html', error=error), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        if _wants_json():
            return jsonify({'message': 'Resource not found.'}), 404
        return render_template('errors/404.html'), 404

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 errors."""
        if _wants_json():
            return jsonify({'message': 'Forbidden.'}), 403
        return render_template('errors/403.html'), 403

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        db.session.rollback()
        if _wants_json():
            return jsonify({'message': 'Internal server error.'}), 500
        return render_template('errors/500.html'), 500


def register_template_context(app):
    """Expose permissions and navigation state to templates."""
    from flask_login import current_user
    from digforweb.services.navigation import load_navigation
    from digforweb.services.permissions import NO_PERMISSIONS

    @app.context_processor
    def inject_globals():
        if current_user.is_authenticated:
            user_permissions = current_user.permissions
        else:
            user_permissions = NO_PERMISSIONS
        return {
            'permissions': user_permissions,
            'navigation': load_navigation(),
        }


def register_cli_commands(app):
    """Register custom CLI commands."""
    import click

    def seed_if_empty():
        from digforweb.services.backends import BlobBackend
        from digforweb.services.demo_data import seed_demo_data
        from digforweb.services.entity_store import EntityStore
        from digforweb.services.permissions import ROLE_OFFICER

        store = EntityStore(BlobBackend(app.config['STORAGE_KEY_PREFIX']), role=ROLE_OFFICER)
        if len(store.snapshot):
            click.echo('Store is not empty; demo data not loaded.')
            return
        counts = seed_demo_data(store)
        click.echo(f'Demo data loaded: {counts}')

    @app.cli.command()
    def init_db():
        """Initialize the database."""
        db.create_all()
        click.echo('Initialized the database.')
        if app.config['SEED_DEMO_DATA']:
            seed_if_empty()

    @app.cli.command()
    @click.option('--name', prompt=True, help='Display name')
    @click.option('--email', prompt=True, help='Login email')
    @click.option('--password', prompt=True, hide_input=True,
                  confirmation_prompt=True, help='Password')
    @click.option('--role', type=click.Choice(['officer', 'viewer']), default='officer',
                  show_default=True, help='User role')
    @click.option('--contact', default='', help='Contact phone or address')
    def create_user(name, email, password, role, contact):
        """Create a user."""
        from digforweb.services.auth_service import register_user

        try:
            user = register_user(name, email, password, role, contact=contact)
        except ValidationError as e:
            for field, messages in e.errors.items():
                click.echo(f'{field}: {"; ".join(messages)}', err=True)
            raise SystemExit(1)
        click.echo(f'User {user.email} created with role {user.role}.')

    @app.cli.command()
    def seed_demo():
        """Load demo victims, cases, evidence and actions into an empty store."""
        seed_if_empty()

    @app.cli.command()
    def check_integrity():
        """Report entities whose foreign key does not resolve."""
        from digforweb.services.backends import BlobBackend
        from digforweb.services.cascade import find_orphans

        snapshot, _ = BlobBackend(app.config['STORAGE_KEY_PREFIX']).load()
        orphans = find_orphans(snapshot)
        if not orphans:
            click.echo(f'OK: {snapshot.counts()}')
            return
        for kind, ids in orphans.items():
            click.echo(f'Orphaned {kind}: {ids}', err=True)
        raise SystemExit(1)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        level = getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO)
        if app.config['LOG_TO_STDOUT']:
            handler = logging.StreamHandler()
        else:
            if not os.path.exists('logs'):
                os.mkdir('logs')
            handler = RotatingFileHandler(
                'logs/digforweb.log',
                maxBytes=10240000,  # 10MB
                backupCount=10
            )
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s '
            '[in %(pathname)s:%(lineno)d]'
        ))
        handler.setLevel(level)

        # app.logger is the 'digforweb' logger; service module loggers propagate to it
        app.logger.addHandler(handler)
        app.logger.setLevel(level)

        app.logger.info('DigForWeb startup')
