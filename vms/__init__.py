"""Application factory for the Al-Khidmat Volunteer Portal."""

from __future__ import annotations

import os
from flask import Flask, render_template, request, redirect, url_for

from vms.blueprints.api import api_bp
from vms.blueprints.auth import auth_bp
from vms.blueprints.portal import portal_bp
from vms.blueprints.public import public_bp
from vms.config import Config
from vms.extensions import (
    login_manager,
    csrf,
    limiter,
)
from vms.services.backend import init_backend
from vms.services.session import load_identity
from vms.services.site import inject_site_settings
from vms.security.config import (
    configure_security_headers,
    configure_secure_session,
    validate_input_length
)


def create_app(config_class=Config, backend=None):
    """Create Flask application.

    ``backend`` replaces the Supabase adapter, which is otherwise built from
    ``SUPABASE_URL`` and ``SUPABASE_ANON_KEY`` on first use.
    """
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_object(config_class)

    # Initialize Flask extensions
    init_backend(app, backend)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Please login to continue."
    login_manager.login_message_category = "info"
    csrf.init_app(app)
    limiter.init_app(app)

    # Configure security
    configure_security_headers(app)
    configure_secure_session(app)
    validate_input_length(app)

    login_manager.user_loader(load_identity)

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))

    # Enable live reload and disable caching in development
    if os.getenv("FLASK_ENV") == "development":
        app.config["TEMPLATES_AUTO_RELOAD"] = True
        app.config["SEND_FILE_MAX_AGE_DEFAULT"] = 0
        app.jinja_env.auto_reload = True

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(portal_bp)
    app.register_blueprint(public_bp)
    app.register_blueprint(api_bp, url_prefix='/api/v1')
    csrf.exempt(api_bp)

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Unhandled error on {request.path}: {error}")
        return render_template('500.html'), 500

    app.context_processor(inject_site_settings)

    return app
