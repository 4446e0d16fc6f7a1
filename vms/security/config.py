"""Security configuration and middleware."""

from flask import abort, request


def configure_security_headers(app):
    """Configure security headers."""

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        # Prevent MIME type sniffing
        response.headers['X-Content-Type-Options'] = 'nosniff'

        # Prevent clickjacking
        response.headers['X-Frame-Options'] = 'DENY'

        # Control referrer information
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'

        # Activity images are served from an external CDN
        csp_directives = [
            "default-src 'self'",
            "script-src 'self' https://cdn.jsdelivr.net",
            "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
            "img-src 'self' data: https:",
            "font-src 'self' https://cdn.jsdelivr.net",
            "connect-src 'self'",
            "frame-ancestors 'none'",
            "base-uri 'self'",
            "form-action 'self'"
        ]
        response.headers['Content-Security-Policy'] = "; ".join(csp_directives)

        # HSTS for HTTPS (only add if using HTTPS)
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    return app


def configure_secure_session(app):
    """Configure secure session settings."""
    app.config.setdefault('PERMANENT_SESSION_LIFETIME', 7200)  # 2 hours
    app.config.setdefault('WTF_CSRF_SSL_STRICT', app.config.get('SESSION_COOKIE_SECURE', True))
    return app


def validate_input_length(app):
    """Reject request bodies larger than MAX_CONTENT_LENGTH."""
    limit = app.config.get('MAX_CONTENT_LENGTH') or 1024 * 1024

    @app.before_request
    def limit_request_size():
        if request.content_length and request.content_length > limit:
            abort(413)  # Payload Too Large

    return app


def auth_rate_limit():
    """Rate limit for authentication endpoints."""
    return "5 per minute"


__all__ = [
    'configure_security_headers',
    'configure_secure_session',
    'validate_input_length',
    'auth_rate_limit',
]
