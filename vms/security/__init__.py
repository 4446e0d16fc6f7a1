"""Security package for the volunteer portal."""

from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, redirect, request, url_for
from flask_login import current_user


def member_required(view_func):
    """Send guests to the login page, remembering where they were going."""

    @wraps(view_func)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            login_view = current_app.login_manager.login_view or 'auth.login'
            return redirect(url_for(login_view, next=request.full_path.rstrip('?')))
        return view_func(*args, **kwargs)

    return wrapped


def api_member_required(view_func):
    """JSON flavour of ``member_required``: guests get a 401 body."""

    @wraps(view_func)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'error': 'Login Required', 'message': 'Please login to continue.'}), 401
        return view_func(*args, **kwargs)

    return wrapped


__all__ = ["api_member_required", "member_required"]
