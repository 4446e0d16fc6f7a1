"""Authentication blueprint: sign in, sign up and sign out."""

from __future__ import annotations

from urllib.parse import urlparse

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from flask_login import current_user

from vms.extensions import limiter
from vms.forms.registration import LoginForm, RegistrationForm
from vms.forms.validation import FORM_ERROR_SUMMARY
from vms.services.accounts import LoginPage, RegisterPage
from vms.services.backend import get_backend
from vms.services.notifications import flash_notice
from vms.security.config import auth_rate_limit
from vms.services.session import current_session

auth_bp = Blueprint("auth", __name__)


def _safe_next(target: str | None) -> str | None:
    """Only follow same-site relative redirects."""
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith("/") or target.startswith("//"):
        return None
    return target


@auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit(auth_rate_limit, methods=["POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("portal.dashboard"))

    form = LoginForm()
    if request.method == "POST":
        if not form.validate_on_submit():
            flash(FORM_ERROR_SUMMARY, "error")
            return render_template("login.html", form=form)

        page = LoginPage(get_backend(), current_session())
        notice = page.submit(form.email.data, form.password.data)
        flash_notice(notice)
        if notice.ok:
            return redirect(_safe_next(request.args.get("next")) or url_for("portal.dashboard"))
        form.apply_errors(page.errors)

    return render_template("login.html", form=form)


@auth_bp.route("/register", methods=["GET", "POST"])
@limiter.limit(auth_rate_limit, methods=["POST"])
def register():
    if current_user.is_authenticated:
        return redirect(url_for("portal.dashboard"))

    form = RegistrationForm()
    if request.method == "POST":
        if not form.validate_on_submit():
            flash(FORM_ERROR_SUMMARY, "error")
            return render_template("register.html", form=form)

        page = RegisterPage(
            get_backend(),
            current_session(),
            site_name=current_app.config.get("SITE_NAME", "Al-Khidmat"),
        )
        notice = page.submit(form.record())
        flash_notice(notice)
        if page.next_endpoint:
            return redirect(url_for(page.next_endpoint))
        form.apply_errors(page.errors)

    return render_template("register.html", form=form)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    current_session().sign_out()
    flash("You have been logged out.", "info")
    return redirect(url_for("public.landing"))
