"""Volunteer portal pages: dashboard, my activities, opportunities and profile.

Action routes (join, cancel, save) mount the page once, run the action
through the page controller and render straight from the controller's view
state, so a failed write shows exactly what was on screen before it.
"""

from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from vms.forms.registration import ProfileForm
from vms.forms.validation import FORM_ERROR_SUMMARY
from vms.models import Availability
from vms.security import member_required
from vms.services.activities import ActivitiesPage
from vms.services.backend import get_backend
from vms.services.dashboard import DashboardPage
from vms.services.notifications import flash_notice
from vms.services.opportunities import OpportunitiesPage
from vms.services.profile import ProfilePage
from vms.services.session import current_session

portal_bp = Blueprint('portal', __name__)

LOAD_ERROR_MESSAGE = "Could not load your data. Please try again."


def _mount(page) -> None:
    if not page.mount():
        flash(LOAD_ERROR_MESSAGE, "error")


def availability_label(value: str | None) -> str:
    for availability in Availability:
        if availability.value == value:
            return availability.label
    return "Not specified"


@portal_bp.app_template_filter('availability_label')
def _availability_label_filter(value):
    return availability_label(value)


@portal_bp.app_template_filter('event_date')
def _event_date_filter(value):
    if not value:
        return "Date to be announced"
    return value.strftime('%b %d, %Y')


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@portal_bp.route('/dashboard')
@member_required
def dashboard():
    page = DashboardPage(get_backend(), current_session())
    _mount(page)
    return render_template('dashboard.html', page=page, stats=page.stats())


# ---------------------------------------------------------------------------
# My activities
# ---------------------------------------------------------------------------

def _render_activities(page: ActivitiesPage):
    tab = request.args.get('tab', 'active')
    partitions = page.partitions()
    if tab not in partitions:
        tab = 'active'
    return render_template('activities.html', page=page, partitions=partitions, tab=tab)


@portal_bp.route('/activities')
@member_required
def activities():
    page = ActivitiesPage(get_backend(), current_session())
    _mount(page)
    return _render_activities(page)


@portal_bp.route('/activities/<assignment_id>/cancel', methods=['POST'])
@member_required
def cancel_activity(assignment_id: str):
    page = ActivitiesPage(get_backend(), current_session())
    _mount(page)
    notice = page.cancel(assignment_id)
    flash_notice(notice)
    return _render_activities(page)


# ---------------------------------------------------------------------------
# Opportunities
# ---------------------------------------------------------------------------

def _opportunities_page() -> OpportunitiesPage:
    return OpportunitiesPage(
        get_backend(),
        current_session(),
        default_capacity=current_app.config.get('DEFAULT_ACTIVITY_CAPACITY', 10),
    )


@portal_bp.route('/opportunities')
def opportunities():
    page = _opportunities_page()
    _mount(page)
    return render_template('opportunities.html', page=page, cards=page.cards())


@portal_bp.route('/opportunities/<activity_id>/join', methods=['POST'])
def join_opportunity(activity_id: str):
    page = _opportunities_page()
    _mount(page)
    notice = page.join(activity_id)
    flash_notice(notice)
    if page.identity is None:
        return redirect(url_for('auth.login', next=url_for('portal.opportunities')))
    return render_template('opportunities.html', page=page, cards=page.cards())


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@portal_bp.route('/profile', methods=['GET', 'POST'])
@member_required
def profile():
    page = ProfilePage(get_backend(), current_session())
    _mount(page)

    if request.method == 'POST':
        form = ProfileForm()
        if not form.validate_on_submit():
            flash(FORM_ERROR_SUMMARY, "error")
            return render_template('profile.html', page=page, form=form)
        notice = page.save(form.record())
        flash_notice(notice)
        form.apply_errors(page.errors)
        return render_template('profile.html', page=page, form=form)

    form = ProfileForm(data=page.form_data())
    return render_template('profile.html', page=page, form=form)
