"""Public landing page."""

from __future__ import annotations

from flask import Blueprint, render_template

from vms.services.site import ABOUT_FEATURES, FEATURED_ACTIVITIES, VOLUNTEER_BENEFITS

public_bp = Blueprint('public', __name__)


@public_bp.route('/')
def landing():
    return render_template(
        'landing.html',
        about_features=ABOUT_FEATURES,
        featured_activities=FEATURED_ACTIVITIES,
        benefits=VOLUNTEER_BENEFITS,
    )
