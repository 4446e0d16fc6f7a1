"""JSON API mirroring the portal's pages and actions."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from vms.models import Assignment
from vms.security import api_member_required
from vms.services.activities import ActivitiesPage
from vms.services.backend import get_backend
from vms.services.notifications import Notice
from vms.services.opportunities import OpportunitiesPage
from vms.services.session import current_session

api_bp = Blueprint('api', __name__)


def serialize_assignment(assignment: Assignment) -> dict:
    activity = assignment.activity
    return {
        'id': assignment.id,
        'activity_id': assignment.activity_id,
        'status': assignment.status,
        'assigned_at': assignment.assigned_at.isoformat() if assignment.assigned_at else None,
        'activity': {
            'id': activity.id,
            'title': activity.title,
            'location': activity.location,
            'start_date': activity.start_date.isoformat() if activity.start_date else None,
            'category': activity.category,
        } if activity else None,
    }


def notice_response(notice: Notice, failure_status: int = 409, **extra):
    body = {'notice': notice.to_dict(), **extra}
    return jsonify(body), (200 if notice.ok else failure_status)


def load_error_response():
    current_app.logger.warning(f"API load failed on {request.path}")
    return jsonify({'error': 'Unavailable', 'message': 'Could not load data. Please try again.'}), 503


@api_bp.route('/session', methods=['GET'])
def session_info():
    identity = current_session().identity
    if identity is None:
        return jsonify({'authenticated': False, 'user': None})
    return jsonify({
        'authenticated': True,
        'user': {
            'id': identity.id,
            'email': identity.email,
            'display_name': identity.display_name,
        },
    })


def _opportunities_page() -> OpportunitiesPage:
    return OpportunitiesPage(
        get_backend(),
        current_session(),
        default_capacity=current_app.config.get('DEFAULT_ACTIVITY_CAPACITY', 10),
    )


@api_bp.route('/opportunities', methods=['GET'])
def list_opportunities():
    page = _opportunities_page()
    if not page.mount():
        return load_error_response()
    return jsonify({'items': [card.to_dict() for card in page.cards()]})


@api_bp.route('/opportunities/<activity_id>/join', methods=['POST'])
@api_member_required
def join_opportunity(activity_id: str):
    page = _opportunities_page()
    if not page.mount():
        return load_error_response()
    status = 409 if page.find(activity_id) else 400
    notice = page.join(activity_id)
    return notice_response(
        notice,
        failure_status=status,
        items=[card.to_dict() for card in page.cards()],
    )


@api_bp.route('/assignments', methods=['GET'])
@api_member_required
def list_assignments():
    page = ActivitiesPage(get_backend(), current_session())
    if not page.mount():
        return load_error_response()
    return jsonify({
        'items': [serialize_assignment(a) for a in page.assignments.value],
        'counts': {status: len(items) for status, items in page.partitions().items()},
    })


@api_bp.route('/assignments/<assignment_id>/cancel', methods=['POST'])
@api_member_required
def cancel_assignment(assignment_id: str):
    page = ActivitiesPage(get_backend(), current_session())
    if not page.mount():
        return load_error_response()
    status = 409 if page.find(assignment_id) else 400
    notice = page.cancel(assignment_id)
    return notice_response(
        notice,
        failure_status=status,
        items=[serialize_assignment(a) for a in page.assignments.value],
    )
