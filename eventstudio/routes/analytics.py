from flask import Blueprint, jsonify, request

from eventstudio.parsing import parse_uuid
from eventstudio.policy import admin_required
from eventstudio.services import analytics_service

analytics_bp = Blueprint('analytics', __name__)


@analytics_bp.route('/dashboard', methods=['GET'])
@admin_required
def dashboard():
    """
    Headline counters, revenue series and top events
    ---
    tags:
      - Analytics
    security:
      - Bearer: []
    responses:
      200:
        description: Dashboard statistics
      403:
        description: Not an admin
    """
    return jsonify({"success": True, "data": analytics_service.get_dashboard_stats()}), 200


@analytics_bp.route('/demographics', methods=['GET'])
@admin_required
def demographics():
    """
    User counts and engagement rate
    ---
    tags:
      - Analytics
    security:
      - Bearer: []
    responses:
      200:
        description: User demographics
      403:
        description: Not an admin
    """
    return jsonify({"success": True, "data": analytics_service.get_user_demographics()}), 200


@analytics_bp.route('/performance', methods=['GET'])
@admin_required
def performance():
    """
    Per-event sales and occupancy
    ---
    tags:
      - Analytics
    security:
      - Bearer: []
    responses:
      200:
        description: Event performance
      403:
        description: Not an admin
    """
    return jsonify({"success": True, "data": analytics_service.get_event_performance()}), 200


@analytics_bp.route('/attendee-insights', methods=['GET'])
@admin_required
def attendee_insights():
    """
    Attendee profile distributions
    ---
    tags:
      - Analytics
    security:
      - Bearer: []
    parameters:
      - name: eventId
        in: query
        type: string
        required: false
    responses:
      200:
        description: Age, gender, location and interest distributions
      400:
        description: eventId is not a valid id
      403:
        description: Not an admin
    """
    event_id = request.args.get('eventId')
    if event_id:
        event_id = parse_uuid(event_id, 'eventId')
    data = analytics_service.get_attendee_insights(event_id or None)
    return jsonify({"success": True, "data": data}), 200
