from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from eventstudio.routes import get_json_body, get_page_args
from eventstudio.services.event_service import (
    create_event,
    delete_event,
    get_all_events,
    get_event_by_id,
    get_events_by_creator,
    update_event,
)

event_bp = Blueprint('events', __name__)


@event_bp.route('', methods=['POST'])
@jwt_required()
def post_event():
    """
    Create an event owned by the caller
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, date, time, venue, description, price, seats]
          properties:
            name:
              type: string
            date:
              type: string
              format: date
            time:
              type: string
            venue:
              type: string
            description:
              type: string
            price:
              type: number
            seats:
              type: integer
            tags:
              type: string
              description: Comma-separated tag list
            image:
              type: string
    responses:
      201:
        description: Event created
      400:
        description: Missing or invalid fields
    """
    event = create_event(get_json_body(), current_user)
    return jsonify({
        "success": True,
        "message": "Event created successfully",
        "data": event.to_dict()
    }), 201


@event_bp.route('', methods=['GET'])
@jwt_required()
def list_events():
    """
    List events, newest first
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - name: page
        in: query
        type: integer
        default: 1
      - name: limit
        in: query
        type: integer
        default: 10
      - name: status
        in: query
        type: string
        enum: [active, cancelled, completed]
      - name: search
        in: query
        type: string
        description: Case-insensitive match on name, venue or description
    responses:
      200:
        description: Page of events
    """
    page, limit = get_page_args()
    result = get_all_events(
        page,
        limit,
        status=request.args.get('status') or None,
        search=request.args.get('search') or None,
    )
    return jsonify({
        "success": True,
        "data": result['data'],
        "pagination": result['pagination']
    }), 200


@event_bp.route('/user/events', methods=['GET'])
@jwt_required()
def list_my_events():
    """
    List events created by the caller
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - name: page
        in: query
        type: integer
        default: 1
      - name: limit
        in: query
        type: integer
        default: 10
    responses:
      200:
        description: Page of the caller's events
    """
    page, limit = get_page_args()
    result = get_events_by_creator(current_user, page, limit)
    return jsonify({
        "success": True,
        "data": result['data'],
        "pagination": result['pagination']
    }), 200


@event_bp.route('/<uuid:event_id>', methods=['GET'])
@jwt_required()
def get_event(event_id):
    """
    Get a single event with its seat map
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - name: event_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Event details including booked_seats
      404:
        description: Event not found
    """
    return jsonify({
        "success": True,
        "data": get_event_by_id(event_id)
    }), 200


@event_bp.route('/<uuid:event_id>', methods=['PUT'])
@jwt_required()
def put_event(event_id):
    """
    Update an event (creator or admin)
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - name: event_id
        in: path
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Event updated; omitted fields keep their values
      403:
        description: Not the creator or an admin
      404:
        description: Event not found
    """
    event = update_event(event_id, get_json_body(), current_user)
    return jsonify({
        "success": True,
        "message": "Event updated successfully",
        "data": event.to_dict()
    }), 200


@event_bp.route('/<uuid:event_id>', methods=['DELETE'])
@jwt_required()
def remove_event(event_id):
    """
    Delete an event (creator or admin). Existing tickets are kept.
    ---
    tags:
      - Events
    security:
      - Bearer: []
    parameters:
      - name: event_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Event deleted
      403:
        description: Not the creator or an admin
      404:
        description: Event not found
    """
    delete_event(event_id, current_user)
    return jsonify({
        "success": True,
        "message": "Event deleted successfully"
    }), 200
