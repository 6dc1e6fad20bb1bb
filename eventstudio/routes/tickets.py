from flask import Blueprint, Response, jsonify
from flask_jwt_extended import current_user, jwt_required

from eventstudio.policy import admin_required
from eventstudio.routes import get_json_body
from eventstudio.services.ticket_service import (
    book_ticket,
    cancel_ticket,
    check_in_ticket,
    get_all_tickets,
    get_tickets_by_user,
    render_ticket_qr,
)

ticket_bp = Blueprint('tickets', __name__)


@ticket_bp.route('/book', methods=['POST'])
@jwt_required()
def book():
    """
    Book a seat for an event
    ---
    tags:
      - Tickets
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - eventId
            - seatNumber
          properties:
            eventId:
              type: string
            seatNumber:
              type: string
            paymentMethod:
              type: string
              default: credit_card
    responses:
      201:
        description: Ticket booked
      400:
        description: Missing fields, sold out, seat taken, or caller already holds a ticket
      404:
        description: Event not found
    """
    ticket = book_ticket(get_json_body(), current_user)
    return jsonify({
        "success": True,
        "message": "Ticket booked successfully",
        "data": ticket.to_dict()
    }), 201


@ticket_bp.route('/my-tickets', methods=['GET'])
@jwt_required()
def my_tickets():
    """
    List the caller's tickets, newest first
    ---
    tags:
      - Tickets
    security:
      - Bearer: []
    responses:
      200:
        description: Tickets with event summaries
    """
    tickets = get_tickets_by_user(current_user)
    return jsonify({
        "success": True,
        "data": [t.to_dict() for t in tickets]
    }), 200


@ticket_bp.route('/check-in', methods=['POST'])
@jwt_required()
def check_in():
    """
    Check in a ticket by its QR code
    ---
    tags:
      - Tickets
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - qrCode
          properties:
            qrCode:
              type: string
    responses:
      200:
        description: Check-in successful
      400:
        description: Event is not today, or ticket cancelled or already used
      404:
        description: Invalid QR code
    """
    ticket = check_in_ticket(get_json_body().get('qrCode'))
    return jsonify({
        "success": True,
        "message": "Check-in successful",
        "data": {
            "id": str(ticket.ticket_id),
            "event_name": ticket.event.name,
            "seat_number": ticket.seat_number,
            "check_in_time": ticket.check_in_time.isoformat(),
        }
    }), 200


@ticket_bp.route('/cancel/<uuid:ticket_id>', methods=['PUT'])
@jwt_required()
def cancel(ticket_id):
    """
    Cancel a ticket (owner or admin)
    ---
    tags:
      - Tickets
    security:
      - Bearer: []
    parameters:
      - name: ticket_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Ticket cancelled
      403:
        description: Not the owner or an admin
      404:
        description: Ticket not found
      400:
        description: Ticket already cancelled or used
    """
    cancel_ticket(ticket_id, current_user)
    return jsonify({
        "success": True,
        "message": "Ticket cancelled successfully"
    }), 200


@ticket_bp.route('/<uuid:ticket_id>/qr-code', methods=['GET'])
@jwt_required()
def qr_code_image(ticket_id):
    """
    Render a ticket's QR code as PNG
    ---
    tags:
      - Tickets
    security:
      - Bearer: []
    produces:
      - image/png
    parameters:
      - name: ticket_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: PNG image
      403:
        description: Not the owner or an admin
      404:
        description: Ticket not found
    """
    return Response(render_ticket_qr(ticket_id, current_user), mimetype="image/png")


@ticket_bp.route('/all', methods=['GET'])
@admin_required
def all_tickets():
    """
    List every ticket (admin only)
    ---
    tags:
      - Tickets
    security:
      - Bearer: []
    responses:
      200:
        description: Tickets with event and user summaries
      403:
        description: Not an admin
    """
    tickets = get_all_tickets()
    return jsonify({
        "success": True,
        "data": [t.to_dict(include_user=True) for t in tickets]
    }), 200
