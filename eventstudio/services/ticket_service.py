"""
Ticket Service
Ticket lifecycle: book, check-in, cancel.

    active -> used       (check-in on the event's date)
    active -> cancelled  (owner or admin)

used and cancelled are terminal.
"""

import io
import logging
import secrets
import string
import time
from datetime import date, datetime

import qrcode

from eventstudio.errors import CapacityError, ConflictError, NotFoundError, ValidationError
from eventstudio.extensions import db
from eventstudio.models.event import Event
from eventstudio.models.ticket import (
    SEAT_HOLDING_STATUSES,
    TICKET_ACTIVE,
    TICKET_CANCELLED,
    TICKET_USED,
    Ticket,
)
from eventstudio.parsing import is_blank, parse_optional_text, parse_uuid
from eventstudio.policy import require_owner_or_admin
from eventstudio.services import commit_session

logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_lowercase
QR_CODE_ATTEMPTS = 5
DEFAULT_PAYMENT_METHOD = "credit_card"


def _base36(number):
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(BASE36[remainder])
        if not number:
            return "".join(reversed(digits))


def _random_base36(length):
    return "".join(secrets.choice(BASE36) for _ in range(length))


def generate_ticket_code():
    """``TICKET_<base36 ms timestamp>_<5 random chars>``, upper-cased."""
    timestamp = _base36(int(time.time() * 1000))
    return f"TICKET_{timestamp}_{_random_base36(5)}".upper()


def generate_transaction_id():
    return f"TXN_{int(time.time() * 1000)}_{_random_base36(9)}"


def _unused_ticket_code():
    for _ in range(QR_CODE_ATTEMPTS):
        code = generate_ticket_code()
        if not Ticket.query.filter_by(qr_code=code).first():
            return code
    raise ConflictError("Could not allocate a ticket code, please retry")


CHECK_IN_CONFLICTS = {
    TICKET_CANCELLED: ("Ticket is cancelled", "TICKET_CANCELLED"),
    TICKET_USED: ("Ticket already used", "TICKET_USED"),
}
CANCEL_CONFLICTS = {
    TICKET_CANCELLED: ("Ticket already cancelled", "TICKET_CANCELLED"),
    TICKET_USED: ("Cannot cancel used ticket", "TICKET_USED"),
}


def _ensure_active(ticket, conflicts):
    if ticket.status in conflicts:
        message, error_code = conflicts[ticket.status]
        raise ConflictError(message, error_code=error_code)


def _claim_active(ticket, conflicts, **values):
    """Move the ticket out of ``active`` with a guarded UPDATE.

    The row lock taken on lookup covers PostgreSQL; the ``status = active``
    guard also holds on databases that ignore ``FOR UPDATE``. When another
    request moved the ticket first, nothing is written and the conflict for
    the status it left behind is raised.
    """
    values['updated_at'] = datetime.now()
    claimed = Ticket.query.filter(
        Ticket.ticket_id == ticket.ticket_id,
        Ticket.status == TICKET_ACTIVE,
    ).update(values, synchronize_session=False)
    if not claimed:
        db.session.rollback()
        # rollback expired the ticket, so this reads the committed status
        _ensure_active(ticket, conflicts)
        raise ConflictError("Ticket changed during the request, please retry")


def get_ticket_or_404(ticket_id):
    ticket = db.session.get(Ticket, ticket_id)
    if not ticket:
        raise NotFoundError("Ticket not found", error_code="TICKET_NOT_FOUND")
    return ticket


def book_ticket(data, user):
    if is_blank(data.get('eventId')) or is_blank(data.get('seatNumber')):
        raise ValidationError("eventId and seatNumber are required")
    if isinstance(data['seatNumber'], (bool, dict, list)):
        raise ValidationError("seatNumber must be a string")
    event_id = parse_uuid(data['eventId'], 'eventId')
    seat_number = str(data['seatNumber']).strip()
    payment_method = parse_optional_text(data.get('paymentMethod'), 'paymentMethod', DEFAULT_PAYMENT_METHOD)

    # Lock the event row so the checks below and the counter update
    # happen in one transaction per event
    event = db.session.get(Event, event_id, with_for_update=True)
    if not event:
        raise NotFoundError("Event not found", error_code="EVENT_NOT_FOUND")

    if event.booked >= event.seats:
        db.session.rollback()
        raise CapacityError("Event is sold out")

    held = Ticket.query.filter(
        Ticket.event_id == event_id,
        Ticket.status.in_(SEAT_HOLDING_STATUSES),
    )
    if held.filter(Ticket.seat_number == seat_number).first():
        db.session.rollback()
        raise ConflictError("Seat already booked", error_code="SEAT_TAKEN")
    if held.filter(Ticket.user_id == user.user_id).first():
        db.session.rollback()
        raise ConflictError("You already have a ticket for this event", error_code="ALREADY_BOOKED")

    ticket = Ticket(
        event_id=event_id,
        user_id=user.user_id,
        seat_number=seat_number,
        price=event.price,
        qr_code=_unused_ticket_code(),
        payment_method=payment_method,
        transaction_id=generate_transaction_id(),
        status=TICKET_ACTIVE,
    )
    db.session.add(ticket)
    event.booked = Event.booked + 1
    commit_session('book ticket')

    logger.info("User %s booked seat %s for event %s", user.user_id, seat_number, event_id)
    return ticket


def get_tickets_by_user(user):
    return Ticket.query.filter_by(user_id=user.user_id).order_by(Ticket.created_at.desc()).all()


def get_all_tickets():
    return Ticket.query.order_by(Ticket.created_at.desc()).all()


def check_in_ticket(qr_code, today=None):
    if is_blank(qr_code):
        raise ValidationError("qrCode is required")

    ticket = Ticket.query.filter_by(qr_code=str(qr_code).strip()).with_for_update().first()
    if not ticket:
        raise NotFoundError("Invalid QR code", error_code="TICKET_NOT_FOUND")
    _ensure_active(ticket, CHECK_IN_CONFLICTS)

    event = ticket.event
    if not event:
        raise NotFoundError("Event not found", error_code="EVENT_NOT_FOUND")
    if event.date != (today or date.today()):
        raise ValidationError("Event is not today", error_code="EVENT_NOT_TODAY")

    _claim_active(ticket, CHECK_IN_CONFLICTS, status=TICKET_USED, check_in_time=datetime.now())
    commit_session('check in ticket')

    logger.info("Checked in ticket %s for event %s", ticket.ticket_id, event.event_id)
    return ticket


def cancel_ticket(ticket_id, requester):
    ticket = db.session.get(Ticket, ticket_id, with_for_update=True)
    if not ticket:
        raise NotFoundError("Ticket not found", error_code="TICKET_NOT_FOUND")
    require_owner_or_admin(requester, ticket.user_id)
    _ensure_active(ticket, CANCEL_CONFLICTS)

    _claim_active(ticket, CANCEL_CONFLICTS, status=TICKET_CANCELLED)
    event = db.session.get(Event, ticket.event_id, with_for_update=True)
    if event:
        event.booked = Event.booked - 1
    commit_session('cancel ticket')

    logger.info("User %s cancelled ticket %s", requester.user_id, ticket.ticket_id)
    return ticket


def render_ticket_qr(ticket_id, requester):
    """PNG bytes of the ticket's QR token."""
    ticket = get_ticket_or_404(ticket_id)
    require_owner_or_admin(requester, ticket.user_id)

    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(ticket.qr_code)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
