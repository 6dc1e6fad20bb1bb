import logging

from sqlalchemy import or_

from eventstudio.errors import NotFoundError, ValidationError
from eventstudio.extensions import db
from eventstudio.models.event import EVENT_STATUSES, Event
from eventstudio.models.ticket import SEAT_HOLDING_STATUSES, Ticket
from eventstudio.parsing import (
    is_blank,
    missing_fields,
    parse_date,
    parse_optional_text,
    parse_price,
    parse_seats,
    parse_tags,
)
from eventstudio.policy import require_owner_or_admin
from eventstudio.services import commit_session

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ['name', 'date', 'time', 'venue', 'description', 'price', 'seats']
TEXT_FIELDS = ['name', 'time', 'venue', 'description']
MAX_PAGE_SIZE = 100


def _clean_text(data, field):
    value = data[field]
    if not isinstance(value, str) or is_blank(value):
        raise ValidationError(f"Field '{field}' must be a non-empty string")
    return value.strip()


def _validate_status(value):
    if value not in EVENT_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(EVENT_STATUSES)}")
    return value


def _paginate(query, page, limit):
    pagination = query.order_by(Event.created_at.desc()).paginate(
        page=page, per_page=limit, max_per_page=MAX_PAGE_SIZE, error_out=False
    )
    return {
        'data': [event.to_dict() for event in pagination.items],
        'pagination': {
            'page': pagination.page,
            'per_page': pagination.per_page,
            'total': pagination.total,
            'total_pages': pagination.pages,
        }
    }


def get_event_or_404(event_id):
    event = db.session.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found", error_code="EVENT_NOT_FOUND")
    return event


def create_event(data, creator):
    missing = missing_fields(data, REQUIRED_FIELDS)
    if missing:
        raise ValidationError(f"All required fields must be provided. Missing: {', '.join(missing)}")

    event = Event(
        date=parse_date(data['date']),
        price=parse_price(data['price']),
        seats=parse_seats(data['seats']),
        tags=parse_tags(data.get('tags')),
        image=parse_optional_text(data.get('image'), 'image'),
        booked=0,
        status="active",
        created_by=creator.user_id,
    )
    for field in TEXT_FIELDS:
        setattr(event, field, _clean_text(data, field))

    db.session.add(event)
    commit_session('create event')
    logger.info("User %s created event %s", creator.user_id, event.event_id)
    return event


def get_all_events(page=1, limit=10, status=None, search=None):
    query = Event.query
    if status:
        query = query.filter(Event.status == _validate_status(status))
    if search:
        query = query.filter(or_(
            Event.name.icontains(search, autoescape=True),
            Event.venue.icontains(search, autoescape=True),
            Event.description.icontains(search, autoescape=True),
        ))
    return _paginate(query, page, limit)


def get_events_by_creator(creator, page=1, limit=10):
    return _paginate(Event.query.filter(Event.created_by == creator.user_id), page, limit)


def get_booked_seats(event_id):
    rows = db.session.query(Ticket.seat_number).filter(
        Ticket.event_id == event_id,
        Ticket.status.in_(SEAT_HOLDING_STATUSES),
    ).all()
    return [row.seat_number for row in rows]


def get_event_by_id(event_id):
    event = get_event_or_404(event_id)
    event_data = event.to_dict()
    # Seat map: seats currently held by active or used tickets
    event_data['booked_seats'] = get_booked_seats(event.event_id)
    return event_data


def update_event(event_id, data, requester):
    event = get_event_or_404(event_id)
    require_owner_or_admin(requester, event.created_by, "Not authorized to update this event")

    for field in TEXT_FIELDS:
        if field in data:
            setattr(event, field, _clean_text(data, field))
    if 'date' in data:
        event.date = parse_date(data['date'])
    if 'price' in data:
        event.price = parse_price(data['price'])
    if 'seats' in data:
        event.seats = parse_seats(data['seats'])
    if 'tags' in data:
        event.tags = parse_tags(data['tags'])
    if 'status' in data:
        event.status = _validate_status(data['status'])
    if 'image' in data:
        event.image = parse_optional_text(data['image'], 'image')

    commit_session('update event')
    return event


def delete_event(event_id, requester):
    event = get_event_or_404(event_id)
    require_owner_or_admin(requester, event.created_by, "Not authorized to delete this event")

    # Tickets for the event are left untouched
    db.session.delete(event)
    commit_session('delete event')
    logger.info("User %s deleted event %s", requester.user_id, event_id)
