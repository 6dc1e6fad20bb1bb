"""
Analytics Service
Read-only reporting over events, tickets and user profiles.

Revenue figures on the leaderboard and the performance report are
``ticket count x current event price``, not the sum of prices paid.
"""

from collections import Counter
from datetime import datetime, timedelta

from sqlalchemy import func

from eventstudio.extensions import db
from eventstudio.models.event import Event
from eventstudio.models.ticket import TICKET_ACTIVE, Ticket
from eventstudio.models.user import ROLE_USER, User

# Used when a booker never filled in a profile attribute
DEFAULT_AGE = "25-34"
DEFAULT_GENDER = "Male"
DEFAULT_LOCATION = "Cairo"

REVENUE_MONTHS = 6
TOP_EVENTS_LIMIT = 5
UPCOMING_WINDOW_DAYS = 30
RECENT_BOOKING_DAYS = 7
ENGAGEMENT_WINDOW_DAYS = 30


def _percentage(part, whole, digits=2):
    if not whole:
        return 0
    return round(part / whole * 100, digits)


def _month_start(day, months_back=0):
    month_index = day.year * 12 + (day.month - 1) - months_back
    return datetime(month_index // 12, month_index % 12 + 1, 1)


def _monthly_revenue(now):
    series = []
    for months_back in range(REVENUE_MONTHS - 1, -1, -1):
        start = _month_start(now, months_back)
        end = _month_start(now, months_back - 1)
        revenue = db.session.query(func.coalesce(func.sum(Ticket.price), 0)).filter(
            Ticket.status == TICKET_ACTIVE,
            Ticket.created_at >= start,
            Ticket.created_at < end,
        ).scalar()
        series.append({
            "month": start.strftime("%b"),
            "year": start.year,
            "revenue": float(revenue),
        })
    return series


def _top_events():
    counts = (
        db.session.query(Ticket.event_id, func.count(Ticket.ticket_id).label("ticket_count"))
        .filter(Ticket.status == TICKET_ACTIVE)
        .group_by(Ticket.event_id)
        .subquery()
    )
    # Inner join: tickets of deleted events drop out of the leaderboard
    rows = (
        db.session.query(Event, counts.c.ticket_count)
        .join(counts, counts.c.event_id == Event.event_id)
        .order_by(counts.c.ticket_count.desc(), Event.name)
        .limit(TOP_EVENTS_LIMIT)
        .all()
    )
    return [
        {
            "id": str(event.event_id),
            "event_name": event.name,
            "ticket_count": count,
            "revenue": float(event.price * count),
        }
        for event, count in rows
    ]


def get_dashboard_stats(now=None):
    now = now or datetime.now()
    today = now.date()
    active_tickets = Ticket.query.filter(Ticket.status == TICKET_ACTIVE)

    total_revenue = db.session.query(func.coalesce(func.sum(Ticket.price), 0)).filter(
        Ticket.status == TICKET_ACTIVE
    ).scalar()

    return {
        "total_events": Event.query.count(),
        "active_events": Event.query.filter(Event.status == "active").count(),
        "total_tickets": active_tickets.count(),
        "total_revenue": float(total_revenue),
        "total_users": User.query.filter(User.role == ROLE_USER).count(),
        "upcoming_events": Event.query.filter(
            Event.status == "active",
            Event.date >= today,
            Event.date <= today + timedelta(days=UPCOMING_WINDOW_DAYS),
        ).count(),
        "recent_bookings": Ticket.query.filter(
            Ticket.created_at >= now - timedelta(days=RECENT_BOOKING_DAYS)
        ).count(),
        "monthly_revenue": _monthly_revenue(now),
        "top_events": _top_events(),
    }


def _distribution(counter, total, key):
    return [
        {key: value, "count": count, "percentage": _percentage(count, total, digits=1)}
        for value, count in counter.most_common()
    ]


def get_attendee_insights(event_id=None):
    query = Ticket.query.filter(Ticket.status == TICKET_ACTIVE)
    if event_id is not None:
        query = query.filter(Ticket.event_id == event_id)
    tickets = query.all()

    ages, genders, locations, interests = Counter(), Counter(), Counter(), Counter()
    for ticket in tickets:
        booker = ticket.user
        ages[(booker and booker.age) or DEFAULT_AGE] += 1
        genders[(booker and booker.gender) or DEFAULT_GENDER] += 1
        locations[(booker and booker.location) or DEFAULT_LOCATION] += 1
        # One count per tag per ticket, so these can add up past the attendee total
        for interest in (booker.interests if booker else None) or []:
            interests[interest] += 1

    event_info = None
    if event_id is not None:
        event = db.session.get(Event, event_id)
        if event:
            event_info = event.to_summary()

    total = len(tickets)
    return {
        "total_attendees": total,
        "age_distribution": _distribution(ages, total, "age"),
        "gender_distribution": _distribution(genders, total, "gender"),
        "location_distribution": _distribution(locations, total, "location"),
        "interests_distribution": _distribution(interests, total, "interest"),
        "event_info": event_info,
    }


def get_user_demographics(now=None):
    now = now or datetime.now()
    total_users = User.query.filter(User.role == ROLE_USER).count()

    active_users = db.session.query(func.count(func.distinct(Ticket.user_id))).scalar()
    new_users_this_month = User.query.filter(
        User.role == ROLE_USER,
        User.created_at >= _month_start(now),
    ).count()
    engaged_users = db.session.query(func.count(func.distinct(Ticket.user_id))).filter(
        Ticket.created_at >= now - timedelta(days=ENGAGEMENT_WINDOW_DAYS)
    ).scalar()

    return {
        "total_users": total_users,
        "active_users": active_users,
        "new_users_this_month": new_users_this_month,
        "engaged_users": engaged_users,
        "engagement_rate": _percentage(engaged_users, total_users),
    }


def get_event_performance():
    counts = dict(
        db.session.query(Ticket.event_id, func.count(Ticket.ticket_id))
        .filter(Ticket.status == TICKET_ACTIVE)
        .group_by(Ticket.event_id)
        .all()
    )
    events = Event.query.order_by(Event.date.desc()).all()

    performance = []
    for event in events:
        sold = counts.get(event.event_id, 0)
        performance.append({
            "id": str(event.event_id),
            "name": event.name,
            "date": event.date.isoformat(),
            "venue": event.venue,
            "total_seats": event.seats,
            "booked_seats": sold,
            "available_seats": event.seats - sold,
            "occupancy_rate": _percentage(sold, event.seats),
            "revenue": float(event.price * sold),
            "status": event.status,
        })

    # The overall figure reads the stored booked counter rather than the
    # active-ticket counts above, so the two can disagree
    total_seats = sum(event.seats for event in events)
    total_booked = sum(event.booked for event in events)
    return {
        "events": performance,
        "overall": {
            "total_seats": total_seats,
            "total_booked_seats": total_booked,
            "overall_occupancy_rate": _percentage(total_booked, total_seats),
        },
    }
