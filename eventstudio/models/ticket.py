"""
Ticket Model
Status: active | used | cancelled
"""

import uuid
from datetime import datetime

from eventstudio.extensions import db

TICKET_ACTIVE = "active"
TICKET_USED = "used"
TICKET_CANCELLED = "cancelled"
TICKET_STATUSES = (TICKET_ACTIVE, TICKET_CANCELLED, TICKET_USED)

# Statuses that hold a seat
SEAT_HOLDING_STATUSES = (TICKET_ACTIVE, TICKET_USED)


class Ticket(db.Model):
    __tablename__ = "tickets"
    __table_args__ = (
        db.Index("ix_tickets_event_user", "event_id", "user_id"),
    )

    ticket_id = db.Column(db.Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # No foreign key: deleting an event leaves its tickets in place
    event_id = db.Column(db.Uuid(as_uuid=True), nullable=False)
    user_id = db.Column(db.Uuid(as_uuid=True), db.ForeignKey("users.user_id"), nullable=False)
    seat_number = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(
        db.Enum(*TICKET_STATUSES, name="ticket_status"),
        nullable=False,
        default=TICKET_ACTIVE,
        index=True,
    )
    qr_code = db.Column(db.String(64), nullable=False, unique=True, index=True)
    check_in_time = db.Column(db.DateTime, nullable=True)
    payment_method = db.Column(db.Text, nullable=False, default="credit_card")
    transaction_id = db.Column(db.String(64), nullable=False, default="")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    event = db.relationship(
        "Event",
        primaryjoin="foreign(Ticket.event_id) == Event.event_id",
        viewonly=True,
    )
    user = db.relationship("User")

    def to_dict(self, include_user=False):
        data = {
            "id":             str(self.ticket_id),
            "event":          self.event.to_summary() if self.event else None,
            "seat_number":    self.seat_number,
            "price":          float(self.price),
            "status":         self.status,
            "qr_code":        self.qr_code,
            "payment_method": self.payment_method,
            "transaction_id": self.transaction_id,
            "check_in_time":  self.check_in_time.isoformat() if self.check_in_time else None,
            "created_at":     self.created_at.isoformat(),
        }
        if include_user:
            data["user"] = self.user.to_summary() if self.user else None
        return data
