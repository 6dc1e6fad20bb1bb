import uuid
from datetime import datetime

from eventstudio.extensions import db

EVENT_STATUSES = ("active", "cancelled", "completed")


class Event(db.Model):
    __tablename__ = 'events'
    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_events_price_non_negative'),
        db.CheckConstraint('seats >= 0', name='ck_events_seats_non_negative'),
        db.Index('ix_events_date_status', 'date', 'status'),
    )

    event_id = db.Column(db.Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = db.Column(db.Text, nullable=False)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.Text, nullable=False)
    venue = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    seats = db.Column(db.Integer, nullable=False)
    # Running counter of active + used tickets; booked <= seats is not enforced here
    booked = db.Column(db.Integer, nullable=False, default=0)
    tags = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(db.Enum(*EVENT_STATUSES, name="event_status"), nullable=False, default="active")
    image = db.Column(db.Text, nullable=False, default="")
    created_by = db.Column(db.Uuid(as_uuid=True), db.ForeignKey('users.user_id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    creator = db.relationship('User')

    def to_summary(self):
        return {
            'id': str(self.event_id),
            'name': self.name,
            'date': self.date.isoformat(),
            'time': self.time,
            'venue': self.venue,
        }

    def to_dict(self):
        return {
            'id': str(self.event_id),
            'name': self.name,
            'date': self.date.isoformat(),
            'time': self.time,
            'venue': self.venue,
            'description': self.description,
            'price': float(self.price),
            'seats': self.seats,
            'booked': self.booked,
            'tags': list(self.tags or []),
            'status': self.status,
            'image': self.image,
            'created_by': self.creator.to_summary() if self.creator else None,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
        }
