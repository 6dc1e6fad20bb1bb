from eventstudio.models.user import User
from eventstudio.models.event import Event
from eventstudio.models.ticket import Ticket

__all__ = ["User", "Event", "Ticket"]
