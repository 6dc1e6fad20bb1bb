import logging

from sqlalchemy.exc import SQLAlchemyError

from eventstudio.errors import InternalError
from eventstudio.extensions import db

logger = logging.getLogger(__name__)


def commit_session(action):
    """Commit the current unit of work, rolling back on database failure."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Database error while trying to %s: %s", action, e)
        raise InternalError("Database error") from e
