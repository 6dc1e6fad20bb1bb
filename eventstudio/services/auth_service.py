"""
Credential Service
Registration, login and the analytics-profile subset of a user.
"""

import logging
import re

from eventstudio.errors import AuthError, ConflictError, NotFoundError, ValidationError
from eventstudio.extensions import db
from eventstudio.models.user import AGE_BRACKETS, GENDERS, INTERESTS, LOCATIONS, MAX_EMAIL_LENGTH, ROLES, User
from eventstudio.parsing import missing_fields, parse_tags
from eventstudio.services import commit_session

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$')
MIN_PASSWORD_LENGTH = 8

PROFILE_CHOICES = {
    'age': AGE_BRACKETS,
    'gender': GENDERS,
    'location': LOCATIONS,
}


def register_user(data):
    missing = missing_fields(data, ['name', 'email', 'password', 'role'])
    if missing:
        raise ValidationError(f"All fields are required. Missing: {', '.join(missing)}")
    if not all(isinstance(data[f], str) for f in ('name', 'email', 'password', 'role')):
        raise ValidationError('Fields must be strings')

    email = data['email'].strip().lower()
    if len(email) > MAX_EMAIL_LENGTH or not EMAIL_REGEX.match(email):
        raise ValidationError('Invalid email format')
    if len(data['password']) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    if data['role'] not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

    if User.query.filter_by(email=email).first():
        raise ConflictError('User already exists', error_code='EMAIL_EXISTS')

    user = User(name=data['name'].strip(), email=email, role=data['role'])
    user.set_password(data['password'])
    db.session.add(user)
    commit_session('register user')

    logger.info("Registered %s user %s", user.role, user.user_id)
    return user


def authenticate_user(data):
    if missing_fields(data, ['email', 'password']):
        raise ValidationError('All fields are required')
    if not isinstance(data['email'], str) or not isinstance(data['password'], str):
        raise ValidationError('Fields must be strings')

    user = User.query.filter_by(email=data['email'].strip().lower()).first()
    if not user:
        raise NotFoundError('User does not exist', error_code='USER_NOT_FOUND')
    if not user.check_password(data['password']):
        logger.warning("Failed login for user %s", user.user_id)
        raise AuthError('Invalid password', error_code='INVALID_CREDENTIALS')
    return user


def update_profile(user, data):
    """Patch age, gender, location and interests.

    Keys that are absent or ``null`` leave the attribute alone. Name, email,
    password and role are never touched here.
    """
    changes = {}
    for field, choices in PROFILE_CHOICES.items():
        value = data.get(field)
        if value is None:
            continue
        if value not in choices:
            raise ValidationError(f"Invalid {field}. Allowed: {', '.join(choices)}")
        changes[field] = value

    if data.get('interests') is not None:
        interests = parse_tags(data['interests'])
        unknown = [i for i in interests if i not in INTERESTS]
        if unknown:
            raise ValidationError(f"Unknown interests: {', '.join(unknown)}")
        # Keep first occurrence order, drop repeats
        changes['interests'] = list(dict.fromkeys(interests))

    for field, value in changes.items():
        setattr(user, field, value)
    commit_session('update profile')
    return user
