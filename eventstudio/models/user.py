import uuid
from datetime import datetime

import bcrypt

from eventstudio.extensions import db

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)
MAX_EMAIL_LENGTH = 254

AGE_BRACKETS = ("18-24", "25-34", "35-44", "45+")
GENDERS = ("Male", "Female")
LOCATIONS = (
    "Cairo", "Alexandria", "Giza", "Luxor", "Aswan",
    "Sharm El Sheikh", "Hurghada", "International",
)
INTERESTS = (
    "Live Music", "Innovation", "EDM Music", "Food Festivals",
    "Technology", "Sports", "Art", "Business",
)


class User(db.Model):
    __tablename__ = 'users'

    user_id = db.Column(db.Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = db.Column(db.Text, nullable=False)
    email = db.Column(db.String(MAX_EMAIL_LENGTH), unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    role = db.Column(db.Enum(*ROLES, name="user_role"), nullable=False, default=ROLE_USER)

    # Analytics attributes
    age = db.Column(db.String(10), default="25-34")
    gender = db.Column(db.String(10), default="Male")
    location = db.Column(db.String(50), default="Cairo")
    interests = db.Column(db.JSON, nullable=False, default=list)

    # Verification / reset OTP columns are kept in the schema but no route uses them yet
    verify_otp = db.Column(db.String(10), default="")
    verify_otp_expiry = db.Column(db.BigInteger, default=0)
    is_verified = db.Column(db.Boolean, default=False)
    reset_otp = db.Column(db.String(10), default="")
    reset_otp_expiry = db.Column(db.BigInteger, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def set_password(self, password):
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    def to_summary(self):
        return {
            'id': str(self.user_id),
            'name': self.name,
            'email': self.email,
        }

    def to_dict(self):
        return {
            'id': str(self.user_id),
            'name': self.name,
            'email': self.email,
            'role': self.role,
        }

    def to_profile(self):
        profile = self.to_dict()
        profile.update({
            'age': self.age,
            'gender': self.gender,
            'location': self.location,
            'interests': list(self.interests or []),
        })
        return profile
