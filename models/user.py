from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db

USER_ROLES = ('student', 'counselor')
COUNSELOR_SPECIALIZATIONS = ('academic', 'personal', 'crisis', 'career')

class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='student')
    is_active_account = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_login = db.Column(db.DateTime)

    # Student profile
    year = db.Column(db.String(20))
    major = db.Column(db.String(100))

    # Counselor profile
    specializations = db.Column(db.JSON, default=list)

    # Relationships
    journal_entries = db.relationship('JournalEntry', backref='user', lazy='dynamic',
                                      cascade='all, delete-orphan')

    def __init__(self, email, password, first_name, last_name, role='student', year=None, major=None):
        self.email = email
        self.password = password
        self.first_name = first_name
        self.last_name = last_name
        self.role = role
        self.year = year
        self.major = major

    @property
    def password(self):
        raise AttributeError('password is not a readable attribute')

    @password.setter
    def password(self, password):
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_active(self):
        return bool(self.is_active_account)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'role': self.role,
            'year': self.year,
            'major': self.major,
            'specializations': self.specializations or [],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'last_login': self.last_login.isoformat() if self.last_login else None,
        }

    def to_summary(self):
        """Public profile shown to the other side of an appointment."""
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'role': self.role,
            'specializations': self.specializations or [],
        }

    def __repr__(self):
        return f'<User {self.email}>'
