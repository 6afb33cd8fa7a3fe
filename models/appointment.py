from datetime import datetime
from extensions import db

APPOINTMENT_TYPES = ('academic', 'personal', 'crisis', 'career')
APPOINTMENT_STATUSES = ('pending', 'approved', 'rejected', 'completed', 'cancelled', 'no-show')
APPOINTMENT_DURATIONS = (30, 60, 90)  # minutes
APPOINTMENT_LOCATIONS = ('in-person', 'virtual', 'phone')

class Appointment(db.Model):
    __tablename__ = 'appointments'
    __table_args__ = (
        db.Index('ix_appointment_student_status', 'student_id', 'status'),
        db.Index('ix_appointment_counselor_status', 'counselor_id', 'status'),
    )

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    counselor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    type = db.Column(db.String(20), nullable=False)
    preferred_date = db.Column(db.DateTime, nullable=False)
    scheduled_date = db.Column(db.DateTime, index=True)
    duration = db.Column(db.Integer, default=60)
    status = db.Column(db.String(20), default='pending', nullable=False)
    description = db.Column(db.String(500))
    counselor_notes = db.Column(db.String(1000))
    is_urgent = db.Column(db.Boolean, default=False)
    location = db.Column(db.String(20), default='in-person')
    meeting_link = db.Column(db.String(500))
    follow_up_required = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    student = db.relationship('User', foreign_keys=[student_id])
    counselor = db.relationship('User', foreign_keys=[counselor_id])

    @classmethod
    def for_user(cls, user):
        """Appointments visible to a user: booked by a student, or assigned to a counselor."""
        if user.role == 'counselor':
            return cls.query.filter_by(counselor_id=user.id)
        return cls.query.filter_by(student_id=user.id)

    def to_dict(self):
        return {
            'id': self.id,
            'student': self.student.to_summary() if self.student else None,
            'counselor': self.counselor.to_summary() if self.counselor else None,
            'type': self.type,
            'preferred_date': self.preferred_date.isoformat() if self.preferred_date else None,
            'scheduled_date': self.scheduled_date.isoformat() if self.scheduled_date else None,
            'duration': self.duration,
            'status': self.status,
            'description': self.description,
            'counselor_notes': self.counselor_notes,
            'is_urgent': self.is_urgent,
            'location': self.location,
            'meeting_link': self.meeting_link,
            'follow_up_required': self.follow_up_required,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Appointment {self.id} {self.status}>'
