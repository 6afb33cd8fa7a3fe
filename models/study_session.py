from datetime import datetime
from extensions import db

SESSION_TYPES = ('pomodoro', 'custom', 'planned')

class StudySession(db.Model):
    __tablename__ = 'study_sessions'
    __table_args__ = (
        db.Index('ix_study_user_started', 'user_id', 'start_time'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    subject = db.Column(db.String(100), nullable=False)
    duration = db.Column(db.Integer, nullable=False)          # minutes
    planned_duration = db.Column(db.Integer, default=25)      # Pomodoro default
    break_duration = db.Column(db.Integer, default=5)
    type = db.Column(db.String(20), default='custom')
    start_time = db.Column(db.DateTime, nullable=False)
    end_time = db.Column(db.DateTime)
    is_completed = db.Column(db.Boolean, default=False)
    productivity = db.Column(db.Integer)                      # 1-5
    notes = db.Column(db.String(300))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    related_task_id = db.Column(db.Integer, db.ForeignKey('tasks.id', ondelete='SET NULL'))
    related_task = db.relationship('Task')

    def to_dict(self):
        return {
            'id': self.id,
            'subject': self.subject,
            'duration': self.duration,
            'planned_duration': self.planned_duration,
            'break_duration': self.break_duration,
            'type': self.type,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'is_completed': self.is_completed,
            'productivity': self.productivity,
            'notes': self.notes,
            'related_task': (
                {'id': self.related_task.id, 'title': self.related_task.title}
                if self.related_task else None
            ),
        }

    def __repr__(self):
        return f'<StudySession {self.subject} {self.duration}m>'
