from datetime import datetime
from extensions import db

TASK_PRIORITIES = ('low', 'medium', 'high', 'urgent')

class Task(db.Model):
    __tablename__ = 'tasks'
    __table_args__ = (
        db.Index('ix_task_user_due', 'user_id', 'due_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.String(1000))
    subject = db.Column(db.String(100), nullable=False)
    priority = db.Column(db.String(10), default='medium')
    due_date = db.Column(db.DateTime, nullable=False)
    is_completed = db.Column(db.Boolean, default=False)
    completed_at = db.Column(db.DateTime)
    estimated_hours = db.Column(db.Float, default=1)
    actual_hours = db.Column(db.Float, default=0)
    tags = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Foreign Keys
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    def set_completed(self, completed):
        """Track when a task moves into or out of the completed state."""
        if completed and not self.is_completed:
            self.completed_at = datetime.utcnow()
        elif not completed and self.is_completed:
            self.completed_at = None
        self.is_completed = completed

    @property
    def is_overdue(self):
        return not self.is_completed and self.due_date < datetime.utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'subject': self.subject,
            'priority': self.priority,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'is_completed': self.is_completed,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'estimated_hours': self.estimated_hours,
            'actual_hours': self.actual_hours,
            'tags': self.tags or [],
            'is_overdue': self.is_overdue,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Task {self.title}>'
