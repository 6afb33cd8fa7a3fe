from datetime import datetime
from extensions import db

RESOURCE_TYPES = ('document', 'link', 'note', 'video', 'audio')

class Resource(db.Model):
    __tablename__ = 'resources'
    __table_args__ = (
        db.Index('ix_resource_user_subject', 'user_id', 'subject'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    content = db.Column(db.Text)  # Note text or link URL
    subject = db.Column(db.String(100), nullable=False)
    folder = db.Column(db.String(100), default='General')
    tags = db.Column(db.JSON, default=list)
    is_public = db.Column(db.Boolean, default=False)
    description = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type,
            'content': self.content,
            'subject': self.subject,
            'folder': self.folder,
            'tags': self.tags or [],
            'is_public': self.is_public,
            'description': self.description,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Resource {self.title}>'
