from datetime import datetime
from extensions import db

JOURNAL_MOODS = ('very-sad', 'sad', 'neutral', 'happy', 'very-happy')
TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000

class JournalEntry(db.Model):
    __tablename__ = 'journal_entries'
    __table_args__ = (
        db.Index('ix_journal_user_created', 'user_id', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Sentiment of the current content, written only by the journal service
    sentiment_score = db.Column(db.Float, default=0.0)
    sentiment_label = db.Column(db.String(20), default='neutral')
    sentiment_confidence = db.Column(db.Integer, default=0)
    emotions = db.Column(db.JSON, default=list)

    tags = db.Column(db.JSON, default=list)
    mood = db.Column(db.String(20))
    is_private = db.Column(db.Boolean, default=True)
    is_pinned = db.Column(db.Boolean, default=False)

    # Foreign Keys
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    def __init__(self, title, content, user_id, tags=None, mood=None, is_private=True, is_pinned=False):
        self.title = title
        self.content = content
        self.user_id = user_id
        self.tags = tags or []
        self.mood = mood
        self.is_private = is_private
        self.is_pinned = is_pinned

    @property
    def sentiment(self):
        return {
            'score': self.sentiment_score,
            'label': self.sentiment_label,
            'confidence': self.sentiment_confidence,
        }

    def apply_sentiment(self, sentiment):
        self.sentiment_score = sentiment['score']
        self.sentiment_label = sentiment['label']
        self.sentiment_confidence = sentiment['confidence']
        self.emotions = list(sentiment.get('emotions') or [])

    @classmethod
    def find_by_user(cls, user_id):
        """All of a user's entries, pinned first, newest first."""
        return cls.query.filter_by(user_id=user_id)\
            .order_by(cls.is_pinned.desc(), cls.created_at.desc(), cls.id.desc())\
            .all()

    @classmethod
    def find_by_id(cls, entry_id, user_id):
        return cls.query.filter_by(id=entry_id, user_id=user_id).first()

    @classmethod
    def recent_window(cls, user_id, limit=30):
        """The most recent entries, returned oldest first."""
        recent = cls.query.filter_by(user_id=user_id)\
            .order_by(cls.created_at.desc(), cls.id.desc())\
            .limit(limit)\
            .all()
        return list(reversed(recent))

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'content': self.content,
            'sentiment': self.sentiment,
            'emotions': self.emotions or [],
            'tags': self.tags or [],
            'mood': self.mood,
            'is_private': self.is_private,
            'is_pinned': self.is_pinned,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<JournalEntry {self.title}>'
