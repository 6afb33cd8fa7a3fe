from datetime import date, datetime
from extensions import db

MOOD_VALUES = {
    'very-sad': 1,
    'sad': 2,
    'neutral': 3,
    'happy': 4,
    'very-happy': 5,
}

MOOD_ACTIVITIES = ('exercise', 'socializing', 'studying', 'work', 'relaxation', 'hobbies')

MOTIVATIONAL_MESSAGES = {
    'very-sad': "It's okay to have tough days. Remember, you're not alone and tomorrow is a new opportunity.",
    'sad': "Challenging times help us grow stronger. Take care of yourself today.",
    'neutral': "Every day is a fresh start. What's one small thing that could make today better?",
    'happy': "Great to see you're doing well! Keep up the positive momentum.",
    'very-happy': "Your positive energy is wonderful! Share that joy with others around you.",
}

class MoodEntry(db.Model):
    __tablename__ = 'mood_entries'
    # One mood entry per user per day
    __table_args__ = (
        db.UniqueConstraint('user_id', 'entry_date', name='uq_mood_user_day'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    entry_date = db.Column(db.Date, default=date.today, nullable=False, index=True)
    logged_at = db.Column(db.DateTime, default=datetime.utcnow)

    mood = db.Column(db.String(20), nullable=False)
    mood_value = db.Column(db.Integer, nullable=False)
    note = db.Column(db.String(200))
    stress_level = db.Column(db.Integer)   # 1-10
    sleep_hours = db.Column(db.Float)      # 0-24
    activities = db.Column(db.JSON, default=list)

    def to_dict(self):
        return {
            'id': self.id,
            'date': self.entry_date.isoformat() if self.entry_date else None,
            'logged_at': self.logged_at.isoformat() if self.logged_at else None,
            'mood': self.mood,
            'mood_value': self.mood_value,
            'note': self.note,
            'stress_level': self.stress_level,
            'sleep_hours': self.sleep_hours,
            'activities': self.activities or [],
        }

    def __repr__(self):
        return f'<MoodEntry {self.entry_date} {self.mood}>'
