# Import all models to ensure they are registered with SQLAlchemy
from .user import User
from .journal import JournalEntry
from .mood import MoodEntry
from .task import Task
from .appointment import Appointment
from .study_session import StudySession
from .resource import Resource

# Make models available at package level
__all__ = ['User', 'JournalEntry', 'MoodEntry', 'Task', 'Appointment', 'StudySession', 'Resource']
