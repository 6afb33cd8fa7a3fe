import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv("secrets.env")


class Config:
    # Secret key for session management
    SECRET_KEY = os.environ.get("SECRET_KEY") or "studywell-secret-key-123"

    # Database configuration
    basedir = os.path.abspath(os.path.dirname(__file__))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL"
    ) or "sqlite:///" + os.path.join(basedir, "studywell.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session configuration
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    # JSON API only, forms are fed from request bodies
    WTF_CSRF_ENABLED = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Remote sentiment model (Hugging Face inference API)
    HUGGINGFACE_MODEL = os.environ.get(
        "HUGGINGFACE_MODEL", "nlptown/bert-base-multilingual-uncased-sentiment"
    )
    HUGGINGFACE_API_URL = os.environ.get("HUGGINGFACE_API_URL") or (
        "https://api-inference.huggingface.co/models/" + HUGGINGFACE_MODEL
    )
    HUGGINGFACE_API_TOKEN = os.environ.get("HUGGINGFACE_API_TOKEN")
    SENTIMENT_API_TIMEOUT = float(os.environ.get("SENTIMENT_API_TIMEOUT", 8))

    @staticmethod
    def init_app(app):
        pass


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    HUGGINGFACE_API_TOKEN = None
    LOG_LEVEL = "WARNING"
