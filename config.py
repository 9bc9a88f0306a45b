import os
from dotenv import load_dotenv
load_dotenv()

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///hiregate.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Hiring Team")
    LLM_GATEWAY_URL = os.getenv("LLM_GATEWAY_URL", "https://api.openai.com/v1/chat/completions")
    LLM_GATEWAY_API_KEY = os.getenv("LLM_GATEWAY_API_KEY")
    LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
    # JSON clients post without a CSRF token
    WTF_CSRF_ENABLED = os.getenv("WTF_CSRF_ENABLED", "0") == "1"


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REDIS_URL = None
    SENDGRID_API_KEY = "test-key"
    LLM_GATEWAY_API_KEY = None
    WTF_CSRF_ENABLED = False
