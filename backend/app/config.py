import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the app directory or parent directory
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _split_origins(value):
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get('JWT_ACCESS_TOKEN_EXPIRES', '24')))

    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/expense_tracker')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'expense_tracker')

    # Allow the browser client to talk to the API
    CORS_ORIGINS = _split_origins(
        os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080')
    )

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    BCRYPT_LOG_ROUNDS = 12


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    MONGO_URI = 'mongodb://localhost:27017/expense_tracker_test'
    MONGO_DB_NAME = 'expense_tracker_test'
    LOG_LEVEL = 'WARNING'
    # Cheap hashing keeps the auth tests fast
    BCRYPT_LOG_ROUNDS = 4
