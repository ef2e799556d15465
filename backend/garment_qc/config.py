import os
# Robust .env loading: handle different encodings (utf-8, utf-8-sig, utf-16)
from dotenv import load_dotenv, find_dotenv

# Attempt to load a .env file even if it was saved with a BOM or UTF-16
def _safe_load_dotenv():
    """Load a .env file trying multiple encodings so that a file saved with
    Windows Notepad (often UTF-16-LE with BOM) does not crash the app.
    """

    dotenv_path = find_dotenv(usecwd=True)
    if not dotenv_path:
        return

    for enc in ("utf-8", "utf-8-sig", "utf-16", "latin-1"):
        try:
            load_dotenv(dotenv_path, encoding=enc, override=False)
            return  # success
        except UnicodeDecodeError:
            continue

    raise UnicodeDecodeError("dotenv", b"", 0, 1, "unable to decode .env file, save it as UTF-8")


# Safely load environment variables on import
try:
    _safe_load_dotenv()
except Exception as e:
    print(f"Warning: Could not load .env file: {e}")
    print("Using default configuration values")


UNDERSIZED_LOT_POLICIES = ("reject", "clamp")


class Config:
    """Base configuration class"""

    # Flask Configuration
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    DEBUG = os.environ.get('FLASK_DEBUG', 'True').lower() == 'true'

    # CORS Configuration
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://localhost:3000').split(',')

    # Logging
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')

    # Quality engine
    # What to do with lots smaller than the sampling table's first row:
    # "reject" answers 400, "clamp" evaluates them against the first row.
    UNDERSIZED_LOT_POLICY = os.environ.get('UNDERSIZED_LOT_POLICY', 'reject').lower()

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True

class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    UNDERSIZED_LOT_POLICY = 'reject'

# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
