import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    # Provide a safe development fallback to avoid 500s when SECRET_KEY is missing.
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-me'

    # Managed backend (auth + tables)
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY')
    # Where confirmation e-mails send new volunteers back to
    EMAIL_REDIRECT_URL = os.getenv('EMAIL_REDIRECT_URL')

    SITE_NAME = os.getenv('SITE_NAME', 'Al-Khidmat')
    SITE_TAGLINE = os.getenv('SITE_TAGLINE', 'Volunteer Management Portal')
    DEFAULT_ACTIVITY_CAPACITY = int(os.getenv('DEFAULT_ACTIVITY_CAPACITY', '10'))

    SESSION_COOKIE_SECURE = _flag('SESSION_COOKIE_SECURE', 'true')
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    REMEMBER_COOKIE_SECURE = True
    REMEMBER_COOKIE_HTTPONLY = True
    WTF_CSRF_TIME_LIMIT = None
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(1024 * 1024)))

    RATELIMIT_ENABLED = _flag('RATELIMIT_ENABLED', 'true')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
