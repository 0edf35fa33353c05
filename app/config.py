from dotenv import load_dotenv
import os
from pathlib import Path

# Load environment variables from .env file
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# Database configuration
DB_HOST = os.getenv("MYSQL_HOST", "db")
DB_USER = os.getenv("MYSQL_USER", "user")
DB_PASSWORD = os.getenv("MYSQL_PASSWORD", "123456")
DB_NAME = os.getenv("MYSQL_DB", "tenant_ticketing")
DB_PORT = os.getenv("MYSQL_PORT", "3306")

# JWT configuration
SECRET_KEY = os.getenv("SECRET_KEY", "your_secret_key_here")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# Application configuration
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))

# Frontend configuration
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:3000")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", f"{CLIENT_URL},http://localhost:3001").split(",")
    if origin.strip()
]

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "")

# Email configuration
EMAIL_SERVER = os.getenv("EMAIL_SERVER", "")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_USER = os.getenv("EMAIL_USER", "")
EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", "no-reply@example.com")
EMAIL_FROM_NAME = os.getenv("EMAIL_FROM_NAME", "Tenant Ticketing System")
EMAIL_STARTTLS = os.getenv("EMAIL_STARTTLS", "true").lower() == "true"
EMAIL_SSL_TLS = os.getenv("EMAIL_SSL_TLS", "false").lower() == "true"
# Inbox that hears about new tickets nobody has been assigned to yet
NOTIFICATION_EMAIL = os.getenv("NOTIFICATION_EMAIL", "")

# SMS configuration (Twilio)
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER", "")
TWILIO_API_URL = os.getenv("TWILIO_API_URL", "https://api.twilio.com/2010-04-01")

# Group chat broadcast configuration
GROUP_CHAT_ID = os.getenv("GROUP_CHAT_ID", "")
GROUP_CHAT_NAME = os.getenv("GROUP_CHAT_NAME", "Maintenance Team")
GROUP_CHAT_API_URL = os.getenv("GROUP_CHAT_API_URL", "http://localhost:3001")
GROUP_CHAT_API_TOKEN = os.getenv("GROUP_CHAT_API_TOKEN", "")

NOTIFICATION_LOG_FILE = os.getenv(
    "NOTIFICATION_LOG_FILE", str(BASE_DIR / "logs" / "ticket-notifications.log")
)
NOTIFICATION_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "10"))

# First boot seeding
SEED_DEFAULT_ADMIN = os.getenv("SEED_DEFAULT_ADMIN", "true").lower() == "true"
DEFAULT_ADMIN_NAME = os.getenv("DEFAULT_ADMIN_NAME", "Super Admin")
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

# Database URL
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
