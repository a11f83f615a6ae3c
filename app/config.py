import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Database
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./data/rooms_booking.db")
SEED_REFERENCE_DATA = _env_flag("SEED_REFERENCE_DATA", True)

# JWT configuration
SECRET_KEY = os.environ.get("SECRET_KEY", "change-me-campusroomz-secret")
ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 30))

# Booking rules
MAX_ATTENDEES = int(os.environ.get("MAX_ATTENDEES", 100))
WORKING_HOURS_STRICT = _env_flag("WORKING_HOURS_STRICT", False)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
