# barberzon/config.py

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barberzon.db")

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days

# Paystack
PAYSTACK_SECRET_KEY = os.getenv("PAYSTACK_SECRET_KEY", "")
PAYSTACK_BASE_URL = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co")

# Used for the Paystack callback_url
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Client default
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000/api")

CURRENCY = "NGN"

# Pricing
PLATFORM_FEE_RATE = 0.08
CANCELLATION_FEE_RATE = 0.20
CANCELLATION_FEE_WINDOW_HOURS = 2

# Each booked service occupies one slot
SERVICE_SLOT_MINUTES = 30

DEFAULT_TOTAL_SEATS = 4

SEARCH_DEBOUNCE_SECONDS = 0.3
DEFAULT_SEARCH_RADIUS_KM = 20

# Lagos
DEFAULT_LOCATION = (6.5244, 3.3792)
