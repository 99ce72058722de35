import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)

# Booking API Configuration
# In development the API usually runs next to the web app on port 3000
SCHEDFY_API_BASE_URL = os.getenv("SCHEDFY_API_BASE_URL", "http://localhost:3000")
SCHEDFY_API_TOKEN = os.getenv("SCHEDFY_API_TOKEN")
if not SCHEDFY_API_TOKEN:
    logger.warning("SCHEDFY_API_TOKEN not set; requests will be sent without Authorization header")

SCHEDFY_API_TIMEOUT = float(os.getenv("SCHEDFY_API_TIMEOUT", "30"))

# Per-booking mutation lock in BookingStore (off = last response wins)
SCHEDFY_SERIALIZE_MUTATIONS = os.getenv("SCHEDFY_SERIALIZE_MUTATIONS", "false").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
