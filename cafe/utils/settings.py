# cafe/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cafe.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
MENU_SERVICE_URL = os.getenv("MENU_SERVICE_URL", "http://menu-service:8000")
MENU_CLIENT_TIMEOUT = int(os.getenv("MENU_CLIENT_TIMEOUT", 2))
TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.08"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
