"""Конфигурация приложения"""

import os
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# Telegram (уведомления админам, опционально)
BOT_TOKEN = os.getenv("BOT_TOKEN")

# Админы (поддержка нескольких)
ADMIN_IDS_STR = os.getenv("ADMIN_IDS", "")
ADMIN_IDS = [int(id.strip()) for id in ADMIN_IDS_STR.split(",") if id.strip()]

# База данных
DATABASE_PATH = os.getenv("DATABASE_PATH", "reservations.db")

# Временная зона
TIMEZONE = ZoneInfo(os.getenv("TIMEZONE", "America/Argentina/Buenos_Aires"))

# Настройки услуги по умолчанию
DEFAULT_AVAILABLE_DAYS = [1, 2, 3, 4, 5, 6]  # Пн-Сб, 0 = воскресенье
DEFAULT_TIME_START = 10
DEFAULT_TIME_END = 20  # включительно

# Коды бронирования
RESERVATION_CODE_PREFIX = "RES"
RESERVATION_CODE_SUFFIX_LENGTH = 4
RESERVATION_CODE_ATTEMPTS = 3

# Форматы
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
