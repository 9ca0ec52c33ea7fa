"""Конфигурация pytest и общие фикстуры для всех тестов

Этот файл содержит:
- Настройку тестовой среды
- Mock бота для уведомлений
- Фикстуры для БД и сервисов
- Автоматическую очистку после тестов
"""

import os
import sys
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Добавляем корневую папку в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

# ============================================================================
# НАСТРОЙКА ТЕСТОВОЙ СРЕДЫ
# ============================================================================

# Настройка переменных окружения ДО импорта config
os.environ["DATABASE_PATH"] = "./test_reservations.db"
os.environ["BOT_TOKEN"] = "1234567890:ABCdefGHIjklMNOpqrsTUVwxyz12345678"
os.environ["ADMIN_IDS"] = "12345,67890"

from config import DATABASE_PATH  # noqa: E402
from database.queries import Database  # noqa: E402
from services.booking_service import BookingService  # noqa: E402
from services.catalog_service import CatalogService  # noqa: E402
from services.notification_service import NotificationService  # noqa: E402
from utils.datetime_utils import weekday_index  # noqa: E402
from utils.helpers import today_local  # noqa: E402


# ============================================================================
# PYTEST КОНФИГУРАЦИЯ
# ============================================================================


def pytest_configure(config):
    """Регистрация пользовательских маркеров"""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: integration test")
    config.addinivalue_line("markers", "unit: unit test")


# ============================================================================
# БД
# ============================================================================


def _remove_test_db():
    for suffix in ("", "-journal", "-wal", "-shm"):
        path = DATABASE_PATH + suffix
        if os.path.exists(path):
            os.remove(path)


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_db_on_exit():
    """Свежая тестовая БД на сессию, удаляется после всех тестов"""
    _remove_test_db()
    yield
    try:
        _remove_test_db()
    except OSError as e:
        print(f"\n⚠️  Warning: Could not remove test database: {e}")


@pytest.fixture
async def init_database():
    """Инициализация тестовой БД, очистка таблиц после теста"""
    await Database.init_db()
    yield

    import aiosqlite

    async with aiosqlite.connect(DATABASE_PATH) as db:
        await db.execute("DELETE FROM reservations")
        await db.execute("DELETE FROM services")
        await db.commit()


# ============================================================================
# MOCK BOT
# ============================================================================


class MockBot:
    """Mock Telegram Bot для тестов"""

    def __init__(self, fail_for=()):
        self.sent_messages: List[Dict[str, Any]] = []
        self.fail_for = set(fail_for)

    async def send_message(self, chat_id: int, text: str, **kwargs):
        """Мок send_message"""
        if chat_id in self.fail_for:
            raise RuntimeError(f"chat {chat_id} unreachable")
        self.sent_messages.append({"chat_id": chat_id, "text": text, **kwargs})

    def clear_history(self):
        self.sent_messages.clear()


@pytest.fixture
def mock_bot():
    return MockBot()


@pytest.fixture
def notification_service(mock_bot):
    return NotificationService(mock_bot)


# ============================================================================
# SERVICE FIXTURES
# ============================================================================


@pytest.fixture
def booking_service(init_database, notification_service):
    """BookingService с mock-уведомлениями"""
    return BookingService(notification_service)


@pytest.fixture
def create_service(init_database):
    """Создание услуги в БД"""

    async def _create(
        name: str = "Haircut",
        duration: str = "45 min",
        price="1500",
        available_days=None,
        available_times=None,
    ):
        return await CatalogService.create_service({
            "name": name,
            "duration": duration,
            "price": price,
            "available_days": available_days if available_days is not None else [1, 2, 3, 4, 5, 6],
            "available_times": available_times if available_times is not None else ["10:00", "11:00", "12:00"],
        })

    return _create


# ============================================================================
# HELPER FIXTURES
# ============================================================================


def next_weekday(day: int, min_days_ahead: int = 1) -> str:
    """Ближайшая дата с нужным днем недели (0 = воскресенье)"""
    candidate = today_local() + timedelta(days=min_days_ahead)
    while weekday_index(candidate) != day:
        candidate += timedelta(days=1)
    return candidate.isoformat()


@pytest.fixture
def next_monday():
    """Ближайший понедельник после сегодняшнего дня"""
    return next_weekday(1)


@pytest.fixture
def following_monday():
    return next_weekday(1, min_days_ahead=8)


@pytest.fixture
def next_sunday():
    return next_weekday(0)


@pytest.fixture
def yesterday_date():
    return (today_local() - timedelta(days=1)).isoformat()


@pytest.fixture
def customer_data():
    """Тестовые данные клиента"""
    return {
        "name": "Ana Gomez",
        "whatsapp": "+54 9 11 5555-1234",
    }
