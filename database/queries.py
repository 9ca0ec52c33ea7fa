"""Инициализация базы данных"""

import logging

import config
from database.migrations.migration_manager import MigrationManager
from database.migrations.versions import ALL_MIGRATIONS


class Database:
    """Класс для работы с базой данных"""

    @staticmethod
    def migration_manager() -> MigrationManager:
        return MigrationManager(config.DATABASE_PATH, ALL_MIGRATIONS)

    @staticmethod
    async def init_db():
        """Инициализация БД: применить все миграции"""
        manager = Database.migration_manager()
        await manager.migrate()
        logging.info(
            f"Database initialized at version {await manager.get_current_version()}"
        )
