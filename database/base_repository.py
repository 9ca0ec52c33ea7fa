"""Базовый репозиторий"""

import logging
from typing import Any, Optional, Sequence

import aiosqlite

import config
from utils.exceptions import StorageUnavailable


class BaseRepository:
    """Общие методы доступа к SQLite"""

    @staticmethod
    def _db_path() -> str:
        return config.DATABASE_PATH

    @staticmethod
    def _connect() -> aiosqlite.Connection:
        """Новое соединение с БД"""
        return aiosqlite.connect(BaseRepository._db_path())

    @staticmethod
    async def _execute_query(
        query: str,
        params: Sequence[Any] = (),
        fetch_one: bool = False,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Optional[Any]:
        """Выполнить запрос в отдельном соединении

        Returns:
            Строку, список строк или lastrowid (при commit)
        """
        try:
            async with BaseRepository._connect() as db:
                db.row_factory = aiosqlite.Row
                async with db.execute(query, params) as cursor:
                    if fetch_one:
                        return await cursor.fetchone()
                    if fetch_all:
                        return await cursor.fetchall()
                    if commit:
                        await db.commit()
                        return cursor.lastrowid
                return None
        except aiosqlite.IntegrityError:
            raise
        except aiosqlite.Error as e:
            logging.error(f"Database error in query: {e}")
            raise StorageUnavailable() from e

    @staticmethod
    async def _count(table: str, where: str = "", params: Sequence[Any] = ()) -> int:
        """Количество строк в таблице"""
        query = f"SELECT COUNT(*) FROM {table}"
        if where:
            query += f" WHERE {where}"
        result = await BaseRepository._execute_query(query, params, fetch_one=True)
        return result[0] if result else 0

    @staticmethod
    async def _exists(table: str, where: str, params: Sequence[Any] = ()) -> bool:
        """Есть ли строка, удовлетворяющая условию"""
        return await BaseRepository._count(table, where, params) > 0
