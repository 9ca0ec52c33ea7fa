"""Начальная схема базы данных"""

from database.migrations.migration_manager import Migration


class InitialSchema(Migration):
    version = 1
    description = "Services and reservations tables"

    async def upgrade(self, db):
        # Доступность хранится JSON-массивами
        await db.execute(
            """CREATE TABLE IF NOT EXISTS services
            (id INTEGER PRIMARY KEY AUTOINCREMENT,
             name TEXT NOT NULL,
             duration TEXT NOT NULL,
             price REAL NOT NULL DEFAULT 0,
             available_days TEXT NOT NULL DEFAULT '[]',
             available_times TEXT NOT NULL DEFAULT '[]',
             created_at TEXT NOT NULL,
             UNIQUE(name))"""
        )

        # service_id без FK: при удалении услуги очищается вручную
        await db.execute(
            """CREATE TABLE IF NOT EXISTS reservations
            (id INTEGER PRIMARY KEY AUTOINCREMENT,
             reservation_code TEXT NOT NULL COLLATE NOCASE,  -- код ищется без учета регистра
             name TEXT NOT NULL,
             whatsapp TEXT NOT NULL,
             service_id INTEGER,
             service TEXT NOT NULL,
             date TEXT NOT NULL,
             time TEXT NOT NULL,
             status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'approved', 'rejected', 'completed')),
             created_at TEXT NOT NULL,
             UNIQUE(reservation_code))"""
        )

        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_reservations_date ON reservations(date, time)"
        )
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_reservations_service ON reservations(service_id)"
        )
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_reservations_status ON reservations(status, date)"
        )

    async def downgrade(self, db):
        await db.execute("DROP TABLE IF EXISTS reservations")
        await db.execute("DROP TABLE IF EXISTS services")
