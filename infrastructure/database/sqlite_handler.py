import logging
import shutil
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from flask import Flask

from infrastructure.database.ops.care_logs import CareLogOperations
from infrastructure.database.ops.notifications import NotificationOperations
from infrastructure.database.ops.plants import PlantOperations
from infrastructure.database.ops.reminders import ReminderOperations

logger = logging.getLogger(__name__)


class SQLiteDatabaseHandler(
    PlantOperations,
    ReminderOperations,
    CareLogOperations,
    NotificationOperations,
):
    """Thread-safe SQLite handler decoupled from Flask globals."""

    def __init__(self, database_path: str) -> None:
        self._database_path = database_path
        self._local = threading.local()
        self._memory = database_path == ":memory:"
        self._shared_connection: Optional[sqlite3.Connection] = None

        if not self._memory:
            # Ensure the directory for the database file exists
            db_path = Path(database_path)
            if not db_path.parent.exists():
                db_path.parent.mkdir(parents=True, exist_ok=True)
                logger.info("Created database directory: %s", db_path.parent)

    @property
    def database_path(self) -> str:
        return self._database_path

    # --- Lifecycle ------------------------------------------------------------
    def init_app(self, app: Flask | None = None) -> None:
        if app is not None:
            app.teardown_appcontext(self.close_db)
        self.create_tables()

    def get_db(self) -> sqlite3.Connection:
        if self._memory:
            # Every in-memory connection is a separate database; share one.
            if self._shared_connection is None:
                self._shared_connection = self._open_connection()
            return self._shared_connection

        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is None:
            try:
                connection = self._open_connection()
            except sqlite3.DatabaseError as exc:
                if self._is_corruption_error(exc):
                    logger.error("Database appears corrupt (%s). Recreating a fresh database.", exc)
                    self._quarantine_corrupt_db()
                    connection = self._open_connection()
                else:
                    raise
            self._local.connection = connection
        return connection

    def _open_connection(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._database_path, check_same_thread=False)
        try:
            connection.row_factory = sqlite3.Row
            self._configure_connection(connection)
            return connection
        except Exception:
            connection.close()
            raise

    def _is_corruption_error(self, exc: sqlite3.Error) -> bool:
        message = str(exc).lower()
        return (
            "file is not a database" in message
            or "file is encrypted or is not a database" in message
            or "malformed" in message
        )

    def _quarantine_corrupt_db(self) -> Optional[Path]:
        db_path = Path(self._database_path)
        if not db_path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        quarantine_dir = db_path.parent / "corrupt"
        quarantine_dir.mkdir(parents=True, exist_ok=True)

        suffix = db_path.suffix or ".db"
        quarantined = quarantine_dir / f"{db_path.stem}_corrupt_{timestamp}{suffix}"
        try:
            shutil.move(str(db_path), str(quarantined))
            for sidecar_suffix in ("-wal", "-shm"):
                sidecar = Path(f"{db_path}{sidecar_suffix}")
                if sidecar.exists():
                    shutil.move(str(sidecar), str(quarantine_dir / f"{sidecar.name}_{timestamp}"))
            logger.warning("Quarantined corrupt database to %s", quarantined)
            return quarantined
        except OSError as exc:
            logger.error("Failed to quarantine corrupt database %s: %s", db_path, exc)
            return None

    def _configure_connection(self, connection: sqlite3.Connection) -> None:
        """Configure SQLite connection.

        - WAL mode: concurrent readers alongside a single writer
        - NORMAL synchronous: safe with WAL
        - foreign keys: plant and parent-reminder deletes cascade
        """
        if not self._memory:
            connection.execute("PRAGMA journal_mode=WAL")
            connection.execute("PRAGMA synchronous=NORMAL")
        connection.execute("PRAGMA foreign_keys=ON")
        connection.execute("PRAGMA temp_store=MEMORY")
        connection.commit()

    def close_db(self, _e: Optional[BaseException] = None) -> None:
        if self._memory:
            return
        connection: Optional[sqlite3.Connection] = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            delattr(self._local, "connection")

    def close(self) -> None:
        """Close every connection owned by this handler."""
        self.close_db()
        if self._shared_connection is not None:
            self._shared_connection.close()
            self._shared_connection = None

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.get_db()
        try:
            yield conn
        finally:
            conn.commit()

    # --- Schema ----------------------------------------------------------------
    def create_tables(self) -> None:
        """Creates the necessary tables in the database if they do not already exist."""
        with self.connection() as db:
            # Plants Table
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Plants (
                    plant_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    name TEXT NOT NULL,
                    plant_type TEXT,
                    location TEXT DEFAULT 'indoor',
                    watering_every_days INTEGER,
                    fertilizer_every_weeks INTEGER,
                    last_watered_at TEXT,
                    last_fertilized_at TEXT,
                    latitude REAL,
                    longitude REAL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_plants_user ON Plants(user_id)")

            # Reminders: full document as JSON plus the columns we query on
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Reminders (
                    reminder_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    plant_id INTEGER,
                    parent_id INTEGER,
                    care_type TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    due_date TEXT NOT NULL,
                    is_recurring INTEGER NOT NULL DEFAULT 1,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    notified_at TEXT,
                    document TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY (plant_id) REFERENCES Plants(plant_id) ON DELETE CASCADE,
                    FOREIGN KEY (parent_id) REFERENCES Reminders(reminder_id) ON DELETE CASCADE
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_reminders_user_due ON Reminders(user_id, due_date)")
            db.execute("CREATE INDEX IF NOT EXISTS idx_reminders_plant ON Reminders(plant_id, care_type)")
            db.execute("CREATE INDEX IF NOT EXISTS idx_reminders_status ON Reminders(status)")
            db.execute("CREATE INDEX IF NOT EXISTS idx_reminders_parent ON Reminders(parent_id)")

            # Care Logs Table
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS CareLogs (
                    care_log_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    plant_id INTEGER NOT NULL,
                    care_type TEXT NOT NULL,
                    notes TEXT,
                    care_data TEXT,
                    reminder_id INTEGER,
                    performed_at TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (plant_id) REFERENCES Plants(plant_id) ON DELETE CASCADE,
                    FOREIGN KEY (reminder_id) REFERENCES Reminders(reminder_id) ON DELETE SET NULL
                )
                """
            )
            db.execute("CREATE INDEX IF NOT EXISTS idx_care_logs_plant ON CareLogs(plant_id, performed_at)")

            # Notifications Table
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS Notifications (
                    notification_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    notification_type TEXT NOT NULL,
                    title TEXT NOT NULL,
                    message TEXT NOT NULL,
                    data TEXT,
                    is_read INTEGER NOT NULL DEFAULT 0,
                    read_at TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
            db.execute(
                "CREATE INDEX IF NOT EXISTS idx_notifications_user ON Notifications(user_id, created_at)"
            )
        logger.info("Database tables ensured at %s", self._database_path)
