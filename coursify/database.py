import sqlite3
from threading import Lock

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from coursify.core import config

config.validate_runtime_config()

engine = create_engine(config.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schema_checked = False


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_schema(bind: Engine | None = None) -> None:
    """Bring tables created by older releases up to the current columns."""
    global _schema_checked

    if _schema_checked:
        return

    bind = bind or engine

    with _schema_lock:
        if _schema_checked:
            return

        inspector = inspect(bind)
        table_names = set(inspector.get_table_names())
        migration_steps = {
            'users': [
                ('status', "ALTER TABLE users ADD COLUMN status VARCHAR(16) NOT NULL DEFAULT 'pending'"),
            ],
            'courses': [
                ('cover_image_url', 'ALTER TABLE courses ADD COLUMN cover_image_url VARCHAR'),
            ],
            'learning_materials': [
                ('file_url', 'ALTER TABLE learning_materials ADD COLUMN file_url VARCHAR'),
            ],
        }

        with bind.begin() as connection:
            for table_name, steps in migration_steps.items():
                if table_name not in table_names:
                    continue
                existing_columns = {column['name'] for column in inspector.get_columns(table_name)}
                for column_name, statement in steps:
                    if column_name not in existing_columns:
                        connection.execute(text(statement))

            if 'users' in table_names:
                connection.execute(text('CREATE INDEX IF NOT EXISTS idx_users_status ON users(status)'))
            if 'courses' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_courses_instructor ON courses(instructor_id, created_at)')
                )
            if 'enrollments' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_enrollments_student ON enrollments(student_id)')
                )

        _schema_checked = True
