from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from warehouse.core.config import settings


class Base(DeclarativeBase):
    pass


is_sqlite = settings.database_url.startswith("sqlite")

if is_sqlite:
    connect_args = {"check_same_thread": False}
elif settings.database_sslmode:
    connect_args = {"sslmode": settings.database_sslmode}
else:
    connect_args = {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.sql_echo,
    pool_pre_ping=not is_sqlite,
    pool_recycle=1800 if not is_sqlite else -1,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
