from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./triagex.db")
SQL_ECHO = (os.getenv("SQL_ECHO", "false") or "false").lower() in {"1", "true", "yes", "on"}

_engine_kwargs = {"echo": SQL_ECHO, "future": True, "pool_pre_ping": True}
if DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
elif DATABASE_URL.startswith("postgresql") and "sslmode=" not in DATABASE_URL.lower() and "localhost" not in DATABASE_URL:
    # Hosted Postgres instances require SSL
    _engine_kwargs["connect_args"] = {"sslmode": "require"}

engine = create_engine(DATABASE_URL, **_engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
