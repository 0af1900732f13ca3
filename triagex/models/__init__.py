# triagex/models/__init__.py
from triagex.db.session import Base, engine

# Import model modules so SQLAlchemy registers all mappers.
# Modules, not classes, to avoid circular imports.
from . import user  # noqa: F401
from . import assessment  # noqa: F401


def init_db() -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(bind=engine)
