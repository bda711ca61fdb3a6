"""
Database engine and session management
"""

from sqlmodel import SQLModel, Session, create_engine
import structlog

from resto_console.core.config import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()


def build_engine(url: str):
    """Create the engine shared by every request of the process"""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        url,
        echo=settings.DEBUG,
        pool_pre_ping=not url.startswith("sqlite"),
        connect_args=connect_args,
    )


engine = build_engine(settings.DATABASE_URL)


def init_db(bind=None):
    """Create all tables"""
    # Registers every table on the metadata
    import resto_console.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables created")


def get_session():
    """Dependency to get database session"""
    with Session(engine) as session:
        yield session
