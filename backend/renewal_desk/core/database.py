from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from renewal_desk.core.config import settings

db_url = settings.DATABASE_URL

# SQLite connections are handed across the threadpool FastAPI runs sync routes in
connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

# Create engine
engine = create_engine(
    db_url,
    connect_args=connect_args,
    pool_pre_ping=True,
    echo=False,
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def init_database(bind=None):
    """Create every table that does not exist yet."""
    import renewal_desk.models  # noqa: F401  (registers the tables on Base)

    Base.metadata.create_all(bind=bind or engine)


# Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
