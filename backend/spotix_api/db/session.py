from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import importlib.util
from spotix_api.core.config import settings

SQLALCHEMY_DATABASE_URL = settings.database_url
if not SQLALCHEMY_DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable must be set")

# A plain 'postgresql://' (or legacy 'postgres://') URL makes SQLAlchemy load psycopg2.
# Only psycopg v3 is a dependency, so inject its driver when psycopg2 is absent.
try:
    psycopg2_present = importlib.util.find_spec("psycopg2") is not None  # type: ignore
except ValueError:  # pragma: no cover
    psycopg2_present = False

if not psycopg2_present and SQLALCHEMY_DATABASE_URL.startswith(("postgres://", "postgresql://")) and "+psycopg" not in SQLALCHEMY_DATABASE_URL:
    if SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
        SQLALCHEMY_DATABASE_URL = "postgresql://" + SQLALCHEMY_DATABASE_URL[len("postgres://"):]
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)

# SQLite (local runs, tests): the session is opened in a worker thread and used on the event loop
connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
