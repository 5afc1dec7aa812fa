from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from organizer.core.config import settings

connect_args = {}
engine_options = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # Sessions are handed across the request threadpool
    connect_args["check_same_thread"] = False
else:
    engine_options.update(pool_size=5, max_overflow=10)

engine = create_engine(
    settings.DATABASE_URL,
    future=True,
    pool_pre_ping=True,
    connect_args=connect_args,
    **engine_options,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
