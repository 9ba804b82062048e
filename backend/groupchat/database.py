"""SQLAlchemy engine and session factory for the SQL snapshot backend."""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from groupchat.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
