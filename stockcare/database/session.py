from contextlib import contextmanager
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from stockcare.database.engine import engine


def make_session_factory(bind: Engine) -> sessionmaker:
    # Postings return ORM rows after commit, so attributes must stay loaded.
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


SessionLocal = make_session_factory(engine)


@contextmanager
def session_scope(factory: Optional[sessionmaker] = None):
    """Session for scripts and jobs outside a request; rolled back on error."""
    db: Session = (factory or SessionLocal)()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db():
    with session_scope() as db:
        yield db
