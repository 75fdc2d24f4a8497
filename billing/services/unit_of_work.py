# billing/services/unit_of_work.py
from contextlib import contextmanager

from billing.models import db


@contextmanager
def unit_of_work(session=None):
    """
    Run a block of store operations as one all-or-nothing transaction.

    Commits when the block exits normally; rolls back and re-raises on any
    exception, so no partial write is ever visible.

    Args:
        session: SQLAlchemy session (default: the request-scoped db.session)
    """
    session = session if session is not None else db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
