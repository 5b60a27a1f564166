"""
Context manager for handling database sessions and exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chiya.infrastructure.database.operations import DatabaseManager, get_db_manager

logger = logging.getLogger(__name__)


@contextmanager
def managed_session(
    db_manager: Optional[DatabaseManager] = None,
) -> Generator[Session, None, None]:
    """
    Yield a session that commits on success and rolls back on error.

    Raises:
        SQLAlchemyError: If a database-related error occurs.
    """
    session = (db_manager or get_db_manager()).get_session()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logger.error("💥 DATABASE ERROR: %s", e)
        session.rollback()
        raise
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
