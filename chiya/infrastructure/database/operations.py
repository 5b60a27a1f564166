"""
Database engine, session and schema management
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, create_engine, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from chiya.infrastructure.configuration.config import Settings, get_config
from chiya.infrastructure.database.models import Base, MenuItem, Shop
from chiya.infrastructure.logging.logging_config import PerformanceLogger
from chiya.infrastructure.utilities.constants import DatabaseSettings
from chiya.infrastructure.utilities.exceptions import DatabaseError

logger = logging.getLogger(__name__)

DEMO_SHOP_SLUG = "chiya-corner"

DEMO_MENU = (
    # name, description, price, category, discount, best seller, today's special
    ("Masala Tea", "Spiced milk tea", "40", "tea", None, True, False),
    ("Milk Tea", "Classic milk tea", "30", "tea", None, False, False),
    ("Black Tea", "Strong black tea", "20", "tea", None, False, False),
    ("Lemon Tea", "Black tea with lemon", "25", "tea", None, False, True),
    ("Samosa", "Crispy potato samosa", "30", "snacks", None, True, False),
    ("Pakoda", "Vegetable fritters", "60", "snacks", "10", False, False),
    ("Biscuits", "Two tea biscuits", "15", "extra", None, False, False),
)


class DatabaseManager:
    """Owns the engine and session factory for one database URL"""

    def __init__(self, config: Optional[Settings] = None, database_url: Optional[str] = None):
        self.config = config or get_config()
        self.database_url = database_url or self.config.database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.logger = logging.getLogger(__name__)

    def get_engine(self) -> Engine:
        """Get database engine with proper configuration"""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create database engine with environment-specific settings"""
        database_url = self.database_url

        if database_url.startswith("sqlite"):
            self._ensure_sqlite_directory(database_url)
            return create_engine(
                database_url,
                poolclass=StaticPool,
                connect_args={
                    "check_same_thread": False,
                    "timeout": DatabaseSettings.CONNECTION_TIMEOUT_SECONDS,
                },
            )

        if self.config.environment == "production":
            pool_size = DatabaseSettings.PRODUCTION_POOL_SIZE
            max_overflow = DatabaseSettings.PRODUCTION_MAX_OVERFLOW
        else:
            pool_size = DatabaseSettings.DEVELOPMENT_POOL_SIZE
            max_overflow = DatabaseSettings.DEVELOPMENT_MAX_OVERFLOW

        return create_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=DatabaseSettings.POOL_RECYCLE_SECONDS,
            pool_pre_ping=True,
        )

    @staticmethod
    def _ensure_sqlite_directory(database_url: str) -> None:
        database = make_url(database_url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    def get_session_factory(self) -> sessionmaker:
        """Get session factory"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.get_engine(), expire_on_commit=False
            )
        return self._session_factory

    def get_session(self) -> Session:
        """Get database session"""
        return self.get_session_factory()()

    def create_tables(self) -> None:
        """Create all database tables"""
        try:
            with PerformanceLogger("create_tables", self.logger):
                Base.metadata.create_all(self.get_engine())
        except SQLAlchemyError as e:
            self.logger.error("Failed to create database tables: %s", e, exc_info=True)
            raise DatabaseError(
                f"Failed to create database tables: {e}", "create_tables"
            ) from e

    def drop_tables(self) -> None:
        """Drop all database tables"""
        try:
            Base.metadata.drop_all(self.get_engine())
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to drop database tables: {e}", "drop_tables"
            ) from e

    def close(self) -> None:
        """Close database connections"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
        self._session_factory = None
        self.logger.info("Database connections closed")


_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get global database manager instance"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def get_session() -> Session:
    """Get database session from the global manager"""
    return get_db_manager().get_session()


def init_db(db_manager: Optional[DatabaseManager] = None, seed: bool = False) -> None:
    """Create tables and optionally seed the demo shop"""
    db_manager = db_manager or get_db_manager()
    db_manager.create_tables()
    logger.info("Database tables created successfully")
    if seed:
        seed_demo_shop(db_manager)


def seed_demo_shop(db_manager: DatabaseManager, table_count: int = 10) -> Optional[str]:
    """Insert the demo shop and its menu once; returns the shop id"""
    session = db_manager.get_session()
    try:
        existing = session.scalar(select(Shop).where(Shop.slug == DEMO_SHOP_SLUG))
        if existing is not None:
            logger.info("Demo shop already present: %s", existing.id)
            return existing.id

        shop = Shop(
            slug=DEMO_SHOP_SLUG,
            name="Chiya Corner",
            description="Tea and snacks",
            table_count=table_count,
        )
        session.add(shop)
        session.flush()

        for name, description, price, category, discount, best, special in DEMO_MENU:
            session.add(
                MenuItem(
                    shop_id=shop.id,
                    name=name,
                    description=description,
                    price=Decimal(price),
                    category=category,
                    discount=Decimal(discount) if discount else None,
                    is_best_seller=best,
                    is_todays_special=special,
                )
            )
        session.commit()
        logger.info("Seeded demo shop %s with %d menu items", shop.id, len(DEMO_MENU))
        return shop.id
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Failed to seed demo shop: %s", e)
        raise DatabaseError(f"Failed to seed demo shop: {e}", "seed") from e
    finally:
        session.close()
