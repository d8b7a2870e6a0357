from contextlib import contextmanager
from typing import Any, Generator, List, Optional, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from ..config.loader import StoreConfig, load_store_config
from ..utils.logging import configure_logging, get_logger
from .migrate import ensure_schema
from .schema import StockQuery
from .stock_query_repo import fetch_history

logger = get_logger(__name__)


def build_url(config: StoreConfig) -> URL:
    """Combine the store URL with the access key (the key is the URL password)."""
    url = make_url(config.url)
    if url.get_backend_name() == "sqlite":
        # File and memory databases have no credentials
        return url
    return url.set(password=config.access_key)


def get_engine(config: StoreConfig) -> Engine:
    url = build_url(config)
    engine = create_engine(url, echo=config.echo, future=True)
    if config.create_tables:
        ensure_schema(engine)
    logger.debug(f"Created engine for {url.render_as_string(hide_password=True)}")
    return engine


class StoreClient:
    """
    Process-wide handle on the hosted store.

    Build one at startup and hand its sessions to the repository functions:

        client = StoreClient.from_env()
        with client.session_context() as session:
            rows, count = client.fetch_history(session, emiten="BBCA BBRI", offset=50)
    """

    def __init__(self, config: StoreConfig, engine: Optional[Engine] = None):
        self.config = config
        self.engine = engine or get_engine(config)
        self._sessionmaker = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)

    @classmethod
    def from_env(cls) -> "StoreClient":
        """Load StoreConfig from the environment (fatal if incomplete) and connect."""
        config = load_store_config()
        configure_logging(config.log_level)
        return cls(config)

    def get_session(self) -> Session:
        """Get a SQLAlchemy session (caller must close it)."""
        return self._sessionmaker()

    @contextmanager
    def session_context(self) -> Generator[Session, None, None]:
        """
        Context manager for SQLAlchemy sessions.

        Rolls back on error and always closes. Repository write functions
        commit their own work.
        """
        session = self.get_session()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def fetch_history(self, session: Session, **filters: Any) -> Tuple[List[StockQuery], int]:
        """fetch_history with this store's configured default page size."""
        return fetch_history(session, default_page_size=self.config.default_page_size, **filters)

    def dispose(self) -> None:
        self.engine.dispose()
