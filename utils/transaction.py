from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from services.errors import StorageError
from utils.logger import setup_logger
from utils.request_context import RequestContext

logger = setup_logger(__name__)


@contextmanager
def scoped_transaction(db_session: Session, ctx: RequestContext, operation: str) -> Iterator[Session]:
    """
    Run every write in the block as one unit of work.

    Commits when the block exits normally. Any exception rolls back all
    pending writes so none of them become visible; database errors are
    re-raised as StorageError.
    """
    try:
        yield db_session
        db_session.commit()
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(
            "Transaction rolled back after storage failure",
            extra=ctx.log_extra(operation=operation, error=str(e)),
        )
        raise StorageError(f"storage failure during {operation}") from e
    except Exception:
        db_session.rollback()
        logger.warning(
            "Transaction rolled back",
            extra=ctx.log_extra(operation=operation),
        )
        raise
