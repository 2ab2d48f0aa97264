from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from .....exceptions import StorageUnavailable


@contextmanager
def unit_of_work(session: Session):
    """Commit on success; roll back and report StorageUnavailable on driver errors.

    Constraint violations are re-raised as IntegrityError for the repository
    to translate. ORM rows must be converted to DTOs inside the block:
    attributes expire on commit and reloading them would open a new
    transaction.
    """
    try:
        yield session
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageUnavailable(str(e)) from e
