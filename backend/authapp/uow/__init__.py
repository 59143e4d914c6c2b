"""Units of work used by the service layer."""

from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = ["SQLAlchemyUnitOfWork", "SQLAlchemyReadOnlyUnitOfWork"]
