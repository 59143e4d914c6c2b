# authapp/services/_shared/base.py
from __future__ import annotations

from authapp.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


class BaseService:
    """
    Base class for application services.

    Services reach the database only through a unit of work, never through
    the global session directly.
    """

    def unit_of_work(self, *, read_only: bool = False) -> SQLAlchemyUnitOfWork:
        """
        Open a transactional scope.

        :param read_only: Roll back on exit instead of committing.
        :returns: Unit of work exposing the repositories.
        """
        if read_only:
            return SQLAlchemyReadOnlyUnitOfWork()
        return SQLAlchemyUnitOfWork()
