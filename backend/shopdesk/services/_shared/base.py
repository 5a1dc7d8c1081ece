# shopdesk/services/_shared/base.py
from __future__ import annotations

from collections.abc import Iterable
from http import HTTPStatus

from shopdesk.core import errors as api_errors
from shopdesk.repositories.base import Pagination
from shopdesk.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DuplicateEmailError,
    MissingInputError,
    NotFoundError,
    ServiceError,
    StoreUnavailableError,
    UnknownEmailError,
    ValidationFailedError,
)
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Offer shared validation helpers (pagination, ownership).

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Services never import Flask; the acting principal is passed explicitly.
    """

    MAX_PAGE_SIZE = 100

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self, *, page: int, page_size: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """
        Build a Pagination value object with basic clamping.

        :param page: 1-based page number.
        :param page_size: Page size, clamped to ``MAX_PAGE_SIZE``.
        :param sort: Sort tokens like ["-created_at", "name"].
        :returns: Pagination instance.
        :rtype: Pagination
        """
        page = max(1, int(page))
        page_size = min(max(1, int(page_size)), self.MAX_PAGE_SIZE)
        return Pagination(page=page, page_size=page_size, sort=list(sort or []))

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, AuthenticationError):
            return api_errors.Unauthorized(str(exc), code=exc.code)

        if isinstance(exc, UnknownEmailError):
            return api_errors.NotFound(str(exc), code="unknown_email")

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, DuplicateEmailError):
            return api_errors.Conflict(str(exc), code="duplicate_email")

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, AuthorizationError):
            return api_errors.Forbidden(str(exc))

        if isinstance(exc, StoreUnavailableError):
            return api_errors.APIError(
                message=str(exc),
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                code="store_unavailable",
                details={"retriable": True},
            )

        if isinstance(exc, ValidationFailedError):
            return api_errors.APIError(
                message=str(exc),
                status_code=HTTPStatus.BAD_REQUEST,
                code="missing_input" if isinstance(exc, MissingInputError) else "validation_failed",
                details={"errors": exc.field_errors} if exc.field_errors else None,
            )

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        return exc

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(
        self, actor: Principal, owner_id: int | str, *, msg: str | None = None
    ) -> None:
        """
        Ensure the acting principal owns the resource.

        :param actor: Authenticated principal.
        :param owner_id: Owner recorded on the resource.
        :param msg: Optional custom error message.
        :raises AuthorizationError: If the actor is not the owner.
        """
        from shopdesk.services._shared.policies.common import is_owner

        if not is_owner(actor_id=actor.id, owner_id=owner_id):
            raise AuthorizationError(msg or "You can only modify your own resources.")
