from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (request ids, actor).

    :param actor_id: Authenticated identity, when known.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Hold the request-scoped :class:`ServiceContext`.
    * Emit structured audit events through the module logger.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services reach storage only through ports; adapters own transactions.
    - Errors are raised as :class:`~vidshare.services._shared.errors.ServiceError`
      subclasses and translated once at the HTTP boundary.
    """

    logger = logging.getLogger("vidshare.services")

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (actor, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- Logging -------------------------------------

    def audit(self, event: str, *, level: int = logging.INFO, **fields: Any) -> None:
        """
        Log a named service event.

        Never pass tokens or passwords as ``fields``.

        :param event: Dotted event name (e.g. ``"auth.login.success"``).
        :param level: Logging level.
        :param fields: Extra structured fields (``identity_id``, ``reason``...).
        """
        if self.ctx.request_id and "request_id" not in fields:
            fields["request_id"] = self.ctx.request_id
        self.logger.log(level, event, extra=fields)
