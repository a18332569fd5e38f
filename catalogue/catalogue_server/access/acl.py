"""
Authorization for catalogue mutations.

This module decides whether an account may mutate an entity:
- Publisher creation is reserved to superusers
- Other mutations of owned entities need every affected publisher
  (current owner and, for moves, the new one) in the account's set
- Mutations of unowned entities need an authenticated account only
- Reads are never gated

Invariants:
    - Superusers bypass publisher checks
    - Checks run before any write
    - A denial raises Unauthorised and is logged at WARNING
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from ..errors import Unauthorised

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountAccess:
    """What an authenticated account may touch.

    Attributes:
        account_id: Acting account, recorded in history rows
        is_superuser: Unrestricted access
        publishers: Publisher ids the account may edit
    """

    account_id: uuid.UUID
    is_superuser: bool = False
    publishers: frozenset[uuid.UUID] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.publishers, frozenset):
            object.__setattr__(self, "publishers", frozenset(self.publishers))

    def can_edit(self, publisher_id: uuid.UUID) -> bool:
        return self.is_superuser or publisher_id in self.publishers


class AuthorizationGate:
    """Checks an AccountAccess against the publishers a mutation affects.

    Thread safety:
        This class is stateless and thread-safe.

    Example:
        >>> gate = AuthorizationGate()
        >>> gate.require_publishers(access, [publisher_id], entity="work")
    """

    def require_authenticated(self, access: Optional[AccountAccess]) -> AccountAccess:
        if access is None:
            logger.warning("Mutation attempted without an account")
            raise Unauthorised()
        return access

    def require_superuser(self, access: Optional[AccountAccess], action: str = "mutation") -> None:
        """Allow only superusers.

        Raises:
            Unauthorised: If the account is missing or not a superuser
        """
        access = self.require_authenticated(access)
        if not access.is_superuser:
            logger.warning(
                f"Superuser required for {action}",
                extra={"account_id": str(access.account_id), "action": action},
            )
            raise Unauthorised()

    def require_publishers(
        self,
        access: Optional[AccountAccess],
        publisher_ids: Iterable[Optional[uuid.UUID]],
        entity: str = "",
    ) -> None:
        """Allow only accounts covering every given publisher.

        None entries (unowned entities) impose no restriction.

        Raises:
            Unauthorised: If any publisher is outside the account's set
        """
        access = self.require_authenticated(access)
        if access.is_superuser:
            return

        denied = sorted(
            {p for p in publisher_ids if p is not None and not access.can_edit(p)},
            key=str,
        )
        if denied:
            logger.warning(
                "Account lacks rights on publisher(s)",
                extra={
                    "account_id": str(access.account_id),
                    "entity": entity,
                    "publisher_ids": [str(p) for p in denied],
                },
            )
            raise Unauthorised(publisher_ids=denied)
