"""
Request context passed into every coordinator operation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.time_utils import utcnow


@dataclass
class ParcelContext:
    """
    Store handle plus authenticated caller.

    ``actor`` is the decoded identity token (``sub``, ``name``, ``role``).
    ``clock`` is injectable so time rules can be exercised without sleeping.
    """
    db: AsyncSession
    actor: dict
    clock: Callable[[], datetime] = field(default=utcnow)

    @property
    def actor_email(self) -> Optional[str]:
        return self.actor.get("sub")

    @property
    def actor_name(self) -> Optional[str]:
        return self.actor.get("name")

    @property
    def actor_label(self) -> str:
        """Who to record as ``updated_by`` in the tracking ledger."""
        return self.actor_email or self.actor_name or "System"

    def now(self) -> datetime:
        return self.clock()
