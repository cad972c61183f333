"""Authorization for mutating user-owned content."""

import logging
from enum import Enum
from typing import Protocol

from app.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    """Actions gated on ownership."""

    EDIT_POST = "post:edit"
    DELETE_POST = "post:delete"


class OwnedResource(Protocol):
    id: str
    author_id: str


def ensure_owner(actor_id: str, resource: OwnedResource, capability: Capability) -> None:
    """Raise ForbiddenError unless the actor authored the resource."""
    if resource.author_id != actor_id:
        logger.info(
            f"Denied {capability.value} on {type(resource).__name__} {resource.id} "
            f"for user {actor_id}"
        )
        raise ForbiddenError("You do not have permission to modify this resource")
