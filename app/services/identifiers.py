"""
Shareable event identifiers of the form eventra-<creator prefix>-<random>
"""

import logging
import secrets
import string

from app.core.config import settings
from app.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_letters + string.digits


def random_suffix(length: int) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def generate_event_id(store, creator_id: str) -> str:
    """Build an event id from the creator's canonical uuid.

    Raises NotFoundError when the creator is not a registered user. Uniqueness
    is enforced by the store on insert; callers retry on EventIdTaken.
    """
    creator = store.get_user(creator_id)
    if creator is None:
        raise NotFoundError("Creator")

    # First uuid group, e.g. "3f2a9c1e" from "3f2a9c1e-...."
    prefix = creator.uuid.split("-")[0][: settings.EVENT_ID_PREFIX_LENGTH]
    return f"eventra-{prefix}-{random_suffix(settings.EVENT_ID_SUFFIX_LENGTH)}"
