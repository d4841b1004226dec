# socialgraph/services/contact_service.py

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from socialgraph.core.config import settings
from socialgraph.models.profile import Profile

logger = logging.getLogger(__name__)


class ContactService:

    def __init__(self, db: Session, chunk_size: Optional[int] = None):
        self.db = db
        self.chunk_size = chunk_size or settings.LOOKUP_QUERY_CHUNK

    def lookup_by_hashes(self, hashes: Iterable[str]) -> List[Profile]:
        """
        Profiles whose verified phone_hash is in `hashes`.

        phone_hash is only ever written by a successful OTP check, and
        `IN (...)` never matches NULL, so unverified profiles cannot appear.
        The query runs in fixed-size batches to keep each statement small.
        """
        unique = list(dict.fromkeys(hashes))
        if not unique:
            return []

        found = {}
        for start in range(0, len(unique), self.chunk_size):
            batch = unique[start:start + self.chunk_size]
            rows = (
                self.db.query(Profile)
                .filter(Profile.phone_hash.isnot(None), Profile.phone_hash.in_(batch))
                .all()
            )
            for profile in rows:
                found[profile.id] = profile

        logger.debug("Contact lookup: %d hashes, %d matches", len(unique), len(found))
        return list(found.values())
