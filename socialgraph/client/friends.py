# socialgraph/client/friends.py

"""Client-side view of the caller's friend graph.

Graph conflicts (``AlreadyExists``, ``InvalidState``, ``NotFound``) mean the
local view is stale, e.g. the other person sent a request at the same time.
They are answered with a refresh instead of being raised to the UI.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from socialgraph.client.api import SocialGraphClient
from socialgraph.core.errors import AlreadyExists, InvalidState, NotFound

logger = logging.getLogger(__name__)

GRAPH_CONFLICTS = (AlreadyExists, InvalidState, NotFound)


@dataclass
class FriendsState:
    client: SocialGraphClient
    friends: List[Dict[str, Any]] = field(default_factory=list)
    incoming: List[Dict[str, Any]] = field(default_factory=list)
    sent: List[Dict[str, Any]] = field(default_factory=list)

    def refresh(self) -> None:
        self.friends = self.client.list_friends()
        self.incoming = self.client.list_incoming()
        self.sent = self.client.list_sent()

    @property
    def friend_ids(self) -> List[str]:
        return [entry["profile"]["id"] for entry in self.friends if entry.get("profile")]

    @property
    def sent_request_ids(self) -> List[str]:
        return [entry["friend_id"] for entry in self.sent]

    def send_request(self, target_id: str) -> bool:
        """True if a new request was created, False if one already existed."""
        return self._mutate(self.client.send_request, target_id)

    def accept(self, friendship_id: str) -> bool:
        return self._mutate(self.client.accept_request, friendship_id)

    def reject(self, friendship_id: str) -> bool:
        return self._mutate(self.client.reject_request, friendship_id)

    def remove(self, friendship_id: str) -> bool:
        return self._mutate(self.client.remove_friend, friendship_id)

    def _mutate(self, call, *args) -> bool:
        try:
            call(*args)
        except GRAPH_CONFLICTS as e:
            logger.info("Graph changed underneath us (%s); refreshing", e.code)
            self.refresh()
            return False
        self.refresh()
        return True
