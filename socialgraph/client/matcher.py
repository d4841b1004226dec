# socialgraph/client/matcher.py

"""Find which address-book contacts already have accounts.

    with ContactMatcher(source, client) as matcher:
        job = matcher.start(caller_id, friend_ids, sent_request_ids)
        ...
        job.cancel()        # screen dismissed: the result is dropped
        matches = job.result()
"""

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from socialgraph.client.api import SocialGraphClient
from socialgraph.client.contacts import UNKNOWN_NAME, ContactSource, build_hash_set, load_device_contacts

logger = logging.getLogger(__name__)


class MatchCancelled(Exception):
    """The job was cancelled before its result was read."""


@dataclass(frozen=True)
class MatchedContact:
    profile: Dict[str, Any]
    contact_name: str


def filter_candidates(
    profiles: Iterable[Dict[str, Any]],
    caller_id: str,
    friend_ids: Iterable[str] = (),
    sent_request_ids: Iterable[str] = (),
) -> List[Dict[str, Any]]:
    """Drop the caller, current friends and people with a pending sent request."""
    excluded = {caller_id, *friend_ids, *sent_request_ids}
    return [p for p in profiles if p["id"] not in excluded]


class MatchJob:
    def __init__(self, future: Future) -> None:
        self._future = future
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        # The request may still reach the server; we only discard the answer
        self._cancelled.set()
        self._future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> List[MatchedContact]:
        if self.cancelled:
            raise MatchCancelled()
        matches = self._future.result(timeout)
        if self.cancelled:
            raise MatchCancelled()
        return matches


class ContactMatcher:
    def __init__(
        self,
        source: ContactSource,
        client: SocialGraphClient,
        executor: Optional[Executor] = None,
        hash_executor: Optional[Executor] = None,
    ) -> None:
        self.source = source
        self.client = client
        # Only an executor created here is shut down by close()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="contact-match")
        self._hash_executor = hash_executor

    def __enter__(self) -> "ContactMatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def start(
        self,
        caller_id: str,
        friend_ids: Iterable[str] = (),
        sent_request_ids: Iterable[str] = (),
    ) -> MatchJob:
        future = self._executor.submit(self.match, caller_id, list(friend_ids), list(sent_request_ids))
        return MatchJob(future)

    def match(
        self,
        caller_id: str,
        friend_ids: Iterable[str] = (),
        sent_request_ids: Iterable[str] = (),
    ) -> List[MatchedContact]:
        contacts = load_device_contacts(self.source)
        names_by_hash = build_hash_set(contacts, executor=self._hash_executor)
        if not names_by_hash:
            return []

        profiles = self.client.lookup_by_hashes(names_by_hash.keys())
        candidates = filter_candidates(profiles, caller_id, friend_ids, sent_request_ids)
        logger.info("%d of %d contacts matched", len(candidates), len(names_by_hash))
        return [
            MatchedContact(profile=p, contact_name=names_by_hash.get(p.get("phone_hash"), UNKNOWN_NAME))
            for p in candidates
        ]
