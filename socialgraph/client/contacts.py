# socialgraph/client/contacts.py

"""Device-side contact collection and hashing.

Raw phone numbers never leave this module: callers get back a mapping of
phone hash to the contact name that produced it.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol

from socialgraph.core.errors import PermissionDenied
from socialgraph.core.phone import hash_phone

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"


@dataclass(frozen=True)
class Contact:
    """One phone number of one address-book entry. Never persisted or sent."""

    name: str
    raw_phone: str


@dataclass(frozen=True)
class DeviceContact:
    name: Optional[str]
    phone_numbers: List[str] = field(default_factory=list)


class ContactSource(Protocol):
    """The platform address book."""

    def permission_granted(self) -> bool: ...

    def request_permission(self) -> bool: ...

    def read_contacts(self) -> Iterable[DeviceContact]: ...


def load_device_contacts(source: ContactSource) -> List[Contact]:
    """Read every phone number from the address book.

    Raises:
        PermissionDenied: the user did not grant contacts access. Not retried;
            asking again is a new user action.
    """
    if not source.permission_granted() and not source.request_permission():
        raise PermissionDenied()

    contacts = []
    for entry in source.read_contacts():
        name = entry.name or UNKNOWN_NAME
        for number in entry.phone_numbers:
            if number:
                contacts.append(Contact(name=name, raw_phone=number))
    return contacts


def build_hash_set(contacts: Iterable[Contact], executor: Optional[Executor] = None) -> Dict[str, str]:
    """Map each distinct phone hash to the first contact name that produced it.

    Hashing is pure, so it can be spread over ``executor``; ``Executor.map``
    keeps input order, which keeps "first seen wins" deterministic.
    """
    contacts = list(contacts)
    phones = [c.raw_phone for c in contacts]
    hashes = executor.map(hash_phone, phones) if executor is not None else map(hash_phone, phones)

    result: Dict[str, str] = {}
    for contact, phone_hash in zip(contacts, hashes):
        result.setdefault(phone_hash, contact.name)
    logger.debug("Hashed %d numbers into %d keys", len(contacts), len(result))
    return result
