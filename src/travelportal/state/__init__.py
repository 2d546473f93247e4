"""State/store layer.

This package is the single owner of portal records: seven copy-on-write
collections held by :class:`DomainStore`, which publishes a change event
with the new snapshot after every mutation.
"""

from travelportal.state.collection import Catalog, Collection, DeletableCollection
from travelportal.state.events import ChangeAction, ChangeEvent, CollectionName
from travelportal.state.store import DomainStore

__all__ = [
    "Catalog",
    "ChangeAction",
    "ChangeEvent",
    "Collection",
    "CollectionName",
    "DeletableCollection",
    "DomainStore",
]
