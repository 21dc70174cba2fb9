"""Document store interface shared by all repositories."""

import operator
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from ..models.base import format_timestamp

Document = Dict[str, Any]

OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class DocumentNotFoundError(KeyError):
    """Raised when updating a document that does not exist."""


class Filter(NamedTuple):
    """A single ``field op value`` predicate."""

    field: str
    op: str
    value: Any


def to_stored_value(value: Any) -> Any:
    """Convert a query value to the representation used in stored documents."""
    if isinstance(value, datetime):
        return format_timestamp(value)
    return value


class DocumentStore(ABC):
    """Generic document store.

    Documents are JSON-compatible dicts grouped into collections and keyed by
    a string ID. Each method is atomic for the single document it touches.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Return a copy of the document, or None."""

    @abstractmethod
    def insert_if_absent(self, collection: str, doc_id: str, doc: Document) -> bool:
        """Insert the document unless the ID exists. Returns True if inserted."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, partial: Document) -> None:
        """Shallow-merge ``partial`` into an existing document."""

    @abstractmethod
    def transform(
        self,
        collection: str,
        doc_id: str,
        fn: Callable[[Document], Document],
    ) -> Optional[Document]:
        """Atomically merge ``fn(current)`` into the document.

        Returns the merged document, or None if the document does not exist.
        """

    @abstractmethod
    def query(
        self,
        collection: str,
        where: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Return documents matching every filter."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns True if it existed."""

    def close(self) -> None:
        """Release any held resources."""
