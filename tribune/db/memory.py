"""In-process document store."""

import copy
import json
import threading
from typing import Callable, Dict, List, Optional, Sequence

from .store import OPERATORS, Document, DocumentNotFoundError, DocumentStore, Filter, to_stored_value


class MemoryStore(DocumentStore):
    """Thread-safe dict-backed store, used for tests and dry runs."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._lock = threading.RLock()

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            doc = self._collection(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def insert_if_absent(self, collection: str, doc_id: str, doc: Document) -> bool:
        with self._lock:
            docs = self._collection(collection)
            if doc_id in docs:
                return False
            docs[doc_id] = copy.deepcopy(doc)
            return True

    def update(self, collection: str, doc_id: str, partial: Document) -> None:
        with self._lock:
            docs = self._collection(collection)
            if doc_id not in docs:
                raise DocumentNotFoundError(f"{collection}/{doc_id}")
            docs[doc_id].update(copy.deepcopy(partial))

    def transform(
        self,
        collection: str,
        doc_id: str,
        fn: Callable[[Document], Document],
    ) -> Optional[Document]:
        with self._lock:
            docs = self._collection(collection)
            if doc_id not in docs:
                return None
            partial = fn(copy.deepcopy(docs[doc_id]))
            docs[doc_id].update(copy.deepcopy(partial))
            return copy.deepcopy(docs[doc_id])

    def query(
        self,
        collection: str,
        where: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        with self._lock:
            docs = list(self._collection(collection).values())

        def matches(doc: Document) -> bool:
            for field, op, value in where:
                current = doc.get(field)
                value = to_stored_value(value)
                if current is None:
                    if op == "==" and value is None:
                        continue
                    return False
                if value is None:
                    if op == "==":
                        return False
                    continue
                if isinstance(value, str) and not isinstance(current, str):
                    # Same text form as doc->>field
                    current = json.dumps(current)
                try:
                    if not OPERATORS[op](current, value):
                        return False
                except TypeError:
                    return False
            return True

        results = [doc for doc in docs if matches(doc)]
        if order_by:
            present = [d for d in results if d.get(order_by) is not None]
            missing = [d for d in results if d.get(order_by) is None]
            present.sort(key=lambda d: d[order_by], reverse=descending)
            results = present + missing
        if limit is not None:
            results = results[:limit]
        return copy.deepcopy(results)

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            return self._collection(collection).pop(doc_id, None) is not None
