"""Source management in the document store."""

import logging
from typing import Dict, List, Optional

from ..config import SourceConfig
from ..models import Source
from .store import DocumentStore, Filter

logger = logging.getLogger(__name__)

SOURCES = "sources"

# Fields owned by configuration; everything else on a Source is health state
CONFIG_FIELDS = (
    "name",
    "url",
    "strategy",
    "selectors",
    "enabled",
    "category",
    "update_frequency",
    "priority",
    "robots_txt_compliant",
    "terms_accepted",
    "notes",
)


class SourceRepository:
    """Manage sources in the store."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def sync_sources(self, sources: List[SourceConfig]) -> Dict[str, str]:
        """
        Sync sources from config to the store.

        New sources are created with fresh health fields; existing ones get
        their configuration refreshed and keep their health.

        Returns:
            Mapping of source name to source ID
        """
        source_map = {}
        for config in sources:
            source_id = config.source_id
            source = Source(id=source_id, **config.model_dump(exclude={"id"}))
            doc = source.to_document()

            if not self.store.insert_if_absent(SOURCES, source_id, doc):
                self.store.update(
                    SOURCES, source_id, {field: doc[field] for field in CONFIG_FIELDS}
                )
            source_map[config.name] = source_id

        logger.info("Synced %d sources", len(source_map))
        return source_map

    def save_source(self, source: Source) -> bool:
        """Store a new source. Returns False if the ID is taken."""
        return self.store.insert_if_absent(SOURCES, source.id, source.to_document())

    def get_source(self, source_id: str) -> Optional[Source]:
        doc = self.store.get(SOURCES, source_id)
        return Source.from_document(doc) if doc else None

    def get_all_sources(self) -> List[Source]:
        """All sources by priority then name."""
        sources = [Source.from_document(d) for d in self.store.query(SOURCES)]
        return sorted(sources, key=lambda s: (s.priority, s.name.lower()))

    def get_enabled_sources(self) -> List[Source]:
        docs = self.store.query(SOURCES, where=[Filter("enabled", "==", True)])
        sources = [Source.from_document(d) for d in docs]
        return sorted(sources, key=lambda s: (s.priority, s.name.lower()))

    def set_enabled(self, source_id: str, enabled: bool) -> None:
        self.store.update(SOURCES, source_id, {"enabled": enabled})
        logger.info("Source %s enabled=%s", source_id, enabled)

    def toggle_source(self, source_id: str) -> bool:
        """Flip the enabled flag. Returns the new value."""
        updated = self.store.transform(
            SOURCES, source_id, lambda doc: {"enabled": not doc.get("enabled", True)}
        )
        if updated is None:
            raise ValueError(f"Source not found: {source_id}")
        logger.info("Toggled source %s: enabled=%s", source_id, updated["enabled"])
        return updated["enabled"]

    def delete_source(self, source_id: str) -> bool:
        return self.store.delete(SOURCES, source_id)
