"""Batch input/output record model."""

import math
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Mapping

from cnki_crawler.models.metadata import DetailMetadata

ENRICHMENT_FIELDS = ("authors", "author_count", "release_date")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ""


@dataclass
class ArticleRecord:
    """One row of the batch input, plus its enrichment once looked up.

    Attributes:
        fields: Original column name -> value mapping, never modified
        authors: Comma-joined author names
        author_count: Number of authors
        release_date: Release date as rendered on the detail page
    """

    fields: Dict[str, Any] = field(default_factory=dict)
    authors: Optional[str] = None
    author_count: Optional[int] = None
    release_date: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ArticleRecord":
        """Wrap an input row; the mapping is copied, not referenced."""
        return cls(fields=dict(data))

    @property
    def title(self) -> str:
        value = self.fields.get("title")
        return "" if _is_blank(value) else str(value).strip()

    @property
    def source(self) -> str:
        value = self.fields.get("source")
        return "" if _is_blank(value) else str(value).strip()

    @property
    def is_searchable(self) -> bool:
        """Whether the record has both a title and a source to search with."""
        return bool(self.title and self.source)

    @property
    def is_enriched(self) -> bool:
        return self.author_count is not None

    def enrich(self, metadata: DetailMetadata) -> None:
        """Merge detail-page metadata into the record."""
        self.authors = metadata.authors_text
        self.author_count = metadata.author_count
        self.release_date = metadata.release_date

    def enrichment(self) -> Dict[str, Any]:
        """The enrichment fields that are set."""
        if not self.is_enriched:
            return {}
        return {
            "authors": self.authors,
            "author_count": self.author_count,
            "release_date": self.release_date,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Output row: the input fields, plus enrichment when present."""
        out = dict(self.fields)
        out.update(self.enrichment())
        return out
