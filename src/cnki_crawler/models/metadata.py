"""Models for data read from CNKI result and detail pages."""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, field_validator

from cnki_crawler.utils.text_utils import normalize_text, parse_count


@dataclass
class DetailMetadata:
    """Metadata read from an article's detail page.

    Attributes:
        authors: Cleaned author names, in page order
        release_date: Release date text as rendered
    """

    authors: List[str] = field(default_factory=list)
    release_date: str = ""

    @property
    def author_count(self) -> int:
        return len(self.authors)

    @property
    def authors_text(self) -> str:
        """Author names joined the way they are written to the output sheet."""
        return ",".join(self.authors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "authors": self.authors_text,
            "author_count": self.author_count,
            "release_date": self.release_date,
        }


@dataclass
class ListingSummary:
    """Totals shown above a result listing.

    Attributes:
        total_count: Number of matching articles
        total_pages: Number of result pages at the current page size
    """

    total_count: int
    total_pages: int


class ResultRow(BaseModel):
    """One row of the result table."""

    title: str = Field(default="", description="Article title")
    article_url: Optional[str] = Field(default=None, description="Link to the detail page")
    authors: List[str] = Field(default_factory=list, description="Author names")
    author_urls: List[str] = Field(default_factory=list, description="Author profile links")
    source: str = Field(default="", description="Journal or other source name")
    source_url: Optional[str] = Field(default=None, description="Link to the source")
    release_date: str = Field(default="", description="Release date text")
    database: str = Field(default="", description="Database the article comes from")
    reference_count: Optional[int] = Field(default=None, description="Times cited")
    reference_url: Optional[str] = Field(default=None, description="Link to citing articles")
    download_count: Optional[int] = Field(default=None, description="Times downloaded")
    download_url: Optional[str] = Field(default=None, description="Download link")

    @field_validator("title", "source", "release_date", "database", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> str:
        return normalize_text(value if isinstance(value, str) else (str(value) if value is not None else ""))

    @field_validator("reference_count", "download_count", mode="before")
    @classmethod
    def _parse_count(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, int):
            return value
        return parse_count(str(value))

    def to_row(self) -> Dict[str, Any]:
        """Flatten for spreadsheet output."""
        data = self.model_dump()
        data["authors"] = ",".join(self.authors)
        data["author_urls"] = ",".join(self.author_urls)
        return data


@dataclass
class PageListing:
    """Rows rendered on one result page.

    Attributes:
        page_index: Zero-based page number
        row_count: Number of row elements on the page
        rows: Parsed rows, filled in when the visitor reads them
    """

    page_index: int
    row_count: int = 0
    rows: List[ResultRow] = field(default_factory=list)
