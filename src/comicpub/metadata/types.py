# ABOUTME: Book-level descriptive metadata for a fixed-layout comic package.
# ABOUTME: ComicMetadata is validated once by the writer and read-only afterwards.

import copy
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

DEFAULT_LANGUAGE = "en-us"

# Fields that must contain non-whitespace content, checked in this order.
REQUIRED_FIELDS: tuple[str, ...] = ("id", "title", "author", "publisher", "language")


class MetadataValidationError(Exception):
    """Raised when a required metadata field is empty or whitespace."""

    def __init__(self, field_name: str) -> None:
        self.field = field_name
        super().__init__(f"{field_name} field cannot be empty or whitespace")


def _new_identifier() -> str:
    return f"urn:uuid:{uuid.uuid4()}"


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class ComicMetadata:
    """Descriptive metadata for one output package.

    Constructed by the caller, validated when a writer is created, and not
    mutated after that. When a batch produces several volumes, each volume
    gets its own copy via copy().
    """

    id: str = field(default_factory=_new_identifier)
    title: str = "Title"
    author: str = "Author name"
    publisher: str = "Publisher name"
    published_date: datetime = field(default_factory=_utc_now)
    language: str = DEFAULT_LANGUAGE
    description: str | None = None
    source: str | None = None
    relation: str | None = None
    copyright: str | None = None
    series: str | None = None
    tags: set[str] = field(default_factory=set)
    custom: dict[str, str] = field(default_factory=dict)
    right_to_left: bool = False

    def validate(self) -> None:
        """Check the required fields.

        Raises:
            MetadataValidationError: naming the first field whose stripped
                value is empty.
        """
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                raise MetadataValidationError(name)

    def copy(self) -> "ComicMetadata":
        """Return an independent clone, including the tag set and custom map."""
        return copy.deepcopy(self)

    @property
    def direction(self) -> str:
        """Page progression direction as written to the spine."""
        return "rtl" if self.right_to_left else "ltr"
