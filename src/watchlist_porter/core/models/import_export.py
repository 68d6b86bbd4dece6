"""Import/export wire schemas.

These models are the structural contract for watchlist import and export:
raw rows as read from a user's file, preview items annotated with catalog
matches, duplicate resolution instructions, bulk import requests and the
versioned export envelope.

Attributes are snake_case; on the wire every field uses its camelCase
alias (``dateAdded``, ``streamingProviders``, ``catalogId`` ...). Both
spellings are accepted on input and unknown keys are ignored, so an exported
entry can be fed straight back in as a raw row.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .watchlist import MediaKind, WatchStatus

EXPORT_FORMAT_VERSION = "1.0"
MAX_NOTES_LENGTH = 2000


class WireModel(BaseModel):
    """Base for models exchanged with API clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump as JSON-compatible data using wire (camelCase) names."""
        return self.model_dump(by_alias=True, mode="json")


# ─── Raw rows ─────────────────────────────────────────────────


class RawRow(WireModel):
    """A user-supplied watchlist row before normalization.

    Status, date and provider values are deliberately loose here; the
    normalizers turn them into canonical values later.
    """

    title: str = Field(..., min_length=1, max_length=500, description="Title as typed by the user")
    year: Optional[int] = Field(None, ge=1800, le=2100, description="Release year hint")
    status: Optional[str] = Field(
        default=WatchStatus.NOT_WATCHED.value, description="Free-text watch status"
    )
    rating: Optional[int] = Field(None, ge=0, le=10, description="Rating on a 0-10 scale")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH, description="Personal notes")
    date_added: Optional[Union[datetime, str, float]] = Field(
        None, description="Date-like value for when the title was added"
    )
    streaming_providers: Union[List[str], str, None] = Field(
        default_factory=list, description="Provider tokens, as a list or a delimited string"
    )

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("title", mode="before")
    @classmethod
    def coerce_numeric_title(cls, v: Any) -> Any:
        """Accept bare numeric titles such as 1917 from JSON sources."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


# ─── Catalog matches ──────────────────────────────────────────


class MatchCandidate(WireModel):
    """A scored catalog match for an import row."""

    catalog_id: int = Field(..., gt=0, description="Catalog identifier")
    media_kind: MediaKind = Field(..., description="Movie or TV series")
    title: str = Field(..., description="Catalog title")
    year: Optional[int] = Field(None, description="Release year")
    poster_ref: Optional[str] = Field(None, description="Poster image reference")
    backdrop_ref: Optional[str] = Field(None, description="Backdrop image reference")
    overview: Optional[str] = Field(None, description="Plot overview")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Match confidence")


# ─── Preview items ────────────────────────────────────────────


class PreviewItem(WireModel):
    """A normalized, match-annotated import row awaiting confirmation."""

    original_title: str = Field(..., description="Title from the import")
    original_year: Optional[int] = Field(None, description="Year from the import")
    match_candidates: List[MatchCandidate] = Field(
        default_factory=list, description="Candidates ordered by confidence, best first"
    )
    selected_match_index: Optional[int] = Field(
        None, ge=0, description="Index of the user's chosen candidate"
    )
    suggested_status: WatchStatus = Field(
        default=WatchStatus.NOT_WATCHED, description="Normalized watch status"
    )
    rating: Optional[int] = Field(None, ge=0, le=10, description="Rating (0-10)")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH, description="Notes")
    date_added: Optional[AwareDatetime] = Field(None, description="Normalized date added")
    streaming_providers: List[str] = Field(default_factory=list, description="Provider names")
    has_existing_entry: bool = Field(default=False, description="Duplicate of a stored entry")
    existing_entry_id: Optional[str] = Field(None, description="Stored entry this duplicates")
    should_skip: bool = Field(default=False, description="Skip on commit")
    error: Optional[str] = Field(None, description="Why the row could not be processed")

    @model_validator(mode="after")
    def check_references(self) -> "PreviewItem":
        """Validate cross-field references."""
        if self.has_existing_entry and not self.existing_entry_id:
            raise ValueError("existingEntryId is required when hasExistingEntry is true")
        if self.selected_match_index is not None and self.selected_match_index >= len(
            self.match_candidates
        ):
            raise ValueError(
                f"selectedMatchIndex {self.selected_match_index} is out of range for "
                f"{len(self.match_candidates)} match candidate(s)"
            )
        return self

    @property
    def selected_candidate(self) -> Optional[MatchCandidate]:
        """The chosen candidate, defaulting to the best one."""
        if not self.match_candidates:
            return None
        return self.match_candidates[self.selected_match_index or 0]


# ─── Duplicate resolution ─────────────────────────────────────


class DuplicateStrategy(str, Enum):
    """How to reconcile an incoming row with an existing entry."""

    SKIP = "skip"
    OVERWRITE = "overwrite"
    MERGE = "merge"


class NotesPolicy(str, Enum):
    """Notes merge policy."""

    APPEND = "append"
    REPLACE = "replace"
    KEEP = "keep"


class ProvidersPolicy(str, Enum):
    """Streaming provider merge policy."""

    MERGE = "merge"
    REPLACE = "replace"
    KEEP = "keep"


class MergeFields(WireModel):
    """Per-field merge instructions. Defaults keep everything."""

    status: bool = Field(default=False, description="Take the incoming status")
    rating: bool = Field(default=False, description="Take the incoming rating")
    notes: NotesPolicy = Field(default=NotesPolicy.KEEP, description="Notes policy")
    streaming_providers: ProvidersPolicy = Field(
        default=ProvidersPolicy.KEEP, description="Provider list policy"
    )


class DuplicateResolution(WireModel):
    """Resolution instruction for one preview item."""

    item_index: int = Field(..., ge=0, description="Index into the request's items")
    strategy: DuplicateStrategy = Field(..., description="Resolution strategy")
    merge_fields: Optional[MergeFields] = Field(
        None, description="Merge instructions, only used by the merge strategy"
    )

    @property
    def effective_merge_fields(self) -> MergeFields:
        """Merge fields to apply, falling back to defaults."""
        return self.merge_fields or MergeFields()


# ─── Bulk import ──────────────────────────────────────────────


class BulkImportRequest(WireModel):
    """Confirmed preview items plus duplicate resolutions."""

    items: List[PreviewItem] = Field(..., description="Preview items to commit")
    resolutions: List[DuplicateResolution] = Field(
        default_factory=list, description="Explicit duplicate resolutions"
    )
    skip_unmatched: bool = Field(default=False, description="Skip items without candidates")
    default_duplicate_strategy: DuplicateStrategy = Field(
        default=DuplicateStrategy.SKIP, description="Strategy for unresolved duplicates"
    )

    @model_validator(mode="after")
    def check_resolution_indexes(self) -> "BulkImportRequest":
        """Every resolution must point at a distinct, existing item."""
        seen = set()
        for resolution in self.resolutions:
            if resolution.item_index >= len(self.items):
                raise ValueError(
                    f"resolution itemIndex {resolution.item_index} is out of range for "
                    f"{len(self.items)} item(s)"
                )
            if resolution.item_index in seen:
                raise ValueError(f"duplicate resolution for itemIndex {resolution.item_index}")
            seen.add(resolution.item_index)
        return self

    def resolution_for(self, item_index: int) -> DuplicateResolution:
        """Get the resolution for an item, falling back to the default strategy."""
        for resolution in self.resolutions:
            if resolution.item_index == item_index:
                return resolution
        return DuplicateResolution(item_index=item_index, strategy=self.default_duplicate_strategy)


# ─── Export ───────────────────────────────────────────────────


class ExportedEntry(WireModel):
    """A re-importable watchlist entry."""

    title: str = Field(..., description="Title")
    year: Optional[int] = Field(None, description="Release year")
    media_kind: MediaKind = Field(..., description="Movie or TV series")
    status: WatchStatus = Field(..., description="Watch status")
    rating: Optional[int] = Field(None, ge=0, le=10, description="Rating (0-10)")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH, description="Notes")
    date_added: AwareDatetime = Field(..., description="When the entry was added")
    date_watched: Optional[AwareDatetime] = Field(None, description="When it was completed")
    streaming_providers: List[str] = Field(default_factory=list, description="Provider names")
    catalog_id: Optional[int] = Field(None, gt=0, description="Catalog identifier")
    poster_ref: Optional[str] = Field(None, description="Poster image reference")


class ExportResponse(WireModel):
    """Versioned export envelope."""

    exported_at: AwareDatetime = Field(..., description="Export timestamp")
    owner_id: str = Field(..., min_length=1, description="Owner of the exported watchlist")
    version: str = Field(default=EXPORT_FORMAT_VERSION, description="Export format version")
    total_entries: int = Field(..., ge=0, description="Number of entries")
    entries: List[ExportedEntry] = Field(default_factory=list, description="Exported entries")

    @model_validator(mode="after")
    def check_total(self) -> "ExportResponse":
        """totalEntries must match the entry list."""
        if self.total_entries != len(self.entries):
            raise ValueError(
                f"totalEntries is {self.total_entries} but {len(self.entries)} entries were given"
            )
        return self
