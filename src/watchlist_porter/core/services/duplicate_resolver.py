"""Duplicate resolution.

Reconciles an incoming preview item with the stored entry it duplicates,
according to a :class:`DuplicateResolution`:

- ``skip`` keeps the stored entry unchanged.
- ``overwrite`` replaces it with the incoming fields, keeping its identity.
- ``merge`` applies one policy per field (see ``MERGE_POLICIES``).
"""

from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from ..models import (
    MAX_NOTES_LENGTH,
    DuplicateResolution,
    DuplicateStrategy,
    MediaKind,
    MergeFields,
    NotesPolicy,
    PreviewItem,
    ProvidersPolicy,
    StreamingProvider,
    WatchlistEntry,
    WatchStatus,
)

NOTES_SEPARATOR = "\n\n"


def _providers(names: List[str]) -> List[StreamingProvider]:
    return [StreamingProvider(name=name) for name in names]


def stamp_completion(
    entry: WatchlistEntry, completed_at: Optional[datetime] = None
) -> WatchlistEntry:
    """Keep ``completed_at`` in line with the entry status.

    Completed entries without a completion time get ``completed_at`` (or
    now); entries that are not completed lose it.

    Args:
        entry: Entry to update.
        completed_at: Completion time to stamp.

    Returns:
        Updated copy of the entry.
    """
    if entry.status == WatchStatus.COMPLETED:
        if entry.completed_at is None:
            return entry.model_copy(
                update={"completed_at": completed_at or datetime.now(timezone.utc)}
            )
        return entry
    if entry.completed_at is not None:
        return entry.model_copy(update={"completed_at": None})
    return entry


def entry_from_preview_item(
    item: PreviewItem,
    default_media_kind: MediaKind = MediaKind.MOVIE,
    base: Optional[WatchlistEntry] = None,
) -> WatchlistEntry:
    """Build a stored record from a preview item.

    Catalog fields come from the selected candidate (the best one when no
    selection was made). Without candidates they fall back to ``base``, or
    to the imported title.

    Args:
        item: Preview item.
        default_media_kind: Media kind for items without candidates.
        base: Entry whose identity and catalog fields are kept.

    Returns:
        Watchlist entry. Identity fields come from ``base`` when given.
    """
    candidate = item.selected_candidate

    if candidate is not None:
        catalog_fields: Dict[str, Any] = {
            "title": candidate.title,
            "media_kind": candidate.media_kind,
            "release_date": date(candidate.year, 1, 1) if candidate.year else None,
            "catalog_id": candidate.catalog_id,
            "poster_ref": candidate.poster_ref,
        }
    elif base is not None:
        catalog_fields = {
            "title": base.title,
            "media_kind": base.media_kind,
            "release_date": base.release_date,
            "catalog_id": base.catalog_id,
            "poster_ref": base.poster_ref,
        }
    else:
        catalog_fields = {
            "title": item.original_title,
            "media_kind": default_media_kind,
            "release_date": date(item.original_year, 1, 1) if item.original_year else None,
            "catalog_id": None,
            "poster_ref": None,
        }

    entry = WatchlistEntry(
        id=base.id if base else None,
        owner_id=base.owner_id if base else None,
        status=item.suggested_status,
        rating=item.rating,
        notes=item.notes,
        streaming_providers=_providers(item.streaming_providers),
        created_at=item.date_added or (base.created_at if base else None),
        updated_at=base.updated_at if base else None,
        completed_at=base.completed_at if base else None,
        **catalog_fields,
    )
    return stamp_completion(entry, None if base else item.date_added)


# ─── Merge policies ───────────────────────────────────────────

MergePolicy = Callable[[WatchlistEntry, PreviewItem, MergeFields], Dict[str, Any]]


def _merge_status(
    existing: WatchlistEntry, item: PreviewItem, fields: MergeFields
) -> Dict[str, Any]:
    return {"status": item.suggested_status} if fields.status else {}


def _merge_rating(
    existing: WatchlistEntry, item: PreviewItem, fields: MergeFields
) -> Dict[str, Any]:
    return {"rating": item.rating} if fields.rating else {}


def _merge_notes(
    existing: WatchlistEntry, item: PreviewItem, fields: MergeFields
) -> Dict[str, Any]:
    if fields.notes == NotesPolicy.REPLACE:
        return {"notes": item.notes}
    if fields.notes == NotesPolicy.APPEND:
        if existing.notes and item.notes:
            # Stays within the length a re-imported export row accepts
            merged = f"{existing.notes}{NOTES_SEPARATOR}{item.notes}"
            return {"notes": merged[:MAX_NOTES_LENGTH]}
        return {"notes": existing.notes or item.notes}
    return {}


def _merge_providers(
    existing: WatchlistEntry, item: PreviewItem, fields: MergeFields
) -> Dict[str, Any]:
    if fields.streaming_providers == ProvidersPolicy.REPLACE:
        return {"streaming_providers": _providers(item.streaming_providers)}
    if fields.streaming_providers == ProvidersPolicy.MERGE:
        known = {name.lower() for name in existing.provider_names}
        added = [name for name in item.streaming_providers if name.lower() not in known]
        return {
            "streaming_providers": [p.model_copy() for p in existing.streaming_providers]
            + _providers(added)
        }
    return {}


MERGE_POLICIES: Dict[str, MergePolicy] = {
    "status": _merge_status,
    "rating": _merge_rating,
    "notes": _merge_notes,
    "streaming_providers": _merge_providers,
}


def merge_entry(
    existing: WatchlistEntry, item: PreviewItem, merge_fields: Optional[MergeFields] = None
) -> WatchlistEntry:
    """Merge an incoming item into an existing entry field by field.

    Args:
        existing: Stored entry.
        item: Incoming preview item.
        merge_fields: Per-field policies. Defaults keep every existing value.

    Returns:
        Merged copy of the existing entry.
    """
    fields = merge_fields or MergeFields()

    updates: Dict[str, Any] = {}
    for policy in MERGE_POLICIES.values():
        updates.update(policy(existing, item, fields))

    return stamp_completion(existing.model_copy(deep=True, update=updates))


def overwrite_entry(existing: WatchlistEntry, item: PreviewItem) -> WatchlistEntry:
    """Replace an existing entry with the incoming item, keeping its identity.

    Args:
        existing: Stored entry.
        item: Incoming preview item.

    Returns:
        Entry with the incoming fields and the existing id.
    """
    return entry_from_preview_item(item, existing.media_kind, base=existing)


def resolve_duplicate(
    existing: WatchlistEntry, item: PreviewItem, resolution: DuplicateResolution
) -> WatchlistEntry:
    """Compute the record to store for a duplicate.

    Args:
        existing: Stored entry.
        item: Incoming preview item.
        resolution: How to reconcile them. Merge fields are ignored unless
            the strategy is ``merge``.

    Returns:
        The existing entry for ``skip``, otherwise the resolved record.
    """
    if resolution.strategy == DuplicateStrategy.OVERWRITE:
        return overwrite_entry(existing, item)
    if resolution.strategy == DuplicateStrategy.MERGE:
        return merge_entry(existing, item, resolution.effective_merge_fields)
    return existing
