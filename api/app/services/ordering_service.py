"""Persist a user-chosen display order for artworks."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Union

from app.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)


class InvalidOrderPayload(ValueError):
    """Submitted order is not a JSON array of ID strings."""

    pass


@dataclass
class ReorderResult:
    """Outcome of a reorder submission."""

    accepted: bool
    updated: int = 0
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def parse_order_payload(raw: Union[str, bytes, List[Any], None]) -> List[str]:
    """Validate a submitted order.

    Accepts either the serialized form (JSON text) or an already decoded
    list. Every element must be a non-empty string.

    Raises:
        InvalidOrderPayload: If the payload is not a well-formed sequence
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidOrderPayload("Order payload is not UTF-8") from e

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidOrderPayload(f"Order payload is not JSON: {e}") from e

    if not isinstance(raw, list):
        raise InvalidOrderPayload("Order payload must be an array of IDs")

    for item in raw:
        if not isinstance(item, str) or not item:
            raise InvalidOrderPayload("Order payload must contain only non-empty ID strings")

    return raw


def reorder_artworks(store: RecordStore, raw: Union[str, bytes, List[Any], None]) -> ReorderResult:
    """Assign ``order_index = position + 1`` to each submitted artwork.

    A malformed payload is a no-op. IDs that no longer exist are skipped,
    and artworks missing from the payload keep their current index. Each
    row is updated independently; a failed row is logged and reported but
    does not stop the others.

    Args:
        store: Record store to write through
        raw: JSON array of artwork IDs in the desired order

    Returns:
        ReorderResult describing what was written

    Examples:
        >>> result = reorder_artworks(store, '["c", "a", "gone"]')
        >>> result.updated, result.skipped
        (2, ['gone'])
    """
    try:
        ids = parse_order_payload(raw)
    except InvalidOrderPayload as e:
        logger.warning(f"Ignoring reorder request: {e}")
        return ReorderResult(accepted=False)

    existing = store.existing_ids(list(dict.fromkeys(ids)))
    result = ReorderResult(accepted=True)

    for idx, artwork_id in enumerate(ids):
        if artwork_id not in existing:
            result.skipped.append(artwork_id)
            continue
        try:
            if store.update(artwork_id, {"order_index": idx + 1}):
                result.updated += 1
            else:
                result.skipped.append(artwork_id)
        except RecordStoreError as e:
            logger.error(f"Failed to set order for artwork {artwork_id}: {e}")
            result.failed.append(artwork_id)

    logger.info(
        f"Reorder applied: {result.updated} updated, "
        f"{len(result.skipped)} skipped, {len(result.failed)} failed"
    )
    return result
