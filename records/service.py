from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional, Sequence
from .errors import EmptyBatch
from .models import TraineeProfile
from .normalize import normalize_rows
from .store import ProfileStore

logger = logging.getLogger(__name__)


def publish_upload(
    rows: Sequence[Mapping[str, Any]],
    store: ProfileStore,
    headers: Optional[Sequence[str]] = None,
) -> List[TraineeProfile]:
    """
    Normalizes one upload and replaces the stored collection with it.
    EmptyBatch when no row has a training id; the store is not touched then.
    StoreUnavailable from the store propagates; the previously stored collection stays authoritative.
    """
    profiles = normalize_rows(rows, headers)
    if not profiles:
        raise EmptyBatch(rows_seen=len(rows))

    store.replace_all(profiles)
    logger.info("published %d trainees", len(profiles))
    return profiles


def load_profiles(store: ProfileStore) -> List[TraineeProfile]:
    profiles = store.fetch_all()
    logger.info("loaded %d trainees", len(profiles))
    return profiles
