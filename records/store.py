from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence
from .errors import StoreUnavailable
from .models import TraineeProfile
from .utils import profiles_path

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    Durable copy of the trainee collection.
    replace_all swaps the whole collection (no merge); fetch_all returns the last published one.
    Both raise StoreUnavailable on failure; nothing is retried here.
    """

    def replace_all(self, profiles: Sequence[TraineeProfile]) -> None:
        raise NotImplementedError

    def fetch_all(self) -> List[TraineeProfile]:
        raise NotImplementedError


class MemoryProfileStore(ProfileStore):
    def __init__(self, profiles: Optional[Sequence[TraineeProfile]] = None):
        self._data = [p.to_dict() for p in (profiles or [])]
        self.replace_calls = 0

    def replace_all(self, profiles: Sequence[TraineeProfile]) -> None:
        self.replace_calls += 1
        self._data = [p.to_dict() for p in profiles]

    def fetch_all(self) -> List[TraineeProfile]:
        return [TraineeProfile.from_dict(d) for d in self._data]


class JsonProfileStore(ProfileStore):
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else profiles_path()

    def replace_all(self, profiles: Sequence[TraineeProfile]) -> None:
        payload = [p.to_dict() for p in profiles]
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            # the old file stays in place until the new one is complete
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error("could not write %s: %s", self.path, e)
            raise StoreUnavailable(f"could not write {self.path}: {e}") from e
        logger.info("stored %d trainees in %s", len(payload), self.path)

    def fetch_all(self) -> List[TraineeProfile]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("could not read %s: %s", self.path, e)
            raise StoreUnavailable(f"could not read {self.path}: {e}") from e

        if not isinstance(obj, list):
            raise StoreUnavailable(f"{self.path} does not hold a trainee list")
        return [TraineeProfile.from_dict(d) for d in obj if isinstance(d, dict)]
