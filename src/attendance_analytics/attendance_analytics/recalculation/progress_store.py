from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from .model import RecalculationProgress

logger = logging.getLogger(__name__)


class ProgressStore(Protocol):
    def load(self) -> Optional[RecalculationProgress]:
        """Last persisted checkpoint, or None when there is nothing usable."""

        raise NotImplementedError

    def save(self, progress: RecalculationProgress) -> None:
        raise NotImplementedError


class JsonFileProgressStore(ProgressStore):
    """Checkpoint kept as one JSON document, replaced atomically on each save."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[RecalculationProgress]:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return RecalculationProgress.from_dict(data)
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable checkpoint %s: %s", self._path, exc)
            return None

    def save(self, progress: RecalculationProgress) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(progress.to_dict(), indent=2), encoding="utf-8")
        os.replace(tmp, self._path)
