from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from sentry_lookup.core.exceptions import CacheReadError, CacheWriteError
from sentry_lookup.core.logging import get_logger
from sentry_lookup.core.schemas import Project, project_list_adapter

log = get_logger("cache")


class ProjectCache:
    """Flat JSON file holding the last fetched project list.

    There is no expiry and no locking; whatever was written last is what
    the next read returns.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> List[Project]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CacheReadError("Cache file not found", path=str(self.path)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(f"Cache file unreadable: {e}", path=str(self.path)) from e

        try:
            projects = project_list_adapter.validate_json(raw)
        except ValidationError as e:
            raise CacheReadError(
                f"Cache file is not a project list: {e.error_count()} error(s)",
                path=str(self.path),
            ) from e

        log.debug("cache_loaded", path=str(self.path), count=len(projects))
        return projects

    def save(self, projects: Iterable[Project]) -> None:
        payload = [{"id": p.id, "slug": p.slug} for p in projects]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
        except OSError as e:
            raise CacheWriteError(f"Failed to write cache: {e}", path=str(self.path)) from e

        log.debug("cache_written", path=str(self.path), count=len(payload))
