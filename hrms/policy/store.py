"""File-backed store for the group working-hours policy.

A ``PolicyStore`` never caches: every ``get_group_working_hours()`` re-reads
the JSON file so a computation always starts from the latest saved policy.
Writes are serialised with a process-wide lock and land atomically through
``os.replace``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from hrms.common.exceptions import ValidationException
from hrms.policy.schemas import DEFAULT_GROUP_WORKING_HOURS, GroupWorkingHours

logger = logging.getLogger(__name__)

_write_lock = threading.Lock()


def _deep_merge(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _validation_errors(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        name = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        errors.setdefault(name, []).append(err.get("msg", "Invalid value"))
    return errors


class PolicyStore:
    """Read and update the group policy document at *path*."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    # ── Raw document ────────────────────────────────────────────────

    def _read_raw(self) -> dict[str, Any]:
        if not self.path.exists():
            defaults = copy.deepcopy(DEFAULT_GROUP_WORKING_HOURS)
            try:
                self._write_raw(defaults)
            except OSError as exc:
                logger.error("Could not write default policy to %s: %s", self.path, exc)
            return defaults

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error loading policy from %s: %s; using defaults", self.path, exc)
            return copy.deepcopy(DEFAULT_GROUP_WORKING_HOURS)

        if not isinstance(data, dict):
            logger.error("Policy file %s does not hold an object; using defaults", self.path)
            return copy.deepcopy(DEFAULT_GROUP_WORKING_HOURS)
        return data

    def _write_raw(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    # ── Public API ──────────────────────────────────────────────────

    def get_group_working_hours(self) -> GroupWorkingHours:
        """Load both group policies, tolerating malformed fields."""
        return GroupWorkingHours.model_validate(self._read_raw())

    def update_group_working_hours(
        self,
        partial: Optional[dict[str, Any]],
    ) -> GroupWorkingHours:
        """Deep-merge *partial* into the stored document and persist it.

        Snake_case field names are accepted and stored under their camelCase
        aliases. Raises ``ValidationException`` for unknown keys or when the
        merged document contains a malformed value; nothing is written in
        either case.
        """
        if not isinstance(partial, dict):
            raise ValidationException({"settings": ["Expected a JSON object."]})

        unknown: list[str] = []
        patch = GroupWorkingHours.to_aliases(partial, unknown)
        if unknown:
            raise ValidationException(
                {key: ["Unknown policy setting."] for key in unknown}
            )

        with _write_lock:
            merged = _deep_merge(self._read_raw(), patch)
            try:
                policy = GroupWorkingHours.model_validate(
                    merged, context={"strict": True},
                )
            except ValidationError as exc:
                raise ValidationException(_validation_errors(exc)) from exc

            self._write_raw(merged)

        logger.info("Saved group working hours to %s", self.path)
        return policy
