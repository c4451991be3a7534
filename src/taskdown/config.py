"""User settings stored as JSON at ~/.config/taskdown/settings.json."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from taskdown.tasks.codec import TaskCodec
from taskdown.tasks.models import TagStyle


class SettingsError(ValueError):
    """The settings file exists but cannot be used."""


def default_settings_path() -> Path:
    """Return the default path for settings storage."""
    return Path.home() / ".config" / "taskdown" / "settings.json"


@dataclass
class Settings:
    """Defaults applied when the command line does not say otherwise.

    tag_style must match how the user's notes write tags; it is never
    guessed from note content.
    """

    tag_style: TagStyle = TagStyle.wrapped
    notes_path: str | None = None
    default_query: str = ""

    def codec(self) -> TaskCodec:
        return TaskCodec(tag_style=self.tag_style)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag_style": str(self.tag_style),
            "notes_path": self.notes_path,
            "default_query": self.default_query,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        try:
            tag_style = TagStyle(data.get("tag_style", TagStyle.wrapped))
        except ValueError as exc:
            raise SettingsError(f"Unknown tag_style: {data.get('tag_style')!r}") from exc
        return cls(
            tag_style=tag_style,
            notes_path=data.get("notes_path"),
            default_query=data.get("default_query", ""),
        )


class SettingsStore:
    """Loads and saves ``Settings``; a missing file means defaults."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        if not self._path.exists():
            return Settings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SettingsError(f"Invalid settings file {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Invalid settings file {self._path}: expected an object")
        return Settings.from_dict(data)

    def save(self, settings: Settings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
