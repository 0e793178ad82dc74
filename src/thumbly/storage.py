from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from thumbly.config import settings

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]
THEMES: tuple[Theme, ...] = ("light", "dark")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Preferences:
    theme: Theme | None = None
    updated_at: str | None = None


class PreferenceStore:
    """
    File-backed UI preferences. Only the light/dark theme lives here; it is
    initialised from the stored value or the system default and persisted
    on every change.
    """

    def __init__(self, root_dir: Path | None = None) -> None:
        self.root_dir = Path(root_dir or settings.data_dir).resolve()
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.root_dir / "preferences.json"

    def read(self) -> Preferences:
        if not self.path.exists():
            return Preferences()
        try:
            data = json.loads(self.path.read_text("utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("ignoring unreadable preferences file %s", self.path)
            return Preferences()
        theme = data.get("theme") if isinstance(data, dict) else None
        if theme not in THEMES:
            theme = None
        return Preferences(theme=theme, updated_at=data.get("updated_at") if theme else None)

    def _write(self, prefs: Preferences) -> None:
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(asdict(prefs), indent=2), "utf-8")
        os.replace(tmp, self.path)

    def initial_theme(self, system_prefers_dark: bool = False) -> Theme:
        stored = self.read().theme
        if stored:
            return stored
        theme: Theme = "dark" if system_prefers_dark else "light"
        self._write(Preferences(theme=theme, updated_at=_now_iso()))
        return theme

    def set_theme(self, theme: str) -> Theme:
        if theme not in THEMES:
            raise ValueError(f"theme must be one of {', '.join(THEMES)}")
        self._write(Preferences(theme=theme, updated_at=_now_iso()))  # type: ignore[arg-type]
        return theme  # type: ignore[return-value]

    def toggle_theme(self, system_prefers_dark: bool = False) -> Theme:
        current = self.initial_theme(system_prefers_dark)
        return self.set_theme("dark" if current == "light" else "light")
