from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .paths import config_file, ensure_dirs, output_dir
from .settings import RenderSettings

log = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "render": {},                 # RenderSettings overrides, see settings.py
    "output": {"folder": "cards"},
    "network": {"timeout": 30.0},
    "ui": {"last_url": ""},
    "debug": False,
}


class AppConfig:
    def __init__(self, path: Path | str | None = None) -> None:
        if path is None:
            ensure_dirs()
        self.path = Path(path) if path is not None else config_file()
        self.data: Dict[str, Any] = json.loads(json.dumps(DEFAULTS))  # deep copy
        if self.path.exists():
            self.load()

    def load(self) -> None:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                incoming = json.load(f)
        except (OSError, ValueError) as e:
            # Keep defaults on error
            log.warning("Could not read %s, using defaults: %s", self.path, e)
            return
        if isinstance(incoming, dict):
            self._merge(self.data, incoming)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(self.data, f, ensure_ascii=False, indent=2)

    def _merge(self, target: Dict[str, Any], src: Dict[str, Any]) -> None:
        for k, v in src.items():
            if isinstance(v, dict) and isinstance(target.get(k), dict):
                self._merge(target[k], v)
            else:
                target[k] = v

    def render_settings(self) -> RenderSettings:
        return RenderSettings.from_mapping(self.data.get("render") or {})

    def set_render(self, key: str, value: Any) -> None:
        self.data.setdefault("render", {})[key] = value

    @property
    def output_folder(self) -> Path:
        return output_dir(str(self.data.get("output", {}).get("folder") or "cards"))

    @output_folder.setter
    def output_folder(self, p: str) -> None:
        self.data.setdefault("output", {})["folder"] = str(p)

    @property
    def timeout(self) -> float:
        try:
            return float(self.data["network"]["timeout"])  # type: ignore
        except (KeyError, TypeError, ValueError):
            return 30.0

    @property
    def last_url(self) -> str:
        return str(self.data.get("ui", {}).get("last_url", ""))

    @last_url.setter
    def last_url(self, url: str) -> None:
        self.data.setdefault("ui", {})["last_url"] = url

    @property
    def debug(self) -> bool:
        return bool(self.data.get("debug", False))

    @debug.setter
    def debug(self, v: bool) -> None:
        self.data["debug"] = bool(v)
