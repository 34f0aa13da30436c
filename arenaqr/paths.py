from __future__ import annotations

import sys
from pathlib import Path


def app_root() -> Path:
    """Return the base directory for reading/writing app data.

    - When frozen (PyInstaller), use the executable directory.
    - Otherwise, use current working directory so local runs behave intuitively.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path.cwd()


def config_dir() -> Path:
    return app_root() / "setting"


def config_file() -> Path:
    return config_dir() / "config.json"


def log_dir() -> Path:
    return app_root() / "logs"


def output_dir(folder: str = "cards") -> Path:
    p = Path(folder)
    return p if p.is_absolute() else app_root() / p


def ensure_dirs() -> None:
    config_dir().mkdir(parents=True, exist_ok=True)
