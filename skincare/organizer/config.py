"""TOML configuration loader for the organizer."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .reconcile import MergeMode

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_CONFIG_PATH = "~/.config/skincare/organizer.toml"


@dataclass
class StorageConfig:
    path: str = "~/.config/skincare/organizer.db"


@dataclass
class ImportConfig:
    mode: str = MergeMode.MERGE.value


@dataclass
class DisplayConfig:
    warn_days: int = 30


@dataclass
class CameraConfig:
    index: int = 0
    save_dir: str = "/tmp/skincare"


@dataclass
class ReportConfig:
    font_path: str = ""


@dataclass
class AlertsConfig:
    enabled: bool = False
    schedule: str = "0 9 * * *"
    warn_days: int = 14


@dataclass
class OrganizerConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    import_: ImportConfig = field(default_factory=ImportConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    alerts: AlertsConfig = field(default_factory=AlertsConfig)


def load_config(path: str | Path | None = None) -> OrganizerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The database path can be overridden via ``SKINCARE_DB_PATH``.

    Raises:
        ValueError: If ``[import] mode`` is not ``replace`` or ``merge``.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sto = raw.get("storage", {})
    imp = raw.get("import", {})
    dsp = raw.get("display", {})
    cam = raw.get("camera", {})
    rpt = raw.get("report", {})
    alr = raw.get("alerts", {})

    # Environment variable wins over the file for the database location
    db_path = os.environ.get("SKINCARE_DB_PATH", "") or sto.get(
        "path", "~/.config/skincare/organizer.db"
    )

    mode = imp.get("mode", MergeMode.MERGE.value)
    try:
        MergeMode(mode)
    except ValueError:
        raise ValueError(
            f"Invalid import mode: {mode!r} (choose replace or merge)"
        ) from None

    return OrganizerConfig(
        storage=StorageConfig(path=db_path),
        import_=ImportConfig(mode=mode),
        display=DisplayConfig(warn_days=dsp.get("warn_days", 30)),
        camera=CameraConfig(
            index=cam.get("index", 0),
            save_dir=cam.get("save_dir", "/tmp/skincare"),
        ),
        report=ReportConfig(font_path=rpt.get("font_path", "")),
        alerts=AlertsConfig(
            enabled=alr.get("enabled", False),
            schedule=alr.get("schedule", "0 9 * * *"),
            warn_days=alr.get("warn_days", 14),
        ),
    )
