from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional
from bitflag.core.errors import ValidationError
from bitflag.core.flags import FlagSet, DEFAULT_WIDTH
from bitflag.core.logging import logger
from bitflag.core.mapping import MappingSource

SETTINGS_FILENAME = ".bitflag_settings.json"
SETTINGS_ENV = "BITFLAG_SETTINGS"

@dataclass
class SettingsData:
    unknown_flags: str = "raise"   # raise, ignore
    width: int = DEFAULT_WIDTH     # register width in bits
    log_level: str = "INFO"

    def normalize(self):
        if self.unknown_flags not in {"raise","ignore"}:
            self.unknown_flags = "raise"
        if isinstance(self.width, bool) or not isinstance(self.width, int) or self.width <= 0:
            self.width = DEFAULT_WIDTH
        if self.log_level not in {"DEBUG","INFO","WARN","ERROR"}:
            self.log_level = "INFO"

    @property
    def strict(self) -> bool:
        return self.unknown_flags == "raise"

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path

    @classmethod
    def _resolve_path(cls) -> Path:
        env = os.environ.get(SETTINGS_ENV)
        if env:
            return Path(env).expanduser()
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = Path(path) if path is not None else cls._resolve_path()
        if path.exists():
            try:
                known = {f.name for f in fields(SettingsData)}
                raw = json.loads(path.read_text())
                data = SettingsData(**{k: v for k, v in raw.items() if k in known})
                data.normalize()
                logger.debug("Loaded settings", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warn("Failed to parse settings, using defaults", error=str(e))
        return cls(SettingsData(), path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2))
            logger.debug("Settings saved", path=str(self.path))
        except OSError as e:
            logger.error("Failed to save settings", error=str(e))

    def update(self, **changes):
        """Apply changes, rejecting unknown keys and invalid values."""
        current = asdict(self.data)
        for key in changes:
            if key not in current:
                raise ValidationError(f"Unknown setting '{key}'")
        candidate = SettingsData(**{**current, **changes})
        candidate.normalize()
        bad = [k for k, v in changes.items() if getattr(candidate, k) != v]
        if bad:
            raise ValidationError(f"Invalid value for {', '.join(bad)}")
        self.data = candidate
        logger.set_level(self.data.log_level)

    def new_flagset(self, initial=0, mapping: MappingSource = ()) -> FlagSet:
        return FlagSet(initial, mapping, strict=self.data.strict, width=self.data.width)
