"""
Learner preferences stored as JSON, overridable from the environment.

Precedence, lowest first: DEFAULTS, the settings file, environment variables.
Values that do not fit a key (unknown language code, non-positive retry
count, wrong type) fall back to the default with a warning instead of
breaking startup.
"""

import copy
import json
import os
import uuid
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, Optional

from .languages import LANG_CONFIG
from .settings import Config
from .topics import CUSTOM_TOPIC, TOPICS


def _positive(value: Any) -> bool:
    return value > 0


# Extra checks beyond "has the same type as the default"
_VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    "AI_PROVIDER": lambda v: v in ("gemini", "openai"),
    "RETRIES": _positive,
    "BASE_BACKOFF_MS": _positive,
    "TIMEOUT": _positive,
    "COOLDOWN_SECONDS": lambda v: v >= 0,
    "TEMPERATURE": lambda v: 0.0 <= v <= 2.0,
    "NATIVE_LANG": lambda v: v in LANG_CONFIG,
    "LEARNING_LANG": lambda v: v in LANG_CONFIG,
    "TOPIC": lambda v: v in TOPICS or v == CUSTOM_TOPIC,
}


class SettingsManager:
    """
    Process-wide settings store.

    API keys are read by Config from the environment and never written here.
    Deck and cooldown state are session state and are never persisted.

    Usage:
        settings = SettingsManager()
        retries = settings.get("RETRIES")
        settings.set("LEARNING_LANG", "ja-JP")
    """

    _instance: Optional["SettingsManager"] = None
    _lock: Lock = Lock()

    DEFAULTS: Dict[str, Any] = {
        # Generation endpoint
        "AI_PROVIDER": "gemini",
        "GEMINI_MODEL": Config.GEMINI_MODEL,
        "OPENAI_MODEL": Config.OPENAI_MODEL,
        "RETRIES": Config.RETRIES,
        "BASE_BACKOFF_MS": Config.BASE_BACKOFF_MS,
        "TIMEOUT": Config.TIMEOUT,
        "TEMPERATURE": 0.9,

        # Deck session
        "COOLDOWN_SECONDS": Config.COOLDOWN_SECONDS,
        "NATIVE_LANG": "en-US",
        "LEARNING_LANG": "es-ES",
        "TOPIC": "common_conversation",

        # Speech
        "SPEECH_PROVIDER": Config.SPEECH_PROVIDER,
        "MEDIA_DIR": Config.MEDIA_DIR,
    }

    def __new__(cls, settings_file: Optional[str] = None) -> "SettingsManager":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._ready = False
        return cls._instance

    def __init__(self, settings_file: Optional[str] = None) -> None:
        """
        Args:
            settings_file: JSON file to read and write (defaults to Config.SETTINGS_FILE).
                          Ignored after the first construction.
        """
        if self._ready:
            return
        self.path = Path(settings_file or Config.SETTINGS_FILE)
        self._values: Dict[str, Any] = {}
        self._write_lock = Lock()
        self.reload()
        self._ready = True

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """Rebuild values from defaults, the settings file and the environment."""
        values = dict(self.DEFAULTS)
        values.update(self._read_file())

        for key in self.DEFAULTS:
            raw = os.environ.get(key)
            if raw is not None:
                values[key] = self._from_env(key, raw)

        self._values = {key: self._checked(key, value) for key, value in values.items()}

    def _read_file(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            print(f"  [!] Ignoring unreadable settings file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            print(f"  [!] Ignoring settings file {self.path}: top level is not an object")
            return {}
        return data

    def _from_env(self, key: str, raw: str) -> Any:
        """Convert an environment string to the type of the key's default."""
        default = self.DEFAULTS[key]
        if isinstance(default, bool):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        for kind in (int, float):
            if isinstance(default, kind):
                try:
                    return kind(raw)
                except ValueError:
                    print(f"  [!] {key}={raw!r} is not a valid {kind.__name__}, using {default!r}")
                    return default
        return raw

    def _is_valid(self, key: str, value: Any) -> bool:
        if key not in self.DEFAULTS:
            return True
        default = self.DEFAULTS[key]
        if isinstance(value, bool) and not isinstance(default, bool):
            return False
        # int is acceptable where a float is expected, never the reverse
        expected = (int, float) if isinstance(default, float) else type(default)
        if not isinstance(value, expected):
            return False
        check = _VALIDATORS.get(key)
        return check is None or check(value)

    def _checked(self, key: str, value: Any) -> Any:
        """Return ``value`` if it suits ``key``, otherwise the default."""
        if self._is_valid(key, value):
            return value
        default = self.DEFAULTS[key]
        print(f"  [!] Invalid setting {key}={value!r}, using {default!r}")
        return default

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Read a value; containers come back as copies."""
        value = self._values.get(key, default)
        return copy.deepcopy(value) if isinstance(value, (dict, list)) else value

    def set(self, key: str, value: Any, persist: bool = True) -> None:
        """
        Change a value.

        Raises:
            ValueError: If the value does not suit a known key
        """
        if not self._is_valid(key, value):
            raise ValueError(f"Invalid value for {key}: {value!r}")
        self._values[key] = value
        if persist:
            self.save()

    def get_all(self) -> Dict[str, Any]:
        return dict(self._values)

    def reset(self, key: Optional[str] = None) -> None:
        """Restore one key (or all keys when ``key`` is None) to DEFAULTS and save."""
        if key is None:
            self._values = dict(self.DEFAULTS)
        elif key in self.DEFAULTS:
            self._values[key] = self.DEFAULTS[key]
        self.save()

    def save(self) -> None:
        """Write all values; temp file then rename so a crash never leaves half a file."""
        with self._write_lock:
            temp_path = self.path.with_name(f"{self.path.name}.{uuid.uuid4().hex[:8]}.tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                temp_path.write_text(
                    json.dumps(self._values, indent=2, ensure_ascii=False), encoding="utf-8"
                )
                os.replace(temp_path, self.path)
            except OSError as e:
                print(f"  [!] Could not save settings to {self.path}: {e}")
            finally:
                if temp_path.exists():
                    temp_path.unlink()

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the singleton so the next construction reloads (tests use this)."""
        with cls._lock:
            cls._instance = None
