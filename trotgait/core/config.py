"""Run configuration loaded from config.yaml"""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union
import numpy as np
import yaml

CONFIG_FILENAME = "config.yaml"
SEARCH_DEPTH = 5

_MISSING = object()


class Config:
    """
    Shared run configuration with dot-separated key access.

    ``Config()`` returns the one loaded instance, reading ``config.yaml``
    from the nearest enclosing directory on first use. Passing a path loads
    that file into the shared instance instead.
    """

    _instance: Optional["Config"] = None

    def __new__(cls, config_path: Optional[str] = None):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._data = {}
            instance._path = None
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[str] = None):
        if config_path is None and self._path is not None:
            return
        self._read(Path(config_path) if config_path else self._locate())

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance; the next ``Config()`` reads from disk."""
        cls._instance = None

    @staticmethod
    def _locate() -> Path:
        start = Path(__file__).resolve().parent
        for directory in [start, *start.parents][:SEARCH_DEPTH]:
            candidate = directory / CONFIG_FILENAME
            if candidate.is_file():
                return candidate
        raise FileNotFoundError(f"{CONFIG_FILENAME} not found above {start}")

    def _read(self, path: Path) -> None:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        self._data: Dict[str, Any] = data if isinstance(data, dict) else {}
        self._path = path

    def reload(self) -> None:
        self._read(self._path)

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def get(self, key: str, default: Any = None) -> Any:
        """
        Value at a dotted key, or ``default`` when any part is missing.

        Example:
            config.get("animation.fps", 60)
            config.get("placement.max_dimension")
        """
        value = self._lookup(key)
        return default if value is _MISSING else value

    def get_vector(self, key: str, default: Sequence[float]) -> np.ndarray:
        """A 3-component vector (e.g. a spawn position) as a float array."""
        value = self.get(key, default)
        vector = np.asarray(value, dtype=np.float64)
        if vector.shape != (3,):
            raise ValueError(f"Config key '{key}' must hold 3 numbers, got {value!r}")
        return vector

    def set(self, key: str, value: Any) -> None:
        """Override a dotted key for this run; nothing is written to disk."""
        *parents, leaf = key.split(".")
        node = self._data
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def save(self, path: Optional[Union[str, Path]] = None) -> None:
        with open(path or self._path, "w") as f:
            yaml.safe_dump(self._data, f, default_flow_style=False, sort_keys=False)

    def section(self, name: str) -> Dict[str, Any]:
        value = self._data.get(name)
        return value if isinstance(value, dict) else {}

    @property
    def app(self) -> Dict[str, Any]:
        return self.section("app")

    @property
    def skeleton(self) -> Dict[str, Any]:
        return self.section("skeleton")

    @property
    def placement(self) -> Dict[str, Any]:
        return self.section("placement")

    @property
    def animation(self) -> Dict[str, Any]:
        return self.section("animation")

    @property
    def export(self) -> Dict[str, Any]:
        return self.section("export")

    def __repr__(self) -> str:
        return f"Config({self._path})"
