"""TOML settings for the REST transport, with an optional overlay file.

The base file is required. An overlay (for example a per-deployment file
mounted next to it) is merged over the base table by table. Both files are
watched and every reload is pushed to the registered callbacks, which is how
``RestClient.on_config_change`` picks up a new ``[api]`` section.
"""

import asyncio
import logging
import tomllib
from collections.abc import Callable, Coroutine
from copy import deepcopy
from pathlib import Path
from typing import Any

from watchfiles import awatch

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]

WATCH_DEBOUNCE_MS = 2000


def merge_tables(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``overlay`` merged in; nested tables merge, values replace."""
    merged = deepcopy(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_tables(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


class Config:
    """Base TOML file plus optional overlay, reloadable at runtime.

    Args:
        base_path: Required TOML file
        overlay_path: Optional TOML file merged over the base

    Example:
        config = Config("config.toml", overlay_path="/etc/discord-menus/overlay.toml")
        config.load()
        http = RestClient.from_config(config)
        config.on_change(http.on_config_change)
        await config.start_watching()
    """

    def __init__(
        self,
        base_path: Path | str,
        overlay_path: Path | str | None = None,
    ):
        self.base_path = Path(base_path)
        self.overlay_path = Path(overlay_path) if overlay_path is not None else None
        self._data: dict[str, Any] = {}
        self._callbacks: list[ChangeCallback] = []
        self._watch_task: asyncio.Task | None = None

    @property
    def files(self) -> list[Path]:
        """Files whose changes trigger a reload."""
        return [p for p in (self.base_path, self.overlay_path) if p is not None]

    def load(self) -> None:
        """Read the base file and merge the overlay over it.

        An overlay that is missing or not valid TOML is skipped.

        Raises:
            FileNotFoundError: If the base file does not exist
            tomllib.TOMLDecodeError: If the base file is not valid TOML
        """
        if not self.base_path.exists():
            raise FileNotFoundError(f"Base config not found: {self.base_path}")
        data = self._read(self.base_path)

        overlay = self._read_overlay()
        if overlay:
            data = merge_tables(data, overlay)
        self._data = data

    def _read(self, path: Path) -> dict[str, Any]:
        with open(path, "rb") as f:
            return tomllib.load(f)

    def _read_overlay(self) -> dict[str, Any]:
        if self.overlay_path is None or not self.overlay_path.exists():
            return {}
        try:
            return self._read(self.overlay_path)
        except tomllib.TOMLDecodeError as e:
            logger.warning("Ignoring invalid overlay %s: %s", self.overlay_path, e)
            return {}

    def get(self, *keys: str, default: Any = None) -> Any:
        """Look up a nested value, e.g. ``get("api", "timeout")``."""
        value: Any = self._data
        for key in keys:
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value

    @property
    def data(self) -> dict[str, Any]:
        """Deep copy of the merged settings."""
        return deepcopy(self._data)

    def on_change(self, callback: ChangeCallback) -> None:
        """Register a coroutine called with the merged settings after each reload."""
        self._callbacks.append(callback)

    async def reload(self) -> None:
        """Reload from disk and notify callbacks.

        A failing callback is logged; the remaining callbacks still run.
        """
        self.load()
        for callback in self._callbacks:
            try:
                await callback(self.data)
            except Exception:
                logger.exception("Config callback %r failed", callback)

    async def start_watching(self) -> None:
        """Reload whenever one of the config files changes."""
        if self._watch_task is not None:
            return
        directories = sorted({p.parent for p in self.files})
        self._watch_task = asyncio.create_task(self._watch(directories))
        logger.info("Watching %s for config changes", ", ".join(map(str, directories)))

    async def stop_watching(self) -> None:
        if self._watch_task is None:
            return
        self._watch_task.cancel()
        try:
            await self._watch_task
        except asyncio.CancelledError:
            pass
        self._watch_task = None
        logger.info("Config watcher stopped")

    async def _watch(self, directories: list[Path]) -> None:
        files = set(self.files)
        async for changes in awatch(*directories, debounce=WATCH_DEBOUNCE_MS):
            changed = {Path(path) for _change, path in changes} & files
            if not changed:
                continue
            logger.info("Config changed: %s", ", ".join(map(str, sorted(changed))))
            try:
                await self.reload()
            except (OSError, tomllib.TOMLDecodeError):
                logger.exception("Config reload failed, keeping previous settings")
