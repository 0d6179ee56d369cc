"""Solver logging with per-channel toggles.

Each channel maps to a stdlib logger named ``aimsolver.<channel>``. Disabled
channels drop records before they reach ``logging``, so solver hot paths can
log freely behind an ``if logger and logger.enabled`` check.
"""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

LOGGER_NAMESPACE = "aimsolver"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

DEFAULT_CHANNELS = {
    "roots": False,
    "ballistics": True,
}


@dataclass
class LoggerConfig:
    """Log level and channel switches, usually read from settings.json."""

    level: int = logging.INFO
    channels: Dict[str, bool] = None

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        defaults = cls(level=logging.INFO, channels=DEFAULT_CHANNELS.copy())
        if not settings_path.exists():
            return defaults
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return defaults
        level = logging.getLevelName(str(data.get("logLevel", "INFO")).upper())
        channels = DEFAULT_CHANNELS.copy()
        channels.update(data.get("logChannels", {}))
        return cls(level=level if isinstance(level, int) else logging.INFO, channels=channels)


class ChannelLogger:
    """Forwards records to ``logger`` only while ``enabled`` is set."""

    def __init__(self, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self.enabled = enabled

    def _log(self, level: int, msg: str, *args, **kwargs) -> None:
        if self.enabled:
            self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)


class SolverLogger:
    """Registry of solver channels sharing one root logger."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(level=config.level, format=LOG_FORMAT, stream=sys.stdout)
        logging.getLogger(LOGGER_NAMESPACE).setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {}
        for name, enabled in (config.channels or DEFAULT_CHANNELS).items():
            self._channels[name] = self._make_channel(name, bool(enabled))

    @staticmethod
    def _make_channel(name: str, enabled: bool) -> ChannelLogger:
        return ChannelLogger(logging.getLogger(f"{LOGGER_NAMESPACE}.{name}"), enabled)

    def channel(self, name: str) -> ChannelLogger:
        # Unknown channels start disabled until explicitly enabled.
        if name not in self._channels:
            self._channels[name] = self._make_channel(name, False)
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


def init_logger(settings_path: Optional[Path] = None) -> SolverLogger:
    """Build the solver logger from settings.json (or defaults)."""

    return SolverLogger(LoggerConfig.from_settings(settings_path or Path("settings.json")))


__all__ = ["SolverLogger", "LoggerConfig", "ChannelLogger", "DEFAULT_CHANNELS", "init_logger"]
