"""Logger settings – which sinks to register and at which levels."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_logfan.errors import InvalidSettingValueError
from mp_logfan.levels import LogLevel


@dataclasses.dataclass
class LoggerSettings:
    """12-factor settings read from ``LOGGER_*`` environment variables.

    Console and file sinks are always registered; the search-index and
    database sinks only when their ``*_enabled`` flag is set.
    """

    _prefix: ClassVar[str] = "LOGGER"

    console_level: str = LogLevel.INFO.value
    file_dir: str = "logs"
    file_name: str = "logs.log"
    file_level: str = LogLevel.VERBOSE.value
    file_backup_count: int = 14
    search_index_enabled: bool = False
    search_index_url: str = ""
    search_index_username: str | None = None
    search_index_password: str | None = None
    search_index_level: str = LogLevel.VERBOSE.value
    database_enabled: bool = False
    database_level: str = LogLevel.VERBOSE.value

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        for name in ("console_level", "file_level", "search_index_level", "database_level"):
            value = getattr(self, name)
            if LogLevel.parse(value) is None:
                raise InvalidSettingValueError(
                    name, value, f"expected one of {[lvl.value for lvl in LogLevel]}"
                )
        if self.file_backup_count < 0:
            raise InvalidSettingValueError("file_backup_count", self.file_backup_count, "must be >= 0")
        if self.search_index_enabled and not self.search_index_url:
            raise InvalidSettingValueError(
                "search_index_url", self.search_index_url, "required when the search index is enabled"
            )

    def level(self, name: str) -> LogLevel:
        """Parsed :class:`LogLevel` of the ``<name>_level`` field."""
        return LogLevel(str(getattr(self, f"{name}_level")).lower())


__all__ = ["LoggerSettings"]
