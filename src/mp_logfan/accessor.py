"""Process-wide accessor – builds one :class:`LoggerCore` on first use.

Lifecycle::

    configure(apm=OtelApm(), receiver=MongoLogReceiver(collection))  # optional, before first use
    log = get_logger()          # first call builds and wires the sinks
    assert get_logger() is log  # every later call returns the same instance

Settings come from ``LOGGER_*`` environment variables unless given
explicitly.  Once built, the instance cannot be reconfigured.
"""
from __future__ import annotations

import threading
from collections.abc import Callable

from mp_logfan import formats
from mp_logfan.apm import ApmCapability
from mp_logfan.clock import Clock
from mp_logfan.config import EnvSettingsLoader, LoggerSettings, SettingsLoader
from mp_logfan.core import LoggerCore, SinkRegistration
from mp_logfan.errors import AlreadyConfiguredError, ConfigError
from mp_logfan.sinks import ConsoleSink, DatabaseSink, Receiver, RotatingFileSink, SearchIndexSink


def build_logger(
    settings: LoggerSettings,
    *,
    apm: ApmCapability | None = None,
    receiver: Receiver | None = None,
    clock: Clock | None = None,
) -> LoggerCore:
    """Wire the sinks *settings* enables into a new :class:`LoggerCore`.

    Registration order: file, console, search index, database.

    Raises
    ------
    ConfigError
        When the database sink is enabled but no *receiver* was supplied.
    """
    registrations = [
        SinkRegistration(
            RotatingFileSink(settings.file_dir, settings.file_name, settings.file_backup_count),
            settings.level("file"),
            formats.file,
        ),
        SinkRegistration(ConsoleSink(), settings.level("console"), formats.cli),
    ]
    if settings.search_index_enabled:
        registrations.append(
            SinkRegistration(
                SearchIndexSink(
                    settings.search_index_url,
                    username=settings.search_index_username,
                    password=settings.search_index_password,
                ),
                settings.level("search_index"),
                formats.json,
            )
        )
    if settings.database_enabled:
        if receiver is None:
            raise ConfigError("database sink is enabled but no receiver was supplied")
        registrations.append(
            SinkRegistration(DatabaseSink(receiver), settings.level("database"), formats.json)
        )
    return LoggerCore(registrations, apm=apm, clock=clock)


class LoggerAccessor:
    """Holds the single :class:`LoggerCore` of a process.

    Tests create their own accessor (or call :meth:`reset`) to stay
    isolated from the module-level default.
    """

    def __init__(
        self,
        *,
        settings: LoggerSettings | None = None,
        loader: SettingsLoader | None = None,
        apm: ApmCapability | None = None,
        receiver: Receiver | None = None,
        builder: Callable[..., LoggerCore] = build_logger,
    ) -> None:
        self._settings = settings
        self._loader = loader or EnvSettingsLoader()
        self._apm = apm
        self._receiver = receiver
        self._builder = builder
        self._instance: LoggerCore | None = None
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._instance is not None

    def configure(
        self,
        *,
        settings: LoggerSettings | None = None,
        loader: SettingsLoader | None = None,
        apm: ApmCapability | None = None,
        receiver: Receiver | None = None,
    ) -> None:
        """Replace construction inputs; only allowed before the first :meth:`get`."""
        with self._lock:
            if self._instance is not None:
                raise AlreadyConfiguredError("logger already built; configure() must run before first use")
            if settings is not None:
                self._settings = settings
            if loader is not None:
                self._loader = loader
            if apm is not None:
                self._apm = apm
            if receiver is not None:
                self._receiver = receiver

    def get(self) -> LoggerCore:
        instance = self._instance
        if instance is not None:
            return instance
        with self._lock:
            if self._instance is None:
                settings = self._settings or self._loader.load(LoggerSettings)
                self._instance = self._builder(settings, apm=self._apm, receiver=self._receiver)
            return self._instance

    def close(self) -> None:
        """Flush and close every sink, then forget the instance."""
        with self._lock:
            instance, self._instance = self._instance, None
        if instance is not None:
            instance.close()

    reset = close


_default = LoggerAccessor()


def get_logger() -> LoggerCore:
    """Return the process-wide :class:`LoggerCore`, building it on first call."""
    return _default.get()


def configure(**kwargs: object) -> None:
    """Configure the process-wide accessor; see :meth:`LoggerAccessor.configure`."""
    _default.configure(**kwargs)  # type: ignore[arg-type]


__all__ = [
    "LoggerAccessor",
    "build_logger",
    "configure",
    "get_logger",
]
