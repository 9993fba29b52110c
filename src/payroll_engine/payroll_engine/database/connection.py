from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import ClassVar

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "payroll_db")),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        )


class DatabaseConnection:
    """Connection factory, one shared instance per DBConfig.

    Connections are short-lived: every `db_cursor` block opens its own, so
    payroll worker threads never share one.
    """

    _instances: ClassVar[dict[DBConfig, "DatabaseConnection"]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._lock:
            if config not in cls._instances:
                cls._instances[config] = cls(config)
            return cls._instances[config]

    def connect(self, *, with_database: bool = True):
        kwargs = dict(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            charset="utf8mb4",
            connection_timeout=self._config.connect_timeout,
            autocommit=False,
        )
        if with_database:
            kwargs["database"] = self._config.database
        return mysql.connector.connect(**kwargs)
