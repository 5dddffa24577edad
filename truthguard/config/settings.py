from __future__ import annotations

import json
import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

CONFIG_FILE = Path("truthguard_config.json")

ENV_OVERRIDES = {
    "TRUTHGUARD_HOST": "host",
    "TRUTHGUARD_PORT": "port",
    "TRUTHGUARD_SECRET_KEY": "secret_key",
    "TRUTHGUARD_LOG_LEVEL": "log_level",
}

DEFAULT_CONFIG: dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 5001,
    "cors_origin": "http://localhost:8000",
    "min_delay_seconds": 1.5,
    "max_delay_seconds": 2.5,
    "history_capacity": 10,
    "max_sessions": 1000,
    "analysis_attempts": 1,
    "log_file": "truthguard.log",
    "log_level": "INFO",
    "test_mode": False,
    "secret_key": None,
}


@dataclass
class Settings:
    """Holds all application configuration loaded from the config file and environment."""

    host: str = "127.0.0.1"
    port: int = 5001
    cors_origin: str = "http://localhost:8000"
    min_delay_seconds: float = 1.5
    max_delay_seconds: float = 2.5
    history_capacity: int = 10
    max_sessions: int = 1000
    analysis_attempts: int = 1
    log_file: str = "truthguard.log"
    log_level: str = "INFO"
    test_mode: bool = False
    secret_key: str = ""

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def _load_config_file(path: Path = CONFIG_FILE) -> dict[str, Any]:
    if path.exists():
        with open(path, encoding="utf-8") as f:
            user_config = json.load(f)
        merged = {**DEFAULT_CONFIG, **user_config}
        return merged
    return dict(DEFAULT_CONFIG)


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    for var, key in ENV_OVERRIDES.items():
        value = os.getenv(var)
        if value:
            config[key] = value
    return config


def _validate(config: dict[str, Any]) -> list[str]:
    problems: list[str] = []

    try:
        config["port"] = int(config["port"])
    except (TypeError, ValueError):
        problems.append(f"port={config['port']!r} is not an integer")

    try:
        config["min_delay_seconds"] = float(config["min_delay_seconds"])
        config["max_delay_seconds"] = float(config["max_delay_seconds"])
        if not 0 <= config["min_delay_seconds"] <= config["max_delay_seconds"]:
            problems.append("min_delay_seconds/max_delay_seconds must satisfy 0 <= min <= max")
    except (TypeError, ValueError):
        problems.append("min_delay_seconds/max_delay_seconds must be numbers")

    for key in ("history_capacity", "max_sessions", "analysis_attempts"):
        value = config[key]
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            problems.append(f"{key}={value!r} must be a positive integer")

    level = str(config["log_level"]).upper()
    if not isinstance(logging.getLevelName(level), int):
        problems.append(f"log_level={config['log_level']!r} is not a logging level")
    config["log_level"] = level

    return problems


def load_settings(config_file: Path = CONFIG_FILE) -> Settings:
    config = _apply_env_overrides(_load_config_file(config_file))
    problems = _validate(config)
    if problems:
        raise EnvironmentError(
            f"Invalid configuration: {'; '.join(problems)}. "
            f"Please check {config_file} and your .env file."
        )

    return Settings(
        host=config.get("host", DEFAULT_CONFIG["host"]),
        port=config["port"],
        cors_origin=config.get("cors_origin", DEFAULT_CONFIG["cors_origin"]),
        min_delay_seconds=config["min_delay_seconds"],
        max_delay_seconds=config["max_delay_seconds"],
        history_capacity=config["history_capacity"],
        max_sessions=config["max_sessions"],
        analysis_attempts=config["analysis_attempts"],
        log_file=config.get("log_file", DEFAULT_CONFIG["log_file"]),
        log_level=config["log_level"],
        test_mode=bool(config.get("test_mode", DEFAULT_CONFIG["test_mode"])),
        secret_key=config.get("secret_key") or secrets.token_hex(32),
    )
