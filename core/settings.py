"""Загрузка конфигурации импортёра документов из YAML и переменных окружения."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml

from importdoc.errors import ConfigError


DEFAULT_CONFIG_PATH = "importdocument.yaml"
CONFIG_ENV_VAR = "IMPORTDOC_CONFIG"

AUTH_NONE = "None"
AUTH_AZURE_AD = "AzureAd"
AUTH_TYPES = (AUTH_NONE, AUTH_AZURE_AD)


@dataclass(frozen=True)
class ServiceConfig:
    uri: str = "http://localhost:40443/"


@dataclass(frozen=True)
class AuthConfig:
    type: str = AUTH_NONE
    client_id: str = ""
    redirect_uri: str = "http://localhost"
    instance: str = "https://login.microsoftonline.com"
    tenant_id: str = ""
    scopes: str = "access_as_user"
    backend_client_id: str = ""


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"
    fmt: str = "json"
    file: Optional[str] = None
    module_levels: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class JournalConfig:
    path: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    service: ServiceConfig = field(default_factory=ServiceConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    journal: JournalConfig = field(default_factory=JournalConfig)


_SECTIONS = {
    "service": ServiceConfig,
    "auth": AuthConfig,
    "logging": LoggingConfig,
    "journal": JournalConfig,
}

# (section, key, env var)
_ENV_OVERRIDES = (
    ("service", "uri", "IMPORTDOC_SERVICE_URI"),
    ("auth", "type", "IMPORTDOC_AUTH_TYPE"),
    ("auth", "client_id", "IMPORTDOC_CLIENT_ID"),
    ("auth", "tenant_id", "IMPORTDOC_TENANT_ID"),
    ("auth", "backend_client_id", "IMPORTDOC_BACKEND_CLIENT_ID"),
    ("logging", "level", "IMPORTDOC_LOG_LEVEL"),
    ("journal", "path", "IMPORTDOC_JOURNAL_PATH"),
)


def _build_section(name: str, payload: Any):
    cls = _SECTIONS[name]
    if payload is None:
        return cls()
    if not isinstance(payload, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    values = {key: value for key, value in payload.items() if key in known}
    return cls(**values)


def _resolve_path(path: Optional[str]) -> str:
    if path:
        return path
    return os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def load_config(path: Optional[str] = None) -> AppConfig:
    """Read config file (if present) and apply environment overrides."""

    config_path = Path(_resolve_path(path))
    raw: Dict[str, Any] = {}
    if config_path.is_file():
        with config_path.open("r", encoding="utf-8") as file:
            try:
                loaded = yaml.safe_load(file)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config root must be a mapping: {config_path}")
        raw = loaded

    sections = {name: _build_section(name, raw.get(name)) for name in _SECTIONS}

    for section, key, env_name in _ENV_OVERRIDES:
        value = os.getenv(env_name)
        if value:
            sections[section] = replace(sections[section], **{key: value})

    return AppConfig(**sections)


def _is_absolute_http_uri(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_config(config: AppConfig) -> None:
    """Raise ConfigError describing every problem found."""

    problems: List[str] = []

    # YAML scalars may come back as int/bool/list; the rest of the checks need strings
    typed = [
        ("service.uri", config.service.uri),
        ("logging.level", config.logging.level),
        ("logging.fmt", config.logging.fmt),
    ]
    typed += [(f"auth.{f.name}", getattr(config.auth, f.name)) for f in fields(AuthConfig)]
    for name, value in typed:
        if not isinstance(value, str):
            problems.append(f"{name} must be a string, got {type(value).__name__}")
    for name, value in (("logging.file", config.logging.file), ("journal.path", config.journal.path)):
        if value is not None and not isinstance(value, str):
            problems.append(f"{name} must be a string, got {type(value).__name__}")
    module_levels = config.logging.module_levels
    if module_levels is not None and not isinstance(module_levels, dict):
        problems.append("logging.module_levels must be a mapping")
    elif module_levels and not all(isinstance(level, str) for level in module_levels.values()):
        problems.append("logging.module_levels values must be strings")
    if problems:
        raise ConfigError("; ".join(problems))

    if not config.service.uri:
        problems.append("service.uri is not configured")
    elif not _is_absolute_http_uri(config.service.uri):
        problems.append(f"service.uri is not an absolute http(s) URI: {config.service.uri}")

    auth = config.auth
    if auth.type not in AUTH_TYPES:
        problems.append(f"auth.type must be one of {', '.join(AUTH_TYPES)}, got '{auth.type}'")
    elif auth.type == AUTH_AZURE_AD:
        for name in ("client_id", "redirect_uri", "instance", "tenant_id", "scopes", "backend_client_id"):
            if not getattr(auth, name):
                problems.append(f"auth.{name} is required for {AUTH_AZURE_AD} authentication")

    if problems:
        raise ConfigError("; ".join(problems))
