from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from symstore.exceptions import ConfigurationError

CONFIG_ENV = "SYMBOLS_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "symbols" / "symbols.yaml"
DEFAULT_DEBUGINFOD_URL = "https://debuginfod.elfutils.org/"

load_dotenv()


class Access(str, Enum):
    READ = "read"
    READ_WRITE = "readwrite"


_ACCESS_ALIASES = {
    "read": "read",
    "readwrite": "readwrite",
    "write": "readwrite",
    "full": "readwrite",
}


class HttpSettings(BaseModel):
    type: Literal["http"] = "http"
    url: str


class S3Settings(BaseModel):
    type: Literal["s3"] = "s3"
    bucket: str
    region: str
    prefix: str = ""
    profile: str | None = None
    endpoint_url: str | None = None


class B2Settings(BaseModel):
    type: Literal["b2"] = "b2"
    bucket: str
    endpoint: str
    prefix: str = ""
    key_id_env: str = "B2_KEY_ID"
    key_env: str = "B2_KEY"

    @property
    def key_id(self) -> str:
        return os.getenv(self.key_id_env, "")

    @property
    def key(self) -> str:
        return os.getenv(self.key_env, "")


class SymbolServerSettings(BaseModel):
    type: Literal["symsrv"] = "symsrv"
    project: str
    url: str = "https://symbolserver.com"
    token_env: str = "SYMBOLS_TOKEN"
    timeout_seconds: float = Field(60.0, gt=0.0)


class PathSettings(BaseModel):
    type: Literal["path"] = "path"
    path: Path


StorageSettings = Annotated[
    Union[HttpSettings, S3Settings, B2Settings, SymbolServerSettings, PathSettings],
    Field(discriminator="type"),
]


class ServerSettings(BaseModel):
    name: str | None = None
    access: Access = Access.READ
    storage: StorageSettings

    @classmethod
    def from_mapping(cls, raw: Any) -> "ServerSettings":
        """Accept the flat YAML form: ``{name, access, type, <storage fields>}``."""
        if not isinstance(raw, dict):
            raise ValueError("each server entry must be a mapping")
        data = dict(raw)
        name = data.pop("name", None)
        access = data.pop("access", "read")
        if isinstance(data.get("type"), str):
            data["type"] = data["type"].lower()
        return cls(name=name, access=access, storage=data)

    @field_validator("access", mode="before")
    @classmethod
    def _normalize_access(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _ACCESS_ALIASES.get(value.strip().lower(), value)
        return value

    @property
    def writable(self) -> bool:
        return self.access is Access.READ_WRITE

    @property
    def label(self) -> str:
        return self.name or self.storage.type


def _default_servers() -> list[ServerSettings]:
    return [ServerSettings(access=Access.READ, storage=HttpSettings(url=DEFAULT_DEBUGINFOD_URL))]


class Settings(BaseModel):
    servers: list[ServerSettings] = Field(default_factory=_default_servers)
    publish_aliases: bool = False
    workers: int = Field(1, ge=1, le=64)

    @field_validator("servers", mode="before")
    @classmethod
    def _flatten_servers(cls, value: Any) -> Any:
        if value is None:
            return _default_servers()
        if not isinstance(value, list):
            raise ValueError("servers must be a list")
        return [
            item if isinstance(item, ServerSettings) else ServerSettings.from_mapping(item)
            for item in value
        ]

    def upload_server(self, name: str | None = None) -> ServerSettings:
        """Return the server to publish to: by name, else the first writable one."""
        if name is not None:
            for server in self.servers:
                if server.name == name:
                    if not server.writable:
                        raise ConfigurationError(f"Server '{name}' is not writable", {"server": name})
                    return server
            raise ConfigurationError(f"No server named '{name}' in config", {"server": name})

        for server in self.servers:
            if server.writable:
                return server
        raise ConfigurationError("No server specified in config for upload")

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from a YAML configuration file.

        Args:
            path: Optional explicit configuration file. Without it the
                SYMBOLS_CONFIG environment variable is consulted, then
                ~/.config/symbols/symbols.yaml.

        Returns:
            Settings instance. Built-in defaults are used when no file is
            found at the implicit locations.

        Raises:
            ConfigurationError: If an explicit file is missing or the
                configuration is invalid.
        """
        explicit = path or (Path(os.environ[CONFIG_ENV]) if os.getenv(CONFIG_ENV) else None)
        config_path = explicit or DEFAULT_CONFIG_PATH
        if not config_path.exists():
            if explicit:
                raise ConfigurationError(f"Configuration file not found: {config_path}", {"path": str(config_path)})
            return cls()

        try:
            with config_path.open("r", encoding="utf-8") as fp:
                payload = yaml.safe_load(fp) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Failed to read config at '{config_path}': {exc}") from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(f"Malformed config at '{config_path}': expected a mapping")

        try:
            return cls(**payload)
        except (ValidationError, ValueError) as exc:
            raise ConfigurationError(f"Invalid configuration in '{config_path}': {exc}") from exc


__all__ = [
    "Access",
    "B2Settings",
    "HttpSettings",
    "PathSettings",
    "S3Settings",
    "ServerSettings",
    "Settings",
    "SymbolServerSettings",
]
