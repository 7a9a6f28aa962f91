# relaypanel/adapters/configuration/config.py

import json
import os
from typing import Annotated, List
from logging import getLevelName
from pydantic import field_validator, ConfigDict
from pydantic_settings import BaseSettings, NoDecode

DEFAULT_ADMIN_API_TOKEN = "change-me-now"

# Floors for the background timers, in seconds
MIN_CLEANUP_INTERVAL_SECONDS = 15
MIN_PUBLIC_IP_REFRESH_SECONDS = 60


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"
    DEBUG: bool = False

    # HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ADMIN_API_TOKEN: str = DEFAULT_ADMIN_API_TOKEN

    # Persisted state
    DATA_DIR: str = "/app/data"
    CLIENTS_FILE: str = ""
    STATE_FILE: str = ""

    # Relay stack
    STACK_DIR: str = "/opt/stack"
    COMPOSE_FILE: str = ""
    SECRETS_ENV_FILE: str = ""
    COMPOSE_PROJECT_NAME: str = "mtprotouipanel"
    RELAY_SERVICE_NAME: str = "mtproxy"
    ENABLE_DOCKER_SYNC: bool = True
    RELOAD_TIMEOUT_SECONDS: float = 120.0

    # Public endpoint shown in proxy links
    PROXY_PUBLIC_HOST: str = ""
    PROXY_PUBLIC_PORT: int = 3443

    # Public IP discovery
    PUBLIC_IP_LOOKUP_ENABLED: bool = True
    PUBLIC_IP_REFRESH_SECONDS: int = 900
    PUBLIC_IP_LOOKUP_TIMEOUT_SECONDS: float = 5.0
    PUBLIC_IP_PROVIDERS: Annotated[List[str], NoDecode] = [
        "https://api.ipify.org?format=json",
        "https://ifconfig.me/ip",
        "https://icanhazip.com",
    ]

    # Client lifecycle
    CLEANUP_INTERVAL_SECONDS: int = 60
    DEFAULT_FAKE_TLS_HOST: str = "google.com"
    MAX_PROXY_SECRETS: int = 16

    @field_validator("CLIENTS_FILE", mode="before")
    def assemble_clients_file(cls, value, info):
        if value:
            return value
        return os.path.join(info.data.get("DATA_DIR", "/app/data"), "clients.json")

    @field_validator("STATE_FILE", mode="before")
    def assemble_state_file(cls, value, info):
        if value:
            return value
        return os.path.join(info.data.get("DATA_DIR", "/app/data"), "state.json")

    @field_validator("COMPOSE_FILE", mode="before")
    def assemble_compose_file(cls, value, info):
        if value:
            return value
        return os.path.join(info.data.get("STACK_DIR", "/opt/stack"), "docker-compose.yml")

    @field_validator("SECRETS_ENV_FILE", mode="before")
    def assemble_secrets_env_file(cls, value, info):
        if value:
            return value
        return os.path.join(info.data.get("STACK_DIR", "/opt/stack"), "proxy", "mtproxy.env")

    @field_validator("PROXY_PUBLIC_HOST", "DEFAULT_FAKE_TLS_HOST", mode="before")
    def strip_host(cls, v):
        return (v or "").strip()

    @field_validator("PUBLIC_IP_PROVIDERS", mode="before")
    def assemble_providers(cls, v):
        """
        If given as a CSV string (e.g. 'a,b,c'), turn it into a list.
        A JSON list string is decoded; a list is returned as is.
        """
        if isinstance(v, str):
            if v.strip().startswith("["):
                return json.loads(v)
            return [url.strip() for url in v.split(",") if url.strip()]
        return v

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Ensures the value is a valid logging level"""
        lvl = str(v).upper()
        if not isinstance(getLevelName(lvl), int):
            raise ValueError(f"Invalid LOG_LEVEL: {v!r}")
        return lvl

    @property
    def cleanup_interval(self) -> int:
        return max(MIN_CLEANUP_INTERVAL_SECONDS, self.CLEANUP_INTERVAL_SECONDS)

    @property
    def public_ip_refresh_interval(self) -> int:
        return max(MIN_PUBLIC_IP_REFRESH_SECONDS, self.PUBLIC_IP_REFRESH_SECONDS)

    @property
    def max_proxy_secrets(self) -> int:
        return max(1, self.MAX_PROXY_SECRETS)

    model_config = ConfigDict(env_file=".env", extra="ignore", validate_default=True)


settings = Settings()
