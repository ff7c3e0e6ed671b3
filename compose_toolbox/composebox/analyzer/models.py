"""Analyzer data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Snapshot(BaseModel):
    """Immutable value produced by one analyzer call."""

    model_config = ConfigDict(frozen=True)


class ComposeOverview(_Snapshot):
    """Top-level counts shown in the summary badges."""

    services_count: int = 0
    networks_count: int = 0
    volumes_count: int = 0


class PortMapping(_Snapshot):
    host: str
    container: str


class VolumeMapping(_Snapshot):
    host: str
    container: str


class EnvironmentVariable(_Snapshot):
    key: str
    value: str | None = None


class ServiceNetwork(_Snapshot):
    name: str
    ip: str | None = None


class Sysctl(_Snapshot):
    key: str
    value: str


class ServiceConfig(_Snapshot):
    """One service as shown in the structure tree."""

    name: str
    image: str | None = None
    command: str | list[str] | None = None
    restart: str | None = None
    ports: list[PortMapping] = Field(default_factory=list)
    environment: list[EnvironmentVariable] = Field(default_factory=list)
    volumes: list[VolumeMapping] = Field(default_factory=list)
    networks: list[ServiceNetwork] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)
    sysctls: list[Sysctl] = Field(default_factory=list)
    cap_add: list[str] = Field(default_factory=list)


class NetworkConfig(_Snapshot):
    name: str
    external: bool = False
    driver: str | None = None


class ParsedComposeData(_Snapshot):
    """Structured view of a whole document.

    Names are not deduplicated; a repeated service shows up twice.
    """

    services: list[ServiceConfig] = Field(default_factory=list)
    networks: list[NetworkConfig] = Field(default_factory=list)
    volumes: list[str] = Field(default_factory=list)
