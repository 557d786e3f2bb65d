"""Host Schemas — the managed inventory entity and its JSON:API wrappers.

Invariants:
    - Every field has a zero default: Host() is the zero-valued host
    - id is None until the store assigns one; None fields are omitted on the wire
    - Blank optional strings (primary_ipv6, website) normalize to None
    - HostCollection.data is always present ([] when empty)
    - Unknown JSON members are ignored; wrong member types fail validation

Design Decisions:
    - snake_case attributes with wire aliases (type, os, created, modified)
      so Python code never shadows builtins (ADR: readability)
    - Nested groups are their own models: Sensor/groups have no lifecycle
      outside their Host
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Sensor(BaseModel):
    """Monitoring sensor attached to a host."""
    name: str = ""
    ports: list[int] = Field(default_factory=list)


class HostResources(BaseModel):
    """Free-text hardware description."""
    cpu_count: str = ""
    cpu_freq: str = ""
    memory: str = ""
    storage: str = ""
    disk_type: str = ""
    hypervisor: str = ""


class HostIpAddresses(BaseModel):
    primary_ipv4: str = ""
    primary_ipv6: str | None = None
    ipv4: list[str] = Field(default_factory=list)
    ipv6: list[str] = Field(default_factory=list)

    @field_validator("primary_ipv6")
    @classmethod
    def blank_ipv6_is_unset(cls, value: str | None) -> str | None:
        return value or None


class HostProvider(BaseModel):
    name: str = ""
    website: str | None = None

    @field_validator("website")
    @classmethod
    def blank_website_is_unset(cls, value: str | None) -> str | None:
        return value or None


class Host(BaseModel):
    """Inventory record. Identifier and timestamps are owned by the repository."""
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    created_at: datetime | None = Field(None, alias="created")
    modified_at: datetime | None = Field(None, alias="modified")
    hostname: str = ""
    host_type: str = Field("", alias="type")
    host_os: str = Field("", alias="os")
    architecture: str = ""
    resources: HostResources = Field(default_factory=HostResources)
    ip_addresses: HostIpAddresses = Field(default_factory=HostIpAddresses)
    provider: HostProvider = Field(default_factory=HostProvider)
    sensors: list[Sensor] = Field(default_factory=list)


class HostCollection(BaseModel):
    """List response body: {"data": [...]}."""
    data: list[Host] = Field(default_factory=list)


class HostResource(BaseModel):
    """Single-host request/response body: {"data": {...}}."""
    data: Host = Field(default_factory=Host)
