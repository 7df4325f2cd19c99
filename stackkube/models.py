"""Stack resource model shared by the registry, validation and conversion code."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass, field
from datetime import datetime


class StackPhase(str, enum.Enum):
    """Lifecycle phase of a stack."""

    AVAILABLE = "Available"
    PROGRESSING = "Progressing"
    FAILURE = "Failure"
    RECONCILIATION_PENDING = "ReconciliationPending"

    def __str__(self) -> str:
        return self.value


@dataclass
class Owner:
    """Identity of the user that created or last updated a stack."""

    user_name: str = ""
    groups: list[str] = field(default_factory=list)
    extra: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class ServicePortConfig:
    """A port exposed by a service; a published port of 0 means a random one."""

    target: int = 0
    published: int = 0
    protocol: str = ""
    mode: str = ""


@dataclass
class ServiceVolumeConfig:
    """A volume or bind mount attached to a service."""

    type: str = ""
    source: str = ""
    target: str = ""
    read_only: bool = False


@dataclass
class DeployConfig:
    """Deployment settings of a service."""

    mode: str = ""
    replicas: int | None = None
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class ServiceConfig:
    """A single service of a stack definition."""

    name: str = ""
    image: str = ""
    pull_policy: str = ""
    ports: list[ServicePortConfig] = field(default_factory=list)
    volumes: list[ServiceVolumeConfig] = field(default_factory=list)
    deploy: DeployConfig = field(default_factory=DeployConfig)
    labels: dict[str, str] = field(default_factory=dict)
    environment: dict[str, str | None] = field(default_factory=dict)
    command: list[str] = field(default_factory=list)
    entrypoint: list[str] = field(default_factory=list)


@dataclass
class SecretConfig:
    """A secret declared at stack level."""

    name: str = ""
    file: str = ""
    external: bool = False


@dataclass
class StackDefinition:
    """The structured content of a stack: services and top-level secrets."""

    services: list[ServiceConfig] = field(default_factory=list)
    secrets: dict[str, SecretConfig] = field(default_factory=dict)


@dataclass
class StackSpec:
    """Desired state of a stack: compose text, its structured form and owner."""

    compose_file: str = ""
    stack: StackDefinition | None = None
    owner: Owner = field(default_factory=Owner)


@dataclass
class StackStatus:
    """Observed state of a stack."""

    phase: StackPhase = StackPhase.RECONCILIATION_PENDING
    message: str = ""


@dataclass
class Stack:
    """A stack object as stored by the API server."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    generation: int = 0
    resource_version: str = ""
    self_link: str = ""
    creation_timestamp: datetime | None = None
    spec: StackSpec = field(default_factory=StackSpec)
    status: StackStatus | None = None

    def deep_copy(self) -> Stack:
        """Return an independent copy of this stack."""
        return copy.deepcopy(self)


@dataclass
class StackList:
    """A page of stacks returned by a list call."""

    items: list[Stack] = field(default_factory=list)
    resource_version: str = ""
    self_link: str = ""
    continue_token: str = ""


class NotAStackError(TypeError):
    """Raised when an object expected to be a stack is something else."""


def ensure_stack(obj: object) -> Stack:
    """Return ``obj`` if it is a stack, raise NotAStackError otherwise."""
    if not isinstance(obj, Stack):
        raise NotAStackError("Object is not a stack")
    return obj