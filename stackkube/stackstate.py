"""Kubernetes resources produced for a stack, keyed by namespace/name."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Union

SERVICE_TYPE_CLUSTER_IP = "ClusterIP"
SERVICE_TYPE_NODE_PORT = "NodePort"
SERVICE_TYPE_LOAD_BALANCER = "LoadBalancer"
SERVICE_TYPE_EXTERNAL_NAME = "ExternalName"
CLUSTER_IP_NONE = "None"


def obj_key(namespace: str, name: str) -> str:
    """Return the key of an object: ``namespace/name``, or ``name`` alone."""
    if not namespace:
        return name
    return f"{namespace}/{name}"


@dataclass
class Container:
    """A container of a pod template."""

    name: str = ""
    image: str = ""


@dataclass
class Toleration:
    """A pod toleration."""

    key: str = ""
    operator: str = ""
    value: str = ""
    effect: str = ""


@dataclass
class PodSpec:
    """The parts of a pod template that matter for stacks."""

    containers: list[Container] = field(default_factory=list)
    init_containers: list[Container] = field(default_factory=list)
    tolerations: list[Toleration] = field(default_factory=list)


@dataclass
class WorkloadSpec:
    """Spec shared by deployments, stateful sets and daemon sets."""

    selector: dict[str, str] = field(default_factory=dict)
    replicas: int | None = None
    template: PodSpec = field(default_factory=PodSpec)


@dataclass
class ServicePort:
    """A network endpoint exposed by a Kubernetes service."""

    name: str = ""
    port: int = 0
    target_port: int = 0
    node_port: int = 0
    protocol: str = ""


@dataclass
class ServiceSpec:
    """Spec of a Kubernetes service."""

    type: str = ""
    cluster_ip: str = ""
    selector: dict[str, str] = field(default_factory=dict)
    ports: list[ServicePort] = field(default_factory=list)


@dataclass
class Deployment:
    """A deployment owned by a stack."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    spec: WorkloadSpec = field(default_factory=WorkloadSpec)


@dataclass
class StatefulSet:
    """A stateful set owned by a stack."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    spec: WorkloadSpec = field(default_factory=WorkloadSpec)


@dataclass
class DaemonSet:
    """A daemon set owned by a stack."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    spec: WorkloadSpec = field(default_factory=WorkloadSpec)


@dataclass
class Service:
    """A Kubernetes service owned by a stack."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    spec: ServiceSpec = field(default_factory=ServiceSpec)


Resource = Union[Deployment, StatefulSet, DaemonSet, Service]


@dataclass
class StackState:
    """Resources created for a stack, each family keyed by obj_key."""

    deployments: dict[str, Deployment] = field(default_factory=dict)
    statefulsets: dict[str, StatefulSet] = field(default_factory=dict)
    daemonsets: dict[str, DaemonSet] = field(default_factory=dict)
    services: dict[str, Service] = field(default_factory=dict)

    def flatten_resources(self) -> list[Resource]:
        """Return copies of all resources: deployments, stateful sets, daemon sets, services."""
        families = (self.deployments, self.statefulsets, self.daemonsets, self.services)
        return [copy.deepcopy(res) for family in families for res in family.values()]


def empty_stack_state() -> StackState:
    """Return a new state holding no resources."""
    return StackState()


def new_stack_state(*args: Resource) -> StackState:
    """Build a state from existing resources; raise TypeError on anything else."""
    state = StackState()
    for obj in args:
        if isinstance(obj, Deployment):
            family: dict = state.deployments
        elif isinstance(obj, StatefulSet):
            family = state.statefulsets
        elif isinstance(obj, DaemonSet):
            family = state.daemonsets
        elif isinstance(obj, Service):
            family = state.services
        else:
            raise TypeError(f"unexpected object type: {type(obj).__name__}")
        family[obj_key(obj.namespace, obj.name)] = obj
    return state