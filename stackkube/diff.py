"""Difference between the current and the desired resources of a stack."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, fields

from stackkube.stackstate import (
    SERVICE_TYPE_EXTERNAL_NAME,
    DaemonSet,
    Deployment,
    PodSpec,
    Service,
    StackState,
    StatefulSet,
)

log = logging.getLogger(__name__)

IGNORED_TOLERATION_PREFIX = "com.docker.ucp."


@dataclass
class StackStateDiff:
    """Resources to add, delete and update to go from a current to a desired state."""

    deployments_to_add: list[Deployment] = field(default_factory=list)
    deployments_to_delete: list[Deployment] = field(default_factory=list)
    deployments_to_update: list[Deployment] = field(default_factory=list)
    statefulsets_to_add: list[StatefulSet] = field(default_factory=list)
    statefulsets_to_delete: list[StatefulSet] = field(default_factory=list)
    statefulsets_to_update: list[StatefulSet] = field(default_factory=list)
    daemonsets_to_add: list[DaemonSet] = field(default_factory=list)
    daemonsets_to_delete: list[DaemonSet] = field(default_factory=list)
    daemonsets_to_update: list[DaemonSet] = field(default_factory=list)
    services_to_add: list[Service] = field(default_factory=list)
    services_to_delete: list[Service] = field(default_factory=list)
    services_to_update: list[Service] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Tell whether the diff holds no change at all."""
        return not any(getattr(self, f.name) for f in fields(self))


def _normalize_tolerations(spec: PodSpec) -> None:
    spec.tolerations = [
        t for t in spec.tolerations if not t.key.startswith(IGNORED_TOLERATION_PREFIX)
    ]


def _normalize_pod_specs(current: PodSpec, desired: PodSpec) -> None:
    _normalize_tolerations(current)
    _normalize_tolerations(desired)
    # Images may have been pinned to a digest by content trust: treat them as equal.
    if len(desired.init_containers) == len(current.init_containers) and len(
        desired.containers
    ) == len(current.containers):
        pairs = list(zip(current.init_containers, desired.init_containers)) + list(
            zip(current.containers, desired.containers)
        )
        for cur, des in pairs:
            if cur.image.startswith(des.image + "@"):
                des.image = cur.image


def _workloads_equal(current, desired) -> bool:
    current = copy.deepcopy(current)
    desired = copy.deepcopy(desired)
    _normalize_pod_specs(current.spec.template, desired.spec.template)
    return current.spec == desired.spec and current.labels == desired.labels


def _services_equal(current: Service, desired: Service) -> bool:
    return current.spec == desired.spec and current.labels == desired.labels


def _service_requires_recreate(current: Service, desired: Service) -> bool:
    if (
        current.spec.type != SERVICE_TYPE_EXTERNAL_NAME
        and desired.spec.type != SERVICE_TYPE_EXTERNAL_NAME
        and current.spec.cluster_ip != ""
    ):
        # An assigned cluster IP cannot be changed in place.
        return current.spec.cluster_ip != desired.spec.cluster_ip
    return False


def _workload_diff(current: dict, desired: dict, to_add: list, to_delete: list, to_update: list) -> None:
    for key, desired_version in desired.items():
        current_version = current.get(key)
        if current_version is None:
            to_add.append(copy.deepcopy(desired_version))
        elif not _workloads_equal(current_version, desired_version):
            updated = copy.deepcopy(desired_version)
            updated.resource_version = current_version.resource_version
            to_update.append(updated)
    to_delete.extend(copy.deepcopy(v) for k, v in current.items() if k not in desired)


def _services_diff(current: StackState, desired: StackState, result: StackStateDiff) -> None:
    for key, desired_version in desired.services.items():
        current_version = current.services.get(key)
        if current_version is None:
            result.services_to_add.append(copy.deepcopy(desired_version))
        elif not _services_equal(current_version, desired_version):
            if _service_requires_recreate(current_version, desired_version):
                result.services_to_delete.append(copy.deepcopy(current_version))
                result.services_to_add.append(copy.deepcopy(desired_version))
            else:
                updated = copy.deepcopy(desired_version)
                updated.resource_version = current_version.resource_version
                result.services_to_update.append(updated)
    result.services_to_delete.extend(
        copy.deepcopy(v) for k, v in current.services.items() if k not in desired.services
    )


def compute_diff(current: StackState, desired: StackState) -> StackStateDiff:
    """Compute the changes needed to turn ``current`` into ``desired``."""
    result = StackStateDiff()
    _workload_diff(
        current.deployments,
        desired.deployments,
        result.deployments_to_add,
        result.deployments_to_delete,
        result.deployments_to_update,
    )
    _workload_diff(
        current.statefulsets,
        desired.statefulsets,
        result.statefulsets_to_add,
        result.statefulsets_to_delete,
        result.statefulsets_to_update,
    )
    _workload_diff(
        current.daemonsets,
        desired.daemonsets,
        result.daemonsets_to_add,
        result.daemonsets_to_delete,
        result.daemonsets_to_update,
    )
    _services_diff(current, desired, result)
    log.debug("produced stack state diff %r", result)
    return result