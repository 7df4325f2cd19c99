"""Subresources of a stack: its compose file, its owner and its scale."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping

from stackkube.models import Owner, Stack, StackDefinition, StackSpec

log = logging.getLogger(__name__)

GLOBAL_MODE = "global"
GLOBAL_SCALE = -1


class ServiceNotFoundError(LookupError):
    """Raised when a scale update targets a service the stack does not have."""

    def __init__(self, service: str) -> None:
        super().__init__(f'service "{service}" not found in stack')
        self.service = service


def _bump_generation_if_changed(old_stack: Stack, new_stack: Stack) -> None:
    if old_stack.spec != new_stack.spec:
        new_stack.generation = old_stack.generation + 1


def composefile_of(stack: Stack) -> str:
    """Return the compose file text of ``stack``."""
    return stack.spec.compose_file


def stack_from_composefile(name: str, namespace: str, compose_file: str) -> Stack:
    """Build a new stack, at generation 1, from a compose file."""
    log.info("Compose create from compose file %s/%s", namespace, name)
    return Stack(
        name=name,
        namespace=namespace,
        generation=1,
        spec=StackSpec(compose_file=compose_file),
    )


def update_from_composefile(old_stack: Stack, compose_file: str) -> Stack:
    """Return a copy of ``old_stack`` carrying ``compose_file``.

    The structured definition is dropped so that it is parsed again, and the
    generation is bumped when the spec changed.
    """
    log.info(
        "Compose update from compose file %s/%s", old_stack.namespace, old_stack.name
    )
    new_stack = old_stack.deep_copy()
    new_stack.spec.compose_file = compose_file
    new_stack.spec.stack = None
    _bump_generation_if_changed(old_stack, new_stack)
    return new_stack


def owner_of(stack: Stack) -> Owner:
    """Return a copy of the owner recorded on ``stack``."""
    owner = copy.deepcopy(stack.spec.owner)
    log.debug("Answering owner request on %s: %s", stack.name, owner.user_name)
    return owner


def _services(stack: Stack):
    definition = stack.spec.stack or StackDefinition()
    return definition.services


def scale_spec(stack: Stack) -> dict[str, int]:
    """Return the desired replica count per service; -1 marks a global service."""
    result = {}
    for svc in _services(stack):
        if svc.deploy.mode == GLOBAL_MODE:
            count = GLOBAL_SCALE
        elif svc.deploy.replicas is not None:
            count = int(svc.deploy.replicas)
        else:
            count = 1
        result[svc.name] = count
    return result


def apply_scale(old_stack: Stack, scale: Mapping[str, int]) -> Stack:
    """Return a copy of ``old_stack`` with the replica counts of ``scale`` applied.

    Raises ServiceNotFoundError when a target service is not in the stack.
    """
    log.info("Scale update %s: %s", old_stack.name, dict(scale))
    new_stack = old_stack.deep_copy()
    by_name = {}
    for svc in _services(new_stack):
        by_name.setdefault(svc.name, svc)
    for target, count in scale.items():
        svc = by_name.get(target)
        if svc is None:
            raise ServiceNotFoundError(target)
        svc.deploy.replicas = int(count)
    _bump_generation_if_changed(old_stack, new_stack)
    return new_stack