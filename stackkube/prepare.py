"""Steps that prepare a stack before it is created or updated."""

from __future__ import annotations

import enum
import logging

from stackkube.models import Stack
from stackkube.requestcontext import RequestContext

log = logging.getLogger(__name__)

COMPOSE_OUT_OF_DATE = (
    "# This compose file is outdated: the stack was updated by other means\n"
)


class APIVersion(str, enum.Enum):
    """API level of a request; it decides how updates are merged."""

    V1BETA1 = "v1beta1"
    V1BETA2 = "v1beta2"

    def __str__(self) -> str:
        return self.value


class PrepareError(ValueError):
    """Raised when a stack cannot be prepared for storage."""


def prepare_stack_ownership(
    ctx: RequestContext | None, old_stack: Stack | None, stack: Stack
) -> None:
    """Record the requesting user as the owner of ``stack``."""
    user = ctx.user if ctx is not None else None
    if user is None:
        raise PrepareError("can't extract owner information from request")
    stack.spec.owner.user_name = user.name
    stack.spec.owner.groups = list(user.groups)
    stack.spec.owner.extra = {key: list(values) for key, values in user.extra.items()}
    log.debug("Set stack owner to %s", stack.spec.owner.user_name)


def set_fields_for_v1beta1_update(old_stack: Stack, new_stack: Stack) -> None:
    """Drop the structured stack if the compose file changed, else keep the old one."""
    if new_stack.spec.compose_file != old_stack.spec.compose_file:
        # The stack is parsed again from the new compose file.
        new_stack.spec.stack = None
    else:
        # The update likely dropped fields this API level does not know.
        new_stack.spec.stack = old_stack.spec.stack


def set_fields_for_v1beta2_update(old_stack: Stack, new_stack: Stack) -> None:
    """Keep the old compose file, flagging it as outdated if the stack changed."""
    new_stack.spec.compose_file = old_stack.spec.compose_file
    spec_same = new_stack.spec.stack == old_stack.spec.stack
    compose_file = new_stack.spec.compose_file
    if not spec_same and compose_file and not compose_file.startswith(COMPOSE_OUT_OF_DATE):
        new_stack.spec.compose_file = COMPOSE_OUT_OF_DATE + compose_file


_FIELD_UPDATES = {
    APIVersion.V1BETA1: set_fields_for_v1beta1_update,
    APIVersion.V1BETA2: set_fields_for_v1beta2_update,
}


def prepare_fields_for_update(
    version: APIVersion | str, old_stack: Stack | None, new_stack: Stack
) -> None:
    """Merge ``old_stack`` into ``new_stack`` following the rules of ``version``."""
    try:
        update = _FIELD_UPDATES[APIVersion(version)]
    except ValueError:
        raise PrepareError(f'unknown APIVersion "{version}"') from None
    if old_stack is not None:
        update(old_stack, new_stack)