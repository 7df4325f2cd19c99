"""Validation steps run on stacks before they are stored."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from stackkube.models import Stack, StackPhase

FOR_STACK_NAME = "com.docker.stack.namespace"

ERROR_TYPE_INVALID = "Invalid value"
ERROR_TYPE_DUPLICATE = "Duplicate value"

DNS1123_SUBDOMAIN_MAX_LENGTH = 253
_DNS1123_LABEL_FMT = "[a-z0-9]([-a-z0-9]*[a-z0-9])?"
_DNS1123_SUBDOMAIN_FMT = _DNS1123_LABEL_FMT + "(\\." + _DNS1123_LABEL_FMT + ")*"
_DNS1123_SUBDOMAIN_RE = re.compile(_DNS1123_SUBDOMAIN_FMT)
_DNS1123_SUBDOMAIN_ERROR_MSG = (
    "a DNS-1123 subdomain must consist of lower case alphanumeric characters, "
    "'-' or '.', and must start and end with an alphanumeric character"
)


@dataclass(frozen=True)
class FieldError:
    """A validation error on one field of an object."""

    type: str
    field: str
    bad_value: Any = None
    detail: str = ""

    def __str__(self) -> str:
        value = "null" if self.bad_value is None else self.bad_value
        if isinstance(value, str):
            body = f"{self.type}: {json.dumps(value)}"
        else:
            body = f"{self.type}: {value}"
        if self.detail:
            body += f": {self.detail}"
        return f"{self.field}: {body}"


def is_dns1123_subdomain(value: str) -> list[str]:
    """Return the reasons ``value`` is not a DNS-1123 subdomain, empty if it is one."""
    errors = []
    if len(value) > DNS1123_SUBDOMAIN_MAX_LENGTH:
        errors.append(f"must be no more than {DNS1123_SUBDOMAIN_MAX_LENGTH} characters")
    if not _DNS1123_SUBDOMAIN_RE.fullmatch(value):
        errors.append(
            f"{_DNS1123_SUBDOMAIN_ERROR_MSG} (e.g. 'example.com', "
            f"regex used for validation is '{_DNS1123_SUBDOMAIN_FMT}')"
        )
    return errors


def append_error_on_collision(
    labels: Mapping[str, str] | None,
    kind: str,
    name: str,
    stack_name: str,
    errors: list[FieldError],
) -> list[FieldError]:
    """Return ``errors`` plus one if an existing object is not owned by ``stack_name``."""
    owner = (labels or {}).get(FOR_STACK_NAME)
    if owner is None:
        message = f"{kind} {name} already exists"
    elif owner != stack_name:
        message = f"{kind} {name} already exists in stack {owner}"
    else:
        return list(errors)
    return [*errors, FieldError(ERROR_TYPE_DUPLICATE, stack_name, message)]


def validate_object_names(stack: Stack | None) -> list[FieldError]:
    """Check that service, volume and secret names are valid Kubernetes names."""
    if stack is None or stack.spec.stack is None:
        return []
    errors = []
    for ix, svc in enumerate(stack.spec.stack.services):
        problems = is_dns1123_subdomain(svc.name)
        if problems:
            errors.append(
                FieldError(
                    ERROR_TYPE_INVALID,
                    f"spec.stack.services[{ix}].name",
                    svc.name,
                    "not a valid service name in Kubernetes: " + ", ".join(problems),
                )
            )
        for i, volume in enumerate(svc.volumes):
            volume_name = f"mount-{i}"
            if volume.type == "volume" and volume.source:
                volume_name = volume.source
            problems = is_dns1123_subdomain(volume_name)
            if problems:
                errors.append(
                    FieldError(
                        ERROR_TYPE_INVALID,
                        f"spec.stack.services[{ix}].volumes[{i}]",
                        volume_name,
                        "not a valid volume name in Kubernetes: " + ", ".join(problems),
                    )
                )
    for secret in stack.spec.stack.secrets:
        problems = is_dns1123_subdomain(secret)
        if problems:
            errors.append(
                FieldError(
                    ERROR_TYPE_INVALID,
                    "spec.stack.secrets.secret",
                    secret,
                    "not a valid secret name in Kubernetes: " + ", ".join(problems),
                )
            )
    return errors


def validate_creation_status(stack: Stack) -> list[FieldError]:
    """Report the failure recorded in the stack status, if any."""
    if stack.status is not None and stack.status.phase == StackPhase.FAILURE:
        return [FieldError(ERROR_TYPE_INVALID, stack.name, None, stack.status.message)]
    return []


def validate_stack_not_nil(stack: Stack) -> list[FieldError]:
    """Report a stack whose structured definition is missing."""
    if stack.spec.stack is None:
        message = stack.status.message if stack.status is not None else "stack is empty"
        return [FieldError(ERROR_TYPE_INVALID, stack.name, None, message)]
    return []