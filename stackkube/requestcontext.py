"""Per-request context: namespace, user and the skip-validation option."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from urllib.parse import parse_qs


@dataclass(frozen=True)
class UserInfo:
    """The authenticated user behind a request."""

    name: str = ""
    groups: tuple[str, ...] = ()
    extra: Mapping[str, Sequence[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class RequestContext:
    """Immutable request context; derive changed copies with the helpers."""

    namespace: str = ""
    user: UserInfo | None = None
    skip_validation: bool = False


def with_skip_validation(ctx: RequestContext, skip_validation: bool) -> RequestContext:
    """Return a copy of ``ctx`` carrying the skip-validation option."""
    return dataclasses.replace(ctx, skip_validation=skip_validation)


def skip_validation_from(ctx: RequestContext | None) -> bool:
    """Return the skip-validation option of ``ctx``, False when absent."""
    if ctx is None:
        return False
    return ctx.skip_validation is True


def _first_value(query: Mapping[str, object], key: str) -> str:
    value = query.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return str(value[0]) if value else ""
    return str(value)


def skip_validation_from_query(
    ctx: RequestContext, query: str | Mapping[str, object]
) -> RequestContext:
    """Return ``ctx`` with skip-validation set when the query has ``skip-validation=1``."""
    if isinstance(query, str):
        query = parse_qs(query, keep_blank_values=True)
    return with_skip_validation(ctx, _first_value(query, "skip-validation") == "1")