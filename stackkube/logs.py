"""Log streaming helpers for the logs subresource of a stack."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import BinaryIO, Union
from urllib.parse import parse_qs

log = logging.getLogger(__name__)

STACK_NAMESPACE_LABEL = "com.docker.stack.namespace"
LOG_MIME_TYPE = "application/octet-stream"
CONNECT_METHODS = ("GET",)

_INTEGER = re.compile(r"[+-]?[0-9]+")

LogFilter = Union[str, "re.Pattern[str]", None]


class LogArgsError(ValueError):
    """Raised when the arguments of a log request cannot be parsed."""


@dataclass(frozen=True)
class LogArgs:
    """Options of a log request: follow mode, tail length and line filter."""

    follow: bool = False
    tail: int | None = None
    filter: re.Pattern[str] | None = None


def _form_value(params: Mapping[str, object], key: str) -> str:
    value = params.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return str(value[0]) if value else ""
    return str(value)


def parse_log_args(params: str | Mapping[str, object]) -> LogArgs:
    """Parse ``follow``, ``tail`` and ``filter`` from a query string or mapping.

    Raises LogArgsError when ``tail`` is not an integer or ``filter`` is not a
    valid regular expression.
    """
    if isinstance(params, str):
        params = parse_qs(params, keep_blank_values=True)
    s_follow = _form_value(params, "follow")
    s_tail = _form_value(params, "tail")
    s_filter = _form_value(params, "filter")

    follow = s_follow not in ("", "0", "false")

    tail = None
    if s_tail:
        if not _INTEGER.fullmatch(s_tail):
            raise LogArgsError(f'invalid tail value "{s_tail}"')
        tail = int(s_tail)

    pattern = None
    if s_filter:
        try:
            pattern = re.compile(s_filter)
        except re.error as exc:
            raise LogArgsError(f"invalid filter: {exc}") from exc
    return LogArgs(follow=follow, tail=tail, filter=pattern)


def stack_label_selector(stack_name: str) -> str:
    """Return the label selector matching the pods of ``stack_name``."""
    return f"{STACK_NAMESPACE_LABEL}={stack_name}"


def format_log_line(pod_name: str, line: bytes | str) -> bytes:
    """Prefix a raw log line with the name of the pod it came from."""
    if isinstance(line, str):
        line = line.encode()
    return pod_name.encode() + b" " + line


def _compile_filter(log_filter: LogFilter) -> re.Pattern[str] | None:
    if log_filter is None:
        return None
    if isinstance(log_filter, str):
        return re.compile(log_filter)
    return log_filter


def forward_logs(
    lines: Iterable[bytes | None], log_filter: LogFilter, out: BinaryIO
) -> int:
    """Write the lines matching ``log_filter`` to ``out`` and return how many were written.

    ``None`` entries are wake-ups and are skipped. Forwarding stops at the
    first write error on ``out``.
    """
    pattern = _compile_filter(log_filter)
    written = 0
    for line in lines:
        if line is None:
            continue
        if pattern is not None:
            text = line.decode("utf-8", errors="surrogateescape")
            if pattern.search(text) is None:
                continue
        try:
            out.write(line)
        except (OSError, ValueError) as exc:
            log.debug("Write error on log output stream, terminating: %s", exc)
            break
        written += 1
    return written