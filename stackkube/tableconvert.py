"""Tabular rendering of stacks for list and get output."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from stackkube.models import Stack, StackDefinition, StackList


@dataclass(frozen=True)
class ColumnDefinition:
    """Description of one column of a table."""

    name: str
    type: str
    description: str = ""
    format: str = ""


@dataclass
class TableRow:
    """One row: its cell values and the object it was made from."""

    cells: list[Any]
    object: Stack


@dataclass
class Table:
    """A table of stacks with list metadata."""

    column_definitions: list[ColumnDefinition] = field(default_factory=list)
    rows: list[TableRow] = field(default_factory=list)
    resource_version: str = ""
    self_link: str = ""
    continue_token: str = ""


STACK_COLUMNS = (
    ColumnDefinition(name="Name", type="string", format="name", description="Stack name"),
    ColumnDefinition(name="Services", type="int", description="Number of services"),
    ColumnDefinition(name="Ports", type="string", description="Exposed ports"),
    ColumnDefinition(name="Status", type="string", description="Current stack status"),
    ColumnDefinition(name="Created At", type="date", description="Creation date"),
)


def extract_ports_summary(definition: StackDefinition) -> str:
    """Summarise published ports per service, ``*`` standing for a random port."""
    parts = []
    for svc in definition.services:
        if svc.ports:
            ports = ",".join(str(p.published) if p.published else "*" for p in svc.ports)
            parts.append(f"{svc.name}: {ports}")
    return ", ".join(parts)


def _row(stack: Stack) -> TableRow:
    service_count = 0
    ports = ""
    if stack.spec.stack is not None:
        service_count = len(stack.spec.stack.services)
        ports = extract_ports_summary(stack.spec.stack)
    status = ""
    if stack.status is not None:
        status = f"{stack.status.phase} ({stack.status.message})"
    return TableRow(
        cells=[stack.name, service_count, ports, status, stack.creation_timestamp],
        object=copy.deepcopy(stack),
    )


def convert_to_table(obj: Stack | StackList) -> Table:
    """Render a stack or a stack list as a table; raise TypeError on anything else."""
    if isinstance(obj, StackList):
        table = Table(
            resource_version=obj.resource_version,
            self_link=obj.self_link,
            continue_token=obj.continue_token,
        )
        items = obj.items
    elif isinstance(obj, Stack):
        table = Table(resource_version=obj.resource_version, self_link=obj.self_link)
        items = [obj]
    else:
        raise TypeError(f"unexpected object type {type(obj).__name__}")
    table.column_definitions = list(STACK_COLUMNS)
    table.rows = [_row(item) for item in items]
    return table