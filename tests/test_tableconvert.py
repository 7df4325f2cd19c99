from datetime import datetime

import pytest

from stackkube.models import (
    ServiceConfig,
    ServicePortConfig,
    Stack,
    StackDefinition,
    StackList,
    StackPhase,
    StackSpec,
    StackStatus,
)
from stackkube.tableconvert import (
    Table,
    TableRow,
    convert_to_table,
    extract_ports_summary,
)

STACK_NO_SPEC_NO_STATUS = Stack(name="test")
STACK_NO_SPEC = Stack(
    name="test", status=StackStatus(phase=StackPhase.AVAILABLE, message="test message")
)
CREATED = datetime.now()
STACK_2_SERVICES = Stack(
    name="test",
    creation_timestamp=CREATED,
    status=StackStatus(phase=StackPhase.AVAILABLE, message="test message"),
    spec=StackSpec(
        stack=StackDefinition(
            services=[
                ServiceConfig(name="no-ports"),
                ServiceConfig(
                    name="with-ports",
                    ports=[
                        ServicePortConfig(target=88, protocol=""),
                        ServicePortConfig(target=80, protocol="TCP", published=80),
                    ],
                ),
            ]
        )
    ),
)


def row(name, services, ports, status, created, obj):
    return TableRow(cells=[name, services, ports, status, created], object=obj)


CASES = [
    (
        "single-nospec-nostatus",
        STACK_NO_SPEC_NO_STATUS,
        [row("test", 0, "", "", None, STACK_NO_SPEC_NO_STATUS)],
    ),
    (
        "list-nospec-nostatus",
        StackList(items=[STACK_NO_SPEC_NO_STATUS]),
        [row("test", 0, "", "", None, STACK_NO_SPEC_NO_STATUS)],
    ),
    (
        "list-nospec",
        StackList(items=[STACK_NO_SPEC]),
        [row("test", 0, "", "Available (test message)", None, STACK_NO_SPEC)],
    ),
    (
        "single",
        STACK_2_SERVICES,
        [row("test", 2, "with-ports: *,80", "Available (test message)", CREATED, STACK_2_SERVICES)],
    ),
    (
        "list-mix",
        StackList(items=[STACK_NO_SPEC_NO_STATUS, STACK_NO_SPEC, STACK_2_SERVICES]),
        [
            row("test", 0, "", "", None, STACK_NO_SPEC_NO_STATUS),
            row("test", 0, "", "Available (test message)", None, STACK_NO_SPEC),
            row("test", 2, "with-ports: *,80", "Available (test message)", CREATED, STACK_2_SERVICES),
        ],
    ),
]


@pytest.mark.parametrize("obj,expected", [c[1:] for c in CASES], ids=[c[0] for c in CASES])
def test_convert_table(obj, expected):
    assert convert_to_table(obj).rows == expected


def test_not_a_stack():
    with pytest.raises(TypeError, match="unexpected object type Table"):
        convert_to_table(Table())


def test_columns():
    table = convert_to_table(STACK_NO_SPEC)
    assert [c.name for c in table.column_definitions] == [
        "Name",
        "Services",
        "Ports",
        "Status",
        "Created At",
    ]
    assert table.column_definitions[0].format == "name"


def test_list_metadata_is_copied():
    lst = StackList(items=[], resource_version="7", self_link="/stacks", continue_token="next")
    table = convert_to_table(lst)
    assert (table.resource_version, table.self_link, table.continue_token) == ("7", "/stacks", "next")
    assert table.rows == []


def test_single_metadata_is_copied():
    stack = Stack(name="a", resource_version="3", self_link="/stacks/a")
    table = convert_to_table(stack)
    assert (table.resource_version, table.self_link, table.continue_token) == ("3", "/stacks/a", "")


def test_ports_summary_multiple_services():
    definition = StackDefinition(
        services=[
            ServiceConfig(name="a", ports=[ServicePortConfig(published=8080)]),
            ServiceConfig(name="b"),
            ServiceConfig(name="c", ports=[ServicePortConfig(), ServicePortConfig(published=22)]),
        ]
    )
    assert extract_ports_summary(definition) == "a: 8080, c: *,22"


def test_ports_summary_empty():
    assert extract_ports_summary(StackDefinition()) == ""