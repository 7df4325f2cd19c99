import pytest

from stackkube.models import (
    NotAStackError,
    Owner,
    ServiceConfig,
    Stack,
    StackDefinition,
    StackList,
    StackPhase,
    StackSpec,
    StackStatus,
    ensure_stack,
)


def test_ensure_stack_returns_same_object():
    stack = Stack(name="app")
    assert ensure_stack(stack) is stack


def test_ensure_stack_rejects_list():
    with pytest.raises(NotAStackError, match="Object is not a stack"):
        ensure_stack(StackList())


def test_ensure_stack_error_is_type_error():
    with pytest.raises(TypeError):
        ensure_stack("stack")


def test_deep_copy_is_independent():
    stack = Stack(
        name="app",
        spec=StackSpec(
            compose_file="test",
            stack=StackDefinition(services=[ServiceConfig(name="front")]),
            owner=Owner(user_name="someone", groups=["g1"]),
        ),
        status=StackStatus(phase=StackPhase.AVAILABLE, message="ok"),
    )
    clone = stack.deep_copy()
    assert clone == stack
    clone.spec.stack.services[0].name = "back"
    clone.spec.owner.groups.append("g2")
    assert stack.spec.stack.services[0].name == "front"
    assert stack.spec.owner.groups == ["g1"]


def test_new_spec_has_no_structured_stack():
    spec = StackSpec(compose_file="test")
    assert spec.stack is None
    assert Stack().status is None


def test_phase_formats_as_its_value():
    phase = StackPhase("Available")
    assert phase is StackPhase.AVAILABLE
    status = StackStatus(phase=phase, message="test message")
    assert f"{status.phase} ({status.message})" == "Available (test message)"