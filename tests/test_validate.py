from stackkube.models import (
    SecretConfig,
    ServiceConfig,
    ServiceVolumeConfig,
    Stack,
    StackDefinition,
    StackPhase,
    StackSpec,
    StackStatus,
)
from stackkube.validate import (
    ERROR_TYPE_DUPLICATE,
    ERROR_TYPE_INVALID,
    FOR_STACK_NAME,
    FieldError,
    append_error_on_collision,
    is_dns1123_subdomain,
    validate_creation_status,
    validate_object_names,
    validate_stack_not_nil,
)


def _stack(services, named_configs=None):
    return Stack(
        spec=StackSpec(
            stack=StackDefinition(services=services, secrets=named_configs or {})
        )
    )


def _volume(source):
    return ServiceVolumeConfig(
        type="volume", source=source, target="/var/lib/postgresql/data"
    )


def test_validate_service_name():
    stack = _stack([ServiceConfig(name="redis:test", image="redis:alpine")])
    errors = validate_object_names(stack)
    assert len(errors) == 1
    assert errors[0].field == "spec.stack.services[0].name"
    assert errors[0].bad_value == "redis:test"


def test_validate_volume_name():
    stack = _stack(
        [ServiceConfig(name="redis", image="redis:alpine", volumes=[_volume("dbdata:test")])]
    )
    errors = validate_object_names(stack)
    assert len(errors) == 1
    assert errors[0].field == "spec.stack.services[0].volumes[0]"


def test_validate_secret_name():
    invalid_name = "secret:test"
    stack = _stack(
        [ServiceConfig(name="redis", image="redis:alpine")],
        {invalid_name: SecretConfig(name=invalid_name)},
    )
    errors = validate_object_names(stack)
    assert len(errors) == 1
    assert errors[0].field == "spec.stack.secrets.secret"


def test_validate_valid_names():
    valid_name = "secret"
    stack = _stack(
        [ServiceConfig(name="redis", volumes=[_volume("dbdata"), ServiceVolumeConfig(type="bind")])],
        {valid_name: SecretConfig(name=valid_name)},
    )
    assert validate_object_names(stack) == []


def test_validate_object_names_without_definition():
    assert validate_object_names(Stack()) == []
    assert validate_object_names(None) == []


def test_validate_creation_status_nil():
    assert validate_creation_status(Stack()) == []


def test_validate_creation_status_success():
    stack = Stack(status=StackStatus(phase=StackPhase.AVAILABLE))
    assert validate_creation_status(stack) == []


def test_validate_creation_status_failed():
    stack = Stack(status=StackStatus(phase=StackPhase.FAILURE, message="error"))
    errors = validate_creation_status(stack)
    assert len(errors) == 1
    assert errors[0].detail == "error"


def test_validate_stack_not_nil_with_status():
    stack = Stack(status=StackStatus(phase=StackPhase.FAILURE, message="test"))
    errors = validate_stack_not_nil(stack)
    assert len(errors) == 1
    assert errors[0].detail == "test"


def test_validate_stack_not_nil_without_status():
    errors = validate_stack_not_nil(Stack())
    assert len(errors) == 1
    assert errors[0].detail == "stack is empty"


def test_validate_stack_not_nil_with_definition():
    assert validate_stack_not_nil(_stack([])) == []


def test_dns1123_subdomain():
    assert is_dns1123_subdomain("redis") == []
    assert is_dns1123_subdomain("a.b-c.d") == []
    assert len(is_dns1123_subdomain("Redis")) == 1
    assert len(is_dns1123_subdomain("-redis")) == 1
    assert len(is_dns1123_subdomain("")) == 1
    assert len(is_dns1123_subdomain("a" * 254)) == 1


def test_collision_without_label():
    errors = append_error_on_collision({}, "service", "redis", "test", [])
    assert len(errors) == 1
    assert errors[0].type == ERROR_TYPE_DUPLICATE
    assert errors[0].bad_value == "service redis already exists"


def test_collision_same_stack():
    errors = append_error_on_collision(
        {FOR_STACK_NAME: "test"}, "service", "redis", "test", []
    )
    assert errors == []


def test_collision_other_stack():
    previous = [FieldError(ERROR_TYPE_INVALID, "x")]
    errors = append_error_on_collision(
        {FOR_STACK_NAME: "test2"}, "deployment", "redis", "test", previous
    )
    assert len(errors) == 2
    assert errors[1].bad_value == "deployment redis already exists in stack test2"
    assert len(previous) == 1


def test_field_error_message():
    error = FieldError(ERROR_TYPE_INVALID, "spec.name", "a:b", "bad name")
    assert str(error) == 'spec.name: Invalid value: "a:b": bad name'


def test_field_error_message_null_value():
    error = FieldError(ERROR_TYPE_INVALID, "test", None, "error")
    assert str(error) == 'test: Invalid value: "null": error'