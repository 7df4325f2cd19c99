# stackkube

`stackkube` models compose stacks as a Kubernetes API extension stores them.
It also holds the logic that prepares and checks those stacks, renders them
as tables, serves their subresources and works out which cluster resources
have to change.

## What is in the package

- **`stackkube.models`**: the stack object and its parts. These are `Stack`,
  `StackList`, `StackSpec`, `StackDefinition`, `ServiceConfig`,
  `ServicePortConfig`, `ServiceVolumeConfig`, `DeployConfig`, `SecretConfig`,
  `StackStatus`, `StackPhase` and `Owner`.
  - `Stack.deep_copy()` returns an independent copy of a stack.
  - `ensure_stack(obj)` raises `NotAStackError` for anything that is not a `Stack`.
- **`stackkube.stackstate`**: the `Deployment`, `StatefulSet`, `DaemonSet`
  and `Service` resources that belong to a stack.
  - `new_stack_state(*resources)` collects them into a `StackState`, keyed by
    `obj_key(namespace, name)`. It raises `TypeError` for any other object.
  - `empty_stack_state()` returns a state with no resources.
  - `StackState.flatten_resources()` returns copies of every resource.
- **`stackkube.diff`**: `compute_diff(current, desired)` returns a
  `StackStateDiff`. The diff lists the resources to add, update and delete
  for each kind, and `is_empty()` tells whether anything changes.
  - Tolerations whose key starts with `com.docker.ucp.` are ignored.
  - An image pinned to a digest (`image@digest`) counts as the same image
    without the digest.
  - A service whose assigned cluster IP would change is deleted and added
    again rather than updated.
  - An updated resource keeps the `resource_version` of the current one.
- **`stackkube.prepare`**: steps that run before a stack is stored.
  - `prepare_stack_ownership(ctx, old_stack, stack)` records the request's
    user as the owner. It raises `PrepareError` when the request has no user.
  - `prepare_fields_for_update(version, old_stack, new_stack)` merges an
    update following the rules of the `APIVersion`:
    - `V1BETA1`: the structured stack is dropped when the compose file changed,
      and kept otherwise.
    - `V1BETA2`: the old compose file is kept. It is flagged as outdated when
      the structured stack changed.
    - An unknown version raises `PrepareError`.
- **`stackkube.validate`**: checks that return a list of `FieldError` values.
  - `validate_object_names` checks service, volume and secret names against
    `is_dns1123_subdomain`.
  - `validate_creation_status` reports a failure recorded in the stack status.
  - `validate_stack_not_nil` reports a stack with no structured definition.
  - `append_error_on_collision` adds an error for an existing object whose
    labels do not mark it as owned by the stack. You pass it the labels.
- **`stackkube.tableconvert`**: `convert_to_table(obj)` renders a `Stack` or a
  `StackList` as a `Table`.
  - The columns are name, service count, ports, status and creation time.
  - `extract_ports_summary` gives the published ports of each service, with
    `*` for a random port.
  - Any other object raises `TypeError`.
- **`stackkube.subresources`**: the compose file, owner and scale of a stack.
  - `composefile_of` returns a stack's compose file.
  - `stack_from_composefile` builds a new stack at generation 1.
  - `update_from_composefile` replaces the compose file and drops the
    structured stack.
  - `owner_of` returns the stack's owner.
  - `scale_spec` returns the replica count of each service: `-1` for a global
    service, `1` when no count is set.
  - `apply_scale` sets replica counts. It raises `ServiceNotFoundError` for a
    service that is not in the stack.
  - Updates bump the generation when the spec changed.
- **`stackkube.logs`**: helpers for the logs subresource.
  - `parse_log_args` reads `follow`, `tail` and `filter` from a query string
    or a mapping into a `LogArgs`. It raises `LogArgsError` for a bad tail or
    a bad regular expression.
  - `stack_label_selector` returns the pod label selector of a stack.
  - `format_log_line` prefixes a line with its pod name.
  - `forward_logs(lines, log_filter, out)` writes the lines that match the
    filter. It skips `None` entries, stops at the first write error and
    returns how many lines it wrote.
- **`stackkube.signaler`**: `Signaler` is a thread-safe notification that
  fires once.
  - Callbacks registered before the signal run when it fires.
  - A callback registered after the signal runs at once.
  - `channel()` hands out a `threading.Event` that is set when it fires.
- **`stackkube.requestcontext`**: `RequestContext` and `UserInfo` carry the
  namespace, the user and the skip-validation flag of a request.
  - `with_skip_validation` and `skip_validation_from` set and read the flag.
  - `skip_validation_from_query` sets the flag from `skip-validation=1` in a
    query.
- **`stackkube.version`**: `full_version(BuildInfo(...))` formats the version,
  git commit, OS/architecture and build time. The build time is shown only
  when it is an RFC 3339 timestamp.

## What it does not do

`stackkube` is a library of logic only.

- It has no command and runs no API server.
- It does not talk to a Kubernetes cluster.
- It does not parse compose files into a `StackDefinition`.
- It does not convert a stack into deployments, stateful sets, daemon sets or
  services. Those states must be built by the caller.
- Collision checks take labels that the caller has already fetched.
- Log forwarding works on lines the caller supplies. The package does not
  read logs from pods itself.
- There is no dry-run conversion check.

## Installation

```
pip install .
```

## Example

```python
from stackkube.stackstate import Deployment, new_stack_state
from stackkube.diff import compute_diff

current = new_stack_state()
desired = new_stack_state(Deployment(namespace="ns", name="web"))
diff = compute_diff(current, desired)
assert not diff.is_empty()
assert [d.name for d in diff.deployments_to_add] == ["web"]
```

```python
from stackkube.models import ServiceConfig, Stack, StackDefinition, StackSpec
from stackkube.subresources import apply_scale, scale_spec

stack = Stack(name="app", spec=StackSpec(stack=StackDefinition(services=[ServiceConfig(name="web")])))
scaled = apply_scale(stack, {"web": 3})
assert scale_spec(scaled) == {"web": 3}
assert scaled.generation == 1
```

## Running the tests

```
pip install .[test]
pytest
```