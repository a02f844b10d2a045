"""
Test serialization, equality and copying of the resource models
"""

import pydantic
import pytest

from hasapi.models import (
    Component,
    ComponentList,
    ComponentSource,
    ComponentSpec,
    ComponentStatus,
    GitOpsStatus,
    ListMeta,
    ObjectMeta,
    SourceKind,
    WireModel,
)

## Serialization ###############################################################


def test_git_spec_serializes_only_set_fields(git_spec_data):
    spec = ComponentSpec.model_validate(git_spec_data)
    assert spec.to_wire() == git_spec_data


def test_zero_values_serialize_as_absent():
    spec = ComponentSpec(
        componentName="a",
        application="b",
        replicas=0,
        targetPort=0,
        skipGitOpsResourceGeneration=False,
        route="",
    )
    assert spec.to_wire() == {"componentName": "a", "application": "b"}
    # explicit zero and unset are indistinguishable on the wire
    assert spec == ComponentSpec(componentName="a", application="b")


def test_full_spec_round_trip(full_spec_data):
    spec = ComponentSpec.model_validate(full_spec_data)
    wire = spec.to_wire()
    assert wire == full_spec_data
    assert ComponentSpec.from_wire(wire) == spec


def test_component_without_status_omits_status(git_component):
    wire = git_component.to_wire()
    assert "status" not in wire
    assert wire["apiVersion"] == "appstudio.redhat.com/v1alpha1"
    assert wire["kind"] == "Component"
    assert wire["metadata"] == {"name": "my-app", "namespace": "default"}


def test_status_keeps_required_fields_when_present(git_component):
    component = git_component.model_copy(
        update={"status": ComponentStatus(name="my-app")}
    )
    assert component.to_wire()["status"] == {"name": "my-app", "gitopsRepository": {}}


def test_gitops_status_round_trip(git_component):
    status = ComponentStatus(
        name="my-app",
        gitopsRepository=GitOpsStatus(
            repositoryURL="https://example.com/gitops.git",
            branch="main",
            context="components/my-app",
            resourceGenerationSkipped=True,
            commitID="abc123",
        ),
    )
    component = git_component.model_copy(update={"status": status})
    restored = Component.from_wire(component.to_wire())
    assert restored == component
    assert restored.status.gitopsRepository.commitID == "abc123"


def test_metadata_label_with_empty_value_is_kept():
    component = Component.model_validate(
        {
            "metadata": {"name": "x", "labels": {"tier": ""}},
            "spec": {"componentName": "x", "application": "y"},
        }
    )
    assert component.to_wire()["metadata"] == {"name": "x", "labels": {"tier": ""}}


def test_list_meta_continue_alias():
    meta = ListMeta(continue_="token", remainingItemCount=3)
    assert meta.to_wire() == {"continue": "token", "remainingItemCount": 3}
    assert ListMeta.from_wire({"continue": "token"}).continue_ == "token"


def test_component_list_iterates_in_order(git_spec_data):
    items = [
        Component(metadata={"name": name}, spec=git_spec_data) for name in ("b", "a", "c")
    ]
    listing = ComponentList(items=items, metadata=ListMeta(continue_="opaque"))
    assert [c.metadata.name for c in listing] == ["b", "a", "c"]
    assert len(listing) == 3
    assert listing.continue_token == "opaque"
    assert listing.to_wire()["metadata"] == {"continue": "opaque"}


def test_empty_component_list_keeps_items():
    assert ComponentList().to_wire() == {
        "apiVersion": "appstudio.redhat.com/v1alpha1",
        "kind": "ComponentList",
        "items": [],
    }


## Origin ######################################################################


def test_git_origin(git_spec_data):
    spec = ComponentSpec.model_validate({**git_spec_data, "containerImage": "quay.io/a/b"})
    assert spec.origin is SourceKind.GIT
    assert spec.build_output_image == "quay.io/a/b"
    assert spec.source_image is None


def test_image_origin(image_spec_data):
    spec = ComponentSpec.model_validate(image_spec_data)
    assert spec.origin is SourceKind.IMAGE
    assert spec.source_image == "quay.io/foo/bar:latest"
    assert spec.build_output_image is None


def test_unknown_origin():
    spec = ComponentSpec(componentName="a", application="b")
    assert spec.origin is None
    assert spec.source.is_empty()
    assert spec.source.value is None


## Source union ################################################################


class ImageSource(WireModel):
    image: str


class TwoWaySource(ComponentSource):
    """A union with a second alternative, as a future version would have."""

    omit_empty = frozenset({"git", "image"})
    alternatives = {**ComponentSource.alternatives, "image": SourceKind.IMAGE}

    image: ImageSource | None = None


def test_union_accepts_zero_or_one_alternative():
    assert TwoWaySource().kind is None
    assert TwoWaySource.model_validate({"git": {"url": "u"}}).kind is SourceKind.GIT
    assert TwoWaySource.model_validate({"image": {"image": "i"}}).kind is SourceKind.IMAGE


def test_union_rejects_two_alternatives():
    with pytest.raises(pydantic.ValidationError, match="at most one source"):
        TwoWaySource.model_validate({"git": {"url": "u"}, "image": {"image": "i"}})


def test_union_serializes_active_alternative_only():
    source = TwoWaySource.model_validate({"image": {"image": "i"}})
    assert source.to_wire() == {"image": {"image": "i"}}


## Equality, fingerprint and copies ############################################


def test_equality_ignores_construction_order():
    first = ComponentSpec.model_validate(
        {"componentName": "a", "application": "b", "route": "r", "replicas": 1}
    )
    second = ComponentSpec.model_validate(
        {"replicas": 1, "route": "r", "application": "b", "componentName": "a"}
    )
    assert first == second
    assert first.fingerprint() == second.fingerprint()


def test_env_order_is_significant():
    env = [{"name": "A", "value": "1"}, {"name": "B", "value": "2"}]
    first = ComponentSpec.model_validate({"componentName": "a", "application": "b", "env": env})
    second = ComponentSpec.model_validate(
        {"componentName": "a", "application": "b", "env": list(reversed(env))}
    )
    assert first != second
    assert first.fingerprint() != second.fingerprint()
    assert [e.name for e in first.env] == ["A", "B"]
    assert [e["name"] for e in first.to_wire()["env"]] == ["A", "B"]


def test_diff_reports_changed_fields(full_spec_data):
    spec = ComponentSpec.model_validate(full_spec_data)
    changed = ComponentSpec.model_validate(
        {**full_spec_data, "replicas": 5, "route": ""}
    )
    assert spec.diff(changed) == ["replicas", "route"]
    assert spec.diff(spec) == []


def test_spec_is_immutable(git_spec_data):
    spec = ComponentSpec.model_validate(git_spec_data)
    with pytest.raises(pydantic.ValidationError):
        spec.replicas = 3


def test_spec_is_hashable(full_spec_data):
    spec = ComponentSpec.model_validate(full_spec_data)
    same = ComponentSpec.model_validate(full_spec_data)
    assert hash(spec) == hash(same)
    assert len({spec, same}) == 1
    component = Component(metadata={"name": "backend", "labels": {"tier": "api"}}, spec=spec)
    assert component in {component.deep_copy()}


def test_nested_maps_are_read_only(full_spec_data):
    component = Component(
        metadata={"name": "backend", "labels": {"tier": "api"}}, spec=full_spec_data
    )
    fingerprint = component.fingerprint()
    with pytest.raises(TypeError):
        component.spec.resources.requests["cpu"] = "5"
    with pytest.raises(TypeError):
        component.metadata.labels["team"] = "x"
    with pytest.raises(TypeError):
        ObjectMeta().annotations["a"] = "b"
    assert component.spec.resources.requests["cpu"] == "500m"
    assert component.fingerprint() == fingerprint
    # still plain mappings on the wire
    assert component.to_wire()["metadata"]["labels"] == {"tier": "api"}
    assert component.spec.resources.model_dump() == {
        "limits": {"cpu": "1", "memory": "1Gi"},
        "requests": {"cpu": "500m", "memory": "512Mi"},
    }


def test_component_list_items_are_a_tuple(git_component):
    listing = ComponentList(items=[git_component])
    assert listing.items == (git_component,)
    assert listing.to_wire()["items"] == [git_component.to_wire()]


def test_deep_copy_is_independent(full_spec_data):
    component = Component(metadata={"name": "backend"}, spec=full_spec_data)
    copy = component.deep_copy()
    assert copy == component
    assert copy is not component
    assert copy.spec is not component.spec
    assert [e.name for e in copy.spec.env] == ["ZETA", "ALPHA", "TOKEN"]
