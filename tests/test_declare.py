"""
Test the declarer-facing operations
"""

import pytest

from hasapi.declare import new_component, replace_spec, revise_spec, submit
from hasapi.exceptions import ValidationError
from hasapi.models import Component, ComponentStatus, EnvVar, GitOpsStatus


def test_new_component(git_spec_data):
    component = new_component(
        "my-app", git_spec_data, namespace="team-a", labels={"tier": "web"}
    )
    assert component.metadata.name == "my-app"
    assert component.metadata.namespace == "team-a"
    assert component.metadata.labels == {"tier": "web"}
    assert component.spec.componentName == "my-app"
    assert component.status.is_empty()


def test_new_component_invalid_name(git_spec_data):
    with pytest.raises(ValidationError) as exc_info:
        new_component("Not Valid", git_spec_data)
    assert exc_info.value.paths == ["metadata.name"]


def test_new_component_invalid_spec():
    with pytest.raises(ValidationError) as exc_info:
        new_component("x", {"componentName": "X", "application": "y"})
    assert exc_info.value.paths == ["spec.componentName"]


def test_submit_discards_status(git_spec_data):
    component = submit(
        {
            "metadata": {"name": "my-app"},
            "spec": git_spec_data,
            "status": {"name": "my-app", "gitopsRepository": {"commitID": "abc123"}},
        }
    )
    assert component.status == ComponentStatus()
    assert "status" not in component.to_wire()


def test_revise_spec_keeps_status(git_component):
    status = ComponentStatus(name="my-app", gitopsRepository=GitOpsStatus(commitID="abc123"))
    component = git_component.model_copy(update={"status": status})

    revised = revise_spec(component, replicas=3, targetPort=8080)
    assert revised.spec.replicas == 3
    assert revised.spec.targetPort == 8080
    assert revised.status == status
    assert component.spec.replicas == 0


def test_revise_spec_accepts_models(git_component):
    revised = revise_spec(
        git_component, env=(EnvVar(name="B", value="2"), EnvVar(name="A", value="1"))
    )
    assert [e.name for e in revised.spec.env] == ["B", "A"]


def test_revise_spec_rejects_invalid_change(git_component):
    with pytest.raises(ValidationError) as exc_info:
        revise_spec(git_component, application="Bad_App", replicas=-2)
    assert sorted(exc_info.value.paths) == ["spec.application", "spec.replicas"]
    assert git_component.spec.application == "my-app-group"


def test_replace_spec_unchanged_returns_same_object(git_component, git_spec_data):
    assert replace_spec(git_component, git_spec_data) is git_component


def test_replace_spec(git_component, image_spec_data):
    replaced = replace_spec(git_component, image_spec_data)
    assert isinstance(replaced, Component)
    assert replaced.spec.containerImage == "quay.io/foo/bar:latest"
    assert replaced.spec.source.is_empty()
