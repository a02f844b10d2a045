"""Shared fixtures."""

import pytest

from hasapi.declare import new_component
from hasapi.scheme import build_scheme
from hasapi.store import ComponentStore, get_connection

GIT_URL = "https://example.com/repo.git"


@pytest.fixture
def git_spec_data():
    return {
        "componentName": "my-app",
        "application": "my-app-group",
        "source": {"git": {"url": GIT_URL}},
    }


@pytest.fixture
def image_spec_data():
    return {
        "componentName": "my-app",
        "application": "grp",
        "containerImage": "quay.io/foo/bar:latest",
    }


@pytest.fixture
def full_spec_data():
    return {
        "componentName": "backend",
        "application": "shop",
        "secret": "git-token",
        "source": {
            "git": {
                "url": GIT_URL,
                "revision": "main",
                "context": "services/backend",
                "devfileUrl": "https://example.com/devfile.yaml",
                "dockerfileUrl": "https://example.com/Dockerfile",
            }
        },
        "resources": {
            "limits": {"cpu": "1", "memory": "1Gi"},
            "requests": {"cpu": "500m", "memory": "512Mi"},
        },
        "replicas": 2,
        "targetPort": 8080,
        "route": "backend.example.com",
        "env": [
            {"name": "ZETA", "value": "1"},
            {"name": "ALPHA", "value": "2"},
            {
                "name": "TOKEN",
                "valueFrom": {"secretKeyRef": {"name": "creds", "key": "token"}},
            },
        ],
        "containerImage": "quay.io/shop/backend:latest",
        "skipGitOpsResourceGeneration": True,
    }


@pytest.fixture
def git_component(git_spec_data):
    return new_component("my-app", git_spec_data)


@pytest.fixture
def scheme():
    return build_scheme()


@pytest.fixture
def store():
    conn = get_connection(":memory:")
    yield ComponentStore(conn)
    conn.close()
