import pytest
from fastapi.testclient import TestClient

from callfsm import StateMachine, build_default_table
from callfsm.calls import CallRegistry
from callfsm.main import app, get_registry


@pytest.fixture
def context():
    return {}


@pytest.fixture
def machine(context):
    return StateMachine(context)


@pytest.fixture
def table():
    return build_default_table()


@pytest.fixture
def registry():
    return CallRegistry(max_calls=5)


@pytest.fixture
def client(registry):
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()
