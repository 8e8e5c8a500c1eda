from __future__ import annotations

import pytest

from src.hr_backoffice.hr_backoffice.container import wire_container
from tests.fakes import (
    InMemoryIdentity,
    InMemoryStore,
    InMemorySubmissions,
    InMemoryTasks,
    RecordingPublisher,
    seed_workspace,
)


@pytest.fixture
def store():
    s = InMemoryStore()
    seed_workspace(s)
    return s


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def container(store, publisher):
    return wire_container(
        identity_repo=InMemoryIdentity(store),
        tasks_repo=InMemoryTasks(store),
        submissions_repo=InMemorySubmissions(store),
        publisher=publisher,
    )
