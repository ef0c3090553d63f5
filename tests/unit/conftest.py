"""Pytest unit test fixtures."""

import pytest

from gazapay.dialogue.manager import DialogueManager
from gazapay.memory.store import InMemorySessionStore, SQLiteSessionStore


@pytest.fixture()
def manager():
    return DialogueManager()


@pytest.fixture()
def memory_store():
    return InMemorySessionStore(capacity=3)


@pytest.fixture()
def sqlite_store(tmp_path):
    return SQLiteSessionStore(tmp_path / "sessions.db", capacity=3)
