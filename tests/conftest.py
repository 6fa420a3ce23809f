import copy

import pytest

from editor import create_editor
from schema_overlay import augment_schema
from schema_resume import load_base_schema, load_sample
from store import Store


@pytest.fixture
def store(tmp_path):
    return Store(tmp_path / "store")


@pytest.fixture
def editor_schema():
    return augment_schema(load_base_schema())


@pytest.fixture
def sample():
    return load_sample()


@pytest.fixture
def jane(sample):
    doc = copy.deepcopy(sample)
    doc["basics"]["name"] = "Jane Doe"
    doc["meta"]["hiddenSections"] = ["education"]
    return doc


@pytest.fixture
def editor(store, sample):
    return create_editor(store, initial=sample)
