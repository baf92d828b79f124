import pytest

from hris_system.container import build_container
from hris_system.database.memory import MemoryDatabase


@pytest.fixture
def container():
    return build_container(db=MemoryDatabase())
