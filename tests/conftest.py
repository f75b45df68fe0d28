import mongomock
import pytest
from fastapi.testclient import TestClient

from todo_api.main import create_app
from todo_api.mongo import MongoRepository
from todo_api.repositories import InMemoryRepository
from todo_api.settings import Settings


@pytest.fixture
def mongo_collection():
    return mongomock.MongoClient().todo.todos


@pytest.fixture(params=["memory", "mongo"])
def repository(request, mongo_collection):
    if request.param == "mongo":
        return MongoRepository(mongo_collection)
    return InMemoryRepository()


@pytest.fixture
def client(repository):
    # Entering the client runs the lifespan, which installs the repository
    with TestClient(create_app(settings=Settings(), repository=repository)) as c:
        yield c
