import mongomock
import pytest

from seed import seed_books


@pytest.fixture
def client():
    return mongomock.MongoClient()


@pytest.fixture
def books(client):
    collection = client["plp_bookstore"]["books"]
    seed_books(collection)
    return collection
