import mongomock
import pytest
from fastapi.testclient import TestClient

import main
import queries


@pytest.fixture
def api(client, books, monkeypatch):
    monkeypatch.setattr(main, "db", client["plp_bookstore"])
    return TestClient(main.app)


def test_root(api):
    assert api.get("/").json() == {"message": "Bookstore Query API is running"}


def test_database_diagnostics(api):
    body = api.get("/test").json()
    assert body["connection_status"] == "Connected"
    assert "books" in body["collections"]


def test_schema(api):
    schema = api.get("/schema").json()["book"]
    assert {"title", "author", "genre", "published_year", "price", "in_stock"} <= set(schema["properties"])


def test_list_books_default_page(api):
    body = api.get("/books").json()
    assert [b["title"] for b in body] == ["1984", "Animal Farm", "Brave New World", "Moby Dick",
                                          "Pride and Prejudice"]
    assert all("_id" not in b and isinstance(b["id"], str) for b in body)


def test_list_books_second_page(api):
    body = api.get("/books", params={"page": 2}).json()
    assert [b["title"] for b in body] == ["The Alchemist", "The Catcher in the Rye", "The Great Gatsby",
                                          "The Hobbit", "The Lord of the Rings"]


def test_list_books_filters(api):
    body = api.get("/books", params={"genre": "Fiction", "sort": "price", "order": "desc"}).json()
    assert [b["title"] for b in body] == ["To Kill a Mockingbird", "The Alchemist", "The Great Gatsby",
                                          "The Catcher in the Rye"]
    body = api.get("/books", params={"author": "George Orwell", "in_stock": "false"}).json()
    assert [b["title"] for b in body] == ["Animal Farm"]
    body = api.get("/books", params={"min_year": 1951}).json()
    assert {b["title"] for b in body} == {"To Kill a Mockingbird", "The Lord of the Rings", "The Alchemist"}


@pytest.mark.parametrize("params", [{"page": 0}, {"sort": "author"}, {"order": "up"}, {"per_page": 0}])
def test_list_books_rejects_bad_params(api, params):
    assert api.get("/books", params=params).status_code == 422


def test_get_book(api):
    body = api.get("/books/The Hobbit").json()
    assert body["author"] == "J.R.R. Tolkien"
    assert api.get("/books/No Such Book").status_code == 404


def test_genre_stats(api):
    body = api.get("/stats/genres").json()
    assert body[0] == {"genre": "Fantasy", "averagePrice": pytest.approx(17.49), "bookCount": 2}


def test_author_stats(api):
    body = api.get("/stats/authors", params={"limit": 2}).json()
    assert {a["author"] for a in body} == {"J.R.R. Tolkien", "George Orwell"}
    assert all(a["bookCount"] == 2 for a in body)


def test_decade_stats(api):
    body = api.get("/stats/decades").json()
    assert body[0] == {"decade": 1810, "bookCount": 1, "books": ["Pride and Prejudice"]}
    assert [d["decade"] for d in body] == sorted(d["decade"] for d in body)


@pytest.fixture
def bare_collection(client, monkeypatch):
    monkeypatch.setattr(main, "db", client["bare_bookstore"])
    return client["bare_bookstore"]["books"]


def test_genre_stats_with_missing_price(bare_collection):
    bare_collection.insert_one({"title": "X", "author": "A", "genre": "Poetry", "published_year": 2000})
    response = TestClient(main.app).get("/stats/genres")
    assert response.status_code == 200
    assert response.json() == [{"genre": "Poetry", "averagePrice": None, "bookCount": 1}]


def test_author_stats_with_missing_author(bare_collection):
    bare_collection.insert_one({"title": "Anon", "genre": "Poetry", "published_year": 2000, "price": 3.0})
    response = TestClient(main.app).get("/stats/authors")
    assert response.status_code == 200
    assert response.json() == [{"author": None, "bookCount": 1}]


def test_decade_stats_with_missing_year(bare_collection, monkeypatch):
    # the server groups documents without published_year under a null decade
    monkeypatch.setattr(queries, "books_by_decade",
                        lambda collection: [{"_id": None, "bookCount": 1, "books": ["Undated"]}])
    response = TestClient(main.app).get("/stats/decades")
    assert response.status_code == 200
    assert response.json() == [{"decade": None, "bookCount": 1, "books": ["Undated"]}]


def test_get_book_with_slash_in_title(api, books):
    books.insert_one({"title": "Either/Or", "author": "Søren Kierkegaard", "genre": "Philosophy",
                      "published_year": 1843, "price": 15.0, "in_stock": True})
    body = api.get("/books/Either/Or").json()
    assert body["author"] == "Søren Kierkegaard"


def test_database_diagnostics_before_first_use(monkeypatch):
    monkeypatch.setattr(main, "db", None)
    body = TestClient(main.app).get("/test").json()
    assert body["database"] == "⚠️ Available but not initialized"
    assert body["connection_status"] == "Not Connected"


def test_db_handle_is_built_once_and_closed(monkeypatch):
    built = []

    class ClosingClient(mongomock.MongoClient):
        closed = 0

        def close(self):
            self.closed += 1

    def factory():
        built.append(ClosingClient())
        return built[-1]

    monkeypatch.setattr(main, "client", None)
    monkeypatch.setattr(main, "db", None)
    monkeypatch.setattr(main, "get_client", factory)

    assert main.get_db() is main.get_db()
    assert len(built) == 1
    main.close_db()
    assert built[0].closed == 1
    assert main.db is None and main.client is None


def test_serialize_stringifies_id():
    assert main.serialize({"_id": 7, "title": "T"}) == {"id": "7", "title": "T"}
    assert main.serialize(None) is None
