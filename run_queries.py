"""
Run the bookstore query walkthrough: CRUD, advanced queries, aggregation
pipelines and indexing against the books collection, printing each result.

Usage:
    python run_queries.py

Seed the collection first with `python seed.py --drop`.
"""

import os
import sys
import logging
from pprint import pprint

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

import queries
from database import books_collection, connect, get_client

logger = logging.getLogger(__name__)


def _print_explain(collection: Collection, query: dict):
    examined, millis = queries.execution_summary(queries.explain_query(collection, query))
    print(f"   Documents examined: {examined}")
    print(f"   Execution time: {millis}ms")


def basic_crud(collection: Collection):
    print("=== TASK 2: Basic CRUD Operations ===\n")

    print("1. All Fiction books:")
    for book in queries.find_by_genre(collection, "Fiction"):
        print(f'   - "{book.get("title")}" by {book.get("author")}')

    print("\n2. Books published after 1950:")
    for book in queries.find_published_after(collection, 1950):
        print(f'   - "{book.get("title")}" ({book.get("published_year")})')

    print("\n3. Books by George Orwell:")
    for book in queries.find_by_author(collection, "George Orwell"):
        print(f'   - "{book.get("title")}" ({book.get("published_year")})')

    print('\n4. Updating price of "The Great Gatsby"...')
    modified = queries.update_price(collection, "The Great Gatsby", 11.99)
    print(f"   Modified {modified} document(s)")
    updated = queries.find_by_title(collection, "The Great Gatsby")
    if updated is None:
        print('   "The Great Gatsby" not found')
    else:
        print(f"   New price: ${updated.get('price')}")

    print('\n5. Deleting "Animal Farm"...')
    deleted = queries.delete_by_title(collection, "Animal Farm")
    print(f"   Deleted {deleted} document(s)")


def advanced_queries(collection: Collection):
    print("\n\n=== TASK 3: Advanced Queries ===\n")

    print("1. Books in stock and published after 2010:")
    for book in queries.find_in_stock_after(collection, 2010):
        print(f'   - "{book.get("title")}" by {book.get("author")} '
              f'({book.get("published_year")}) - ${book.get("price")}')

    print("\n2. Books with projection (title, author, price only):")
    pprint(queries.find_projected(collection, {"genre": "Fantasy"}))

    print("\n3. Books sorted by price (ascending):")
    pprint(queries.sorted_by_price(collection))

    print("\n4. Books sorted by price (descending):")
    pprint(queries.sorted_by_price(collection, descending=True))

    print(f"\n5. Pagination - Page 1 ({queries.PAGE_SIZE} books):")
    pprint(queries.paginate(collection, 1))

    print(f"\n6. Pagination - Page 2 ({queries.PAGE_SIZE} books):")
    pprint(queries.paginate(collection, 2))


def aggregations(collection: Collection):
    print("\n\n=== TASK 4: Aggregation Pipeline ===\n")

    print("1. Average price by genre:")
    pprint(queries.average_price_by_genre(collection))

    print("\n2. Author with most books:")
    pprint(queries.top_authors(collection))

    print("\n3. Books grouped by publication decade:")
    pprint(queries.books_by_decade(collection))


def indexing(collection: Collection):
    print("\n\n=== TASK 5: Indexing ===\n")

    print("1. Creating index on title field...")
    queries.create_title_index(collection)
    print("   Index created on title field")

    print("2. Creating compound index on author and published_year...")
    queries.create_author_year_index(collection)
    print("   Compound index created on author and published_year")

    print("3. Performance analysis with explain():")
    print("   Query with index:")
    _print_explain(collection, {"title": "The Hobbit"})

    print("\n4. Compound index performance:")
    _print_explain(collection, {"author": "J.R.R. Tolkien", "published_year": {"$gte": 1950}})


def run_queries(collection: Collection):
    """Run every step in order. The first failing step stops the sequence."""
    basic_crud(collection)
    advanced_queries(collection)
    aggregations(collection)
    indexing(collection)


def main(uri=None, client_factory=get_client) -> int:
    ok = True
    with connect(uri, client_factory=client_factory) as client:
        try:
            client.admin.command("ping")
            print("Connected to MongoDB server\n")
            run_queries(books_collection(client))
        except PyMongoError as e:
            logger.error("Query walkthrough failed: %s", e)
            print(f"Error occurred: {e}", file=sys.stderr)
            ok = False
    print("\nConnection closed")
    return 0 if ok else 1


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(main())
