"""
Load the sample bookstore dataset into the books collection.

Usage:
    python seed.py [--drop]
"""

import os
import sys
import argparse
import logging
from typing import Iterable, List

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from database import books_collection, connect
from schemas import Book

logger = logging.getLogger(__name__)

SAMPLE_BOOKS = [
    Book(title="To Kill a Mockingbird", author="Harper Lee", genre="Fiction", published_year=1960,
         price=12.99, in_stock=True, pages=336, publisher="J. B. Lippincott & Co."),
    Book(title="1984", author="George Orwell", genre="Dystopian", published_year=1949,
         price=10.99, in_stock=True, pages=328, publisher="Secker & Warburg"),
    Book(title="The Great Gatsby", author="F. Scott Fitzgerald", genre="Fiction", published_year=1925,
         price=9.99, in_stock=True, pages=180, publisher="Charles Scribner's Sons"),
    Book(title="Brave New World", author="Aldous Huxley", genre="Dystopian", published_year=1932,
         price=11.50, in_stock=False, pages=311, publisher="Chatto & Windus"),
    Book(title="The Hobbit", author="J.R.R. Tolkien", genre="Fantasy", published_year=1937,
         price=14.99, in_stock=True, pages=310, publisher="George Allen & Unwin"),
    Book(title="The Catcher in the Rye", author="J.D. Salinger", genre="Fiction", published_year=1951,
         price=8.99, in_stock=True, pages=224, publisher="Little, Brown and Company"),
    Book(title="Pride and Prejudice", author="Jane Austen", genre="Romance", published_year=1813,
         price=7.99, in_stock=True, pages=432, publisher="T. Egerton"),
    Book(title="The Lord of the Rings", author="J.R.R. Tolkien", genre="Fantasy", published_year=1954,
         price=19.99, in_stock=True, pages=1178, publisher="Allen & Unwin"),
    Book(title="Animal Farm", author="George Orwell", genre="Political Satire", published_year=1945,
         price=8.50, in_stock=False, pages=112, publisher="Secker & Warburg"),
    Book(title="The Alchemist", author="Paulo Coelho", genre="Fiction", published_year=1988,
         price=10.99, in_stock=True, pages=197, publisher="HarperOne"),
    Book(title="Moby Dick", author="Herman Melville", genre="Adventure", published_year=1851,
         price=12.50, in_stock=False, pages=635, publisher="Harper & Brothers"),
    Book(title="Wuthering Heights", author="Emily Brontë", genre="Gothic Fiction", published_year=1847,
         price=9.99, in_stock=True, pages=342, publisher="Thomas Cautley Newby"),
]


def seed_books(collection: Collection, books: Iterable[Book] = SAMPLE_BOOKS, drop: bool = False) -> List:
    """Insert books into the collection, optionally dropping it first. Returns the inserted ids."""
    if drop:
        collection.drop()
        logger.info("Dropped collection %s", collection.full_name)
    docs = [book.model_dump(exclude_none=True) for book in books]
    if not docs:
        return []
    result = collection.insert_many(docs)
    logger.info("Inserted %d books into %s", len(result.inserted_ids), collection.full_name)
    return result.inserted_ids


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Load the sample bookstore dataset")
    parser.add_argument("--drop", action="store_true", help="drop the collection before inserting")
    parser.add_argument("--uri", default=None, help="MongoDB connection string (default: $MONGODB_URI)")
    args = parser.parse_args(argv)

    with connect(args.uri) as client:
        try:
            ids = seed_books(books_collection(client), drop=args.drop)
        except PyMongoError as e:
            logger.error("Seeding failed: %s", e)
            return 1
    print(f"{len(ids)} books were successfully inserted")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(main())
