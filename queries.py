"""
Catalog queries against the books collection.

Each function issues one request through pymongo and returns plain Python
results (lists of dicts, counts, or explain summaries). Printing lives in
run_queries.py and HTTP serialization in main.py.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection

PAGE_SIZE = 5

# ----------------------
# Basic CRUD
# ----------------------

def find_by_genre(collection: Collection, genre: str) -> List[dict]:
    return list(collection.find({"genre": genre}))


def find_published_after(collection: Collection, year: int) -> List[dict]:
    return list(collection.find({"published_year": {"$gt": year}}))


def find_by_author(collection: Collection, author: str) -> List[dict]:
    return list(collection.find({"author": author}))


def find_by_title(collection: Collection, title: str) -> Optional[dict]:
    return collection.find_one({"title": title})


def update_price(collection: Collection, title: str, price: float) -> int:
    """Set the price of the book with this title and return the modified count.

    Titles are assumed unique; with duplicates only one arbitrary match changes.
    """
    result = collection.update_one({"title": title}, {"$set": {"price": price}})
    return result.modified_count


def delete_by_title(collection: Collection, title: str) -> int:
    result = collection.delete_one({"title": title})
    return result.deleted_count

# ----------------------
# Advanced queries
# ----------------------

def find_in_stock_after(collection: Collection, year: int) -> List[dict]:
    return list(collection.find({"in_stock": True, "published_year": {"$gt": year}}))


def find_projected(collection: Collection, query: dict,
                   fields: Iterable[str] = ("title", "author", "price")) -> List[dict]:
    projection = {field: 1 for field in fields}
    projection["_id"] = 0
    return list(collection.find(query, projection))


def sorted_by_price(collection: Collection, descending: bool = False) -> List[dict]:
    direction = DESCENDING if descending else ASCENDING
    cursor = collection.find({}, {"title": 1, "price": 1, "_id": 0}).sort("price", direction)
    return list(cursor)


def paginate(collection: Collection, page: int, per_page: int = PAGE_SIZE) -> List[dict]:
    """Return one page of books ordered by title. Pages start at 1."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    cursor = (
        collection.find({}, {"title": 1, "author": 1, "_id": 0})
        .sort("title", ASCENDING)
        .skip((page - 1) * per_page)
        .limit(per_page)
    )
    return list(cursor)


def search_books(collection: Collection, query: Optional[dict] = None, sort: str = "title",
                 descending: bool = False, page: int = 1, per_page: int = PAGE_SIZE) -> List[dict]:
    """Filtered, sorted and paginated listing of full book documents."""
    if page < 1 or per_page < 1:
        raise ValueError("page and per_page must be >= 1")
    cursor = (
        collection.find(query or {})
        .sort(sort, DESCENDING if descending else ASCENDING)
        .skip((page - 1) * per_page)
        .limit(per_page)
    )
    return list(cursor)

# ----------------------
# Aggregation pipelines
# ----------------------

def average_price_by_genre(collection: Collection) -> List[dict]:
    pipeline = [
        {"$group": {
            "_id": "$genre",
            "averagePrice": {"$avg": "$price"},
            "bookCount": {"$sum": 1},
        }},
        {"$sort": {"averagePrice": -1}},
    ]
    return list(collection.aggregate(pipeline))


def top_authors(collection: Collection, limit: int = 3) -> List[dict]:
    pipeline = [
        {"$group": {"_id": "$author", "bookCount": {"$sum": 1}}},
        {"$sort": {"bookCount": -1}},
        {"$limit": limit},
    ]
    return list(collection.aggregate(pipeline))


def books_by_decade(collection: Collection) -> List[dict]:
    pipeline = [
        {"$project": {
            "title": 1,
            "published_year": 1,
            # 1987 -> 1980
            "decade": {"$subtract": ["$published_year", {"$mod": ["$published_year", 10]}]},
        }},
        {"$group": {
            "_id": "$decade",
            "bookCount": {"$sum": 1},
            "books": {"$push": "$title"},
        }},
        {"$sort": {"_id": 1}},
    ]
    return list(collection.aggregate(pipeline))

# ----------------------
# Indexing
# ----------------------

def create_title_index(collection: Collection) -> str:
    return collection.create_index([("title", ASCENDING)])


def create_author_year_index(collection: Collection) -> str:
    return collection.create_index([("author", ASCENDING), ("published_year", ASCENDING)])


def explain_query(collection: Collection, query: dict) -> Dict[str, Any]:
    """Run the explain command for a find in executionStats mode."""
    return collection.database.command(
        "explain",
        {"find": collection.name, "filter": query},
        verbosity="executionStats",
    )


def execution_summary(explain: Dict[str, Any]) -> Tuple[int, int]:
    """Return (documents examined, execution time in ms) from an explain result."""
    stats = explain.get("executionStats", {})
    return stats.get("totalDocsExamined", 0), stats.get("executionTimeMillis", 0)
