import os
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pymongo import MongoClient
from pymongo.database import Database

import queries
from database import get_client, DATABASE_NAME, COLLECTION_NAME
from schemas import Book as BookSchema, GenreStats, AuthorStats, DecadeStats

# Built on first request, closed on shutdown
client: Optional[MongoClient] = None
db: Optional[Database] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_db()

app = FastAPI(title="Bookstore Query API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------
# Utility helpers
# ----------------------

def get_db() -> Database:
    global client, db
    if db is None:
        client = get_client()
        db = client[DATABASE_NAME]
    return db

def close_db():
    global client, db
    if client is not None:
        client.close()
    client = None
    db = None

def books():
    return get_db()[COLLECTION_NAME]

def serialize(doc: dict) -> dict:
    if not doc:
        return doc
    d = {**doc}
    if d.get("_id") is not None:
        d["id"] = str(d.pop("_id"))
    return d

# ----------------------
# Health & Schema
# ----------------------

@app.get("/")
def read_root():
    return {"message": "Bookstore Query API is running"}

@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": None,
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": []
    }
    try:
        if db is not None:
            response["database"] = "✅ Available"
            response["connection_status"] = "Connected"
            try:
                response["collections"] = db.list_collection_names()[:10]
                response["database"] = "✅ Connected & Working"
            except Exception as e:
                response["database"] = f"⚠️ Connected but Error: {str(e)[:50]}"
        else:
            response["database"] = "⚠️ Available but not initialized"
    except Exception as e:
        response["database"] = f"❌ Error: {str(e)[:50]}"
    response["database_url"] = "✅ Set" if os.getenv("MONGODB_URI") else "❌ Not Set"
    response["database_name"] = "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set"
    return response

@app.get("/schema")
def get_schema():
    # Return JSON schema-like description for viewer tools
    return {
        "book": BookSchema.model_json_schema(),
    }

# ----------------------
# Books Endpoints
# ----------------------

@app.get("/books")
def list_books(
    genre: Optional[str] = None,
    author: Optional[str] = None,
    min_year: Optional[int] = Query(None, description="Only books published after this year"),
    in_stock: Optional[bool] = None,
    sort: str = Query("title", pattern="^(title|price|published_year)$"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    per_page: int = Query(queries.PAGE_SIZE, ge=1, le=100),
):
    filter_dict = {}
    if genre:
        filter_dict["genre"] = genre
    if author:
        filter_dict["author"] = author
    if min_year is not None:
        filter_dict["published_year"] = {"$gt": min_year}
    if in_stock is not None:
        filter_dict["in_stock"] = in_stock
    docs = queries.search_books(
        books(), filter_dict, sort=sort, descending=(order == "desc"), page=page, per_page=per_page
    )
    return [serialize(d) for d in docs]

@app.get("/books/{title:path}")
def get_book(title: str):
    doc = queries.find_by_title(books(), title)
    if not doc:
        raise HTTPException(status_code=404, detail="Book not found")
    return serialize(doc)

# ----------------------
# Aggregation Endpoints
# ----------------------

@app.get("/stats/genres")
def genre_stats():
    return [GenreStats.model_validate(d).model_dump() for d in queries.average_price_by_genre(books())]

@app.get("/stats/authors")
def author_stats(limit: int = Query(3, ge=1, le=50)):
    return [AuthorStats.model_validate(d).model_dump() for d in queries.top_authors(books(), limit=limit)]

@app.get("/stats/decades")
def decade_stats():
    return [DecadeStats.model_validate(d).model_dump() for d in queries.books_by_decade(books())]


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
