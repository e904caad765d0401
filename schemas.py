"""
Database Schemas for the Bookstore

Each Pydantic model describes the documents of one MongoDB collection:
- Book -> "books"

The server enforces none of this. The models validate documents this program
inserts (see seed.py) and describe the collection for the /schema endpoint.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class Book(BaseModel):
    title: str = Field(..., description="Book title, used as the lookup key")
    author: str = Field(..., description="Author name")
    genre: str = Field(..., description="Genre")
    published_year: int = Field(..., description="Year of first publication")
    price: float = Field(..., ge=0, description="Price in dollars")
    in_stock: bool = Field(True, description="Whether copies are available")
    pages: Optional[int] = Field(None, ge=1, description="Number of pages")
    publisher: Optional[str] = Field(None, description="Original publisher")


class GenreStats(BaseModel):
    # null keys and averages come back for documents missing the field
    genre: Optional[str] = Field(..., alias="_id")
    averagePrice: Optional[float] = None
    bookCount: int


class AuthorStats(BaseModel):
    author: Optional[str] = Field(..., alias="_id")
    bookCount: int


class DecadeStats(BaseModel):
    decade: Optional[int] = Field(..., alias="_id")
    bookCount: int
    books: List[str] = Field(default_factory=list)
