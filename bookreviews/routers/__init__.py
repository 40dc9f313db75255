"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* (register, login, me)
- books.py: /api/v1/books/* (catalogue and search)
- reviews.py: /api/v1/books/{id}/reviews and /api/v1/reviews/*
- authors.py: /api/v1/authors

Each router is imported and registered in main.py.
"""

from bookreviews.routers.auth import router as auth_router
from bookreviews.routers.authors import router as authors_router
from bookreviews.routers.books import router as books_router
from bookreviews.routers.reviews import router as reviews_router

__all__ = [
    "auth_router",
    "authors_router",
    "books_router",
    "reviews_router",
]
