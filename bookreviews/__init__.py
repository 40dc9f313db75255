"""
Book Reviews API Package

Catalogue books, let registered readers review them (one review per
reader per book), and serve average ratings computed from those reviews.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- exceptions.py: Typed application errors raised by the services
- main.py: FastAPI application factory, exception handlers, routers
- dependencies.py: Dependency injection (sessions, pagination, identity)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- repositories/: Query and persistence helpers per table
- services/: Business rules (auth, catalog, reviews, rating aggregation)
- routers/: API route handlers
"""

__version__ = "0.1.0"
