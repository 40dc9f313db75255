"""
Repositories Package

Thin persistence helpers over SQLAlchemy, one module per table group:
- users.py: Identity store and the user summary resolver
- books.py: Catalogue queries (filters, sorting, search, authors)
- reviews.py: Review queries and the per-book rating aggregation

Repositories never raise application errors; deciding what a missing row
means is the services' job.
"""
