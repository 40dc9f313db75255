"""
Services Package

Business logic between the routers and the repositories:
- auth.py / security.py: Registration, login, password hashing, tokens
- books.py: Catalogue operations and book response assembly
- reviews.py: Review operations and the one-review-per-user rule
- ratings.py: Read-time rating aggregation
- permissions.py: Owner-or-admin checks
- rate_limiter.py: slowapi limiter shared by all routers

Services receive the caller's id and admin flag as arguments and raise
bookreviews.exceptions errors; they never touch the HTTP request.
"""
