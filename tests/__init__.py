"""
Test Suite for the Book Reviews API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_auth.py: /api/v1/auth endpoints
- test_books.py: /api/v1/books and /api/v1/authors endpoints
- test_reviews.py: review endpoints
- test_services.py: service layer called directly

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_reviews.py -v
"""
