"""Storefront FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in domain.toml:
#   - "test"       → retry policy tuned for fast tests
#   - "production" → PostgreSQL via DATABASE_URL
from storefront.api import create_app
from storefront.domain import storefront

storefront.init()

app = create_app(storefront)
