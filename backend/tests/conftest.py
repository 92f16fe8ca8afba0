"""
Pytest fixtures and test infrastructure for catalog tests.
"""
import pytest
import os
import sys
from decimal import Decimal

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catalog.config import Settings
from catalog.models import Product, RemoteCatalog
from catalog.services.catalog_service import CatalogService
from catalog.services.database import DatabasePool
from catalog.services.product_store import ProductStore


@pytest.fixture
def db_pool():
    """In-memory SQLite database for isolated testing."""
    pool = DatabasePool(sqlite_path=':memory:')
    pool.initialize()
    yield pool
    pool.close()


@pytest.fixture
def postgres_pool():
    """Test PostgreSQL database (requires TEST_DATABASE_URL env var)."""
    import psycopg2
    url = os.environ.get('TEST_DATABASE_URL')
    if not url:
        pytest.skip("TEST_DATABASE_URL not set")

    # Start from an empty products table
    conn = psycopg2.connect(url)
    with conn.cursor() as cursor:
        cursor.execute('DROP TABLE IF EXISTS products')
    conn.commit()
    conn.close()

    pool = DatabasePool(database_url=url)
    pool.initialize()
    yield pool
    pool.close()


@pytest.fixture
def store(db_pool):
    return ProductStore(db_pool)


@pytest.fixture
def service(store):
    return CatalogService(store)


@pytest.fixture
def app_client():
    """TestClient for an app backed by in-memory SQLite, with the import disabled."""
    from fastapi.testclient import TestClient
    from catalog.main import create_app

    app = create_app(Settings(sqlite_path=':memory:', import_on_startup=False))
    with TestClient(app) as client:
        yield client


class FakeCatalogClient:
    """Stands in for CatalogClient, returning a canned fetch result."""

    def __init__(self, payload=None, error=""):
        self.url = "https://catalog.test/products.json"
        self.payload = payload
        self.error = error
        self.calls = 0

    def fetch_products(self):
        self.calls += 1
        if self.error:
            return None, self.error
        return RemoteCatalog.model_validate(self.payload).products, ""


# Helper functions for tests
def make_remote_product(product_id, title=None, prices=("19.99",), body_html=None, images=None, **extra):
    """Build a remote catalog product dict in the /products.json shape."""
    item = {
        'id': product_id,
        'title': title or f'Product {product_id}',
        'body_html': body_html,
        'variants': [
            {'id': product_id * 100 + i, 'title': f'Size {i}', 'price': price, 'available': True}
            for i, price in enumerate(prices)
        ],
        'images': images if images is not None else [
            {'id': product_id * 10, 'src': f'https://cdn.test/{product_id}.jpg', 'alt': None}
        ],
    }
    item.update(extra)
    return item


def make_payload(count):
    """Catalog payload with count products."""
    return {'products': [make_remote_product(i + 1) for i in range(count)]}


def create_test_product(store, external_id=1001, title='Test Product', price='9.99', **fields):
    """Helper to save a product for testing."""
    return store.save(Product(external_id=external_id, title=title, price=Decimal(price), **fields))
