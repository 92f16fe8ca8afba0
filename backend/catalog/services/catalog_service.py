"""
Catalog service used by the routes and the importer.

Forwards to ProductStore; keeps handlers unaware of storage details.
"""

from typing import List, Optional

from fastapi import Request

from ..models import Product
from .product_store import ProductStore


class CatalogService:

    def __init__(self, store: ProductStore):
        self._store = store

    def save_product(self, product: Product) -> Product:
        return self._store.save(product)

    def get_all_products(self) -> List[Product]:
        return self._store.find_all()

    def search_products(self, query: str) -> List[Product]:
        return self._store.search_by_title(query)

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return self._store.find_by_id(product_id)

    def update_product(self, product: Product) -> Optional[Product]:
        return self._store.update(product)

    def delete_product(self, product_id: int) -> bool:
        return self._store.delete_by_id(product_id)


def get_catalog_service(request: Request) -> CatalogService:
    """
    Dependency for FastAPI routes to get the CatalogService built at startup.

    Usage in routes:
        @router.get("/items")
        def get_items(service: CatalogService = Depends(get_catalog_service)):
            return service.get_all_products()
    """
    return request.app.state.catalog_service
