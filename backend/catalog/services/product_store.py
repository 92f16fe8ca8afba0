"""
Products table accessor.

All writes are single statements so concurrent callers (the startup import
and a manual edit) cannot create duplicate external ids.
"""

from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from ..models import Product
from .database import DatabasePool


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def row_to_product(row) -> Product:
    """Build a Product from a RealDictCursor / sqlite3.Row result."""
    return Product(
        id=row['id'],
        external_id=row['external_id'],
        title=row['title'],
        price=Decimal(str(row['price'])),
        image_url=row['image_url'],
        description=row['description'],
        variants=row['variants'],
    )


class ProductStore:
    """CRUD and upsert operations over the products table."""

    def __init__(self, db: DatabasePool):
        self._db = db

    @property
    def _now(self) -> str:
        if self._db.is_postgres:
            return 'CURRENT_TIMESTAMP'
        return "strftime('%Y-%m-%d %H:%M:%f', 'now')"

    @property
    def _columns(self) -> str:
        variants = 'variants::text AS variants' if self._db.is_postgres else 'variants'
        return f'id, external_id, title, price, image_url, description, {variants}'

    def save(self, product: Product) -> Product:
        """Insert or update by external_id, return the product with its id."""
        ph = self._db.placeholder
        variants_ph = f'{ph}::jsonb' if self._db.is_postgres else ph
        params = (
            product.external_id,
            product.title,
            product.price,
            product.image_url,
            product.description,
            product.variants,
        )
        sql = f'''
            INSERT INTO products (external_id, title, price, image_url, description, variants, updated_at)
            VALUES ({ph}, {ph}, {ph}, {ph}, {ph}, {variants_ph}, {self._now})
            ON CONFLICT (external_id) DO UPDATE SET
                title = EXCLUDED.title,
                price = EXCLUDED.price,
                image_url = EXCLUDED.image_url,
                description = EXCLUDED.description,
                variants = EXCLUDED.variants,
                updated_at = {self._now}
        '''

        with self._db.get_cursor() as cursor:
            if self._db.is_postgres:
                cursor.execute(sql + ' RETURNING id', params)
                product_id = cursor.fetchone()['id']
            else:
                cursor.execute(sql, params)
                cursor.execute(f'SELECT id FROM products WHERE external_id = {ph}',
                               (product.external_id,))
                product_id = cursor.fetchone()['id']

        return replace(product, id=product_id)

    def find_all(self) -> List[Product]:
        """All products ordered by title."""
        with self._db.get_cursor() as cursor:
            cursor.execute(f'SELECT {self._columns} FROM products ORDER BY title')
            return [row_to_product(row) for row in cursor.fetchall()]

    def search_by_title(self, query: str) -> List[Product]:
        """Case-insensitive substring match on title."""
        ph = self._db.placeholder
        if self._db.is_postgres:
            condition = f'LOWER(title) LIKE LOWER({ph})'
            pattern = f'%{escape_like(query)}%'
        else:
            # casefold() is registered on the SQLite connection
            condition = f'casefold(title) LIKE {ph}'
            pattern = f'%{escape_like(query.casefold())}%'
        with self._db.get_cursor() as cursor:
            cursor.execute(
                f'''SELECT {self._columns} FROM products
                   WHERE {condition} ESCAPE '\\'
                   ORDER BY title''',
                (pattern,)
            )
            return [row_to_product(row) for row in cursor.fetchall()]

    def find_by_id(self, product_id: int) -> Optional[Product]:
        ph = self._db.placeholder
        with self._db.get_cursor() as cursor:
            cursor.execute(f'SELECT {self._columns} FROM products WHERE id = {ph}', (product_id,))
            row = cursor.fetchone()
        return row_to_product(row) if row else None

    def update(self, product: Product) -> Optional[Product]:
        """
        Overwrite the editable fields of an existing product.

        external_id and variants are left untouched. Returns None when no row
        has the product's id.
        """
        ph = self._db.placeholder
        with self._db.get_cursor() as cursor:
            cursor.execute(
                f'''UPDATE products
                   SET title = {ph}, price = {ph}, image_url = {ph}, description = {ph},
                       updated_at = {self._now}
                   WHERE id = {ph}''',
                (product.title, product.price, product.image_url, product.description, product.id)
            )
            rows_affected = cursor.rowcount
        return product if rows_affected > 0 else None

    def delete_by_id(self, product_id: int) -> bool:
        ph = self._db.placeholder
        with self._db.get_cursor() as cursor:
            cursor.execute(f'DELETE FROM products WHERE id = {ph}', (product_id,))
            rows_affected = cursor.rowcount
        return rows_affected > 0
