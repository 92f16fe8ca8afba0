"""
Catalog Hub backend.

Provides:
- A products table with upsert-by-external-id storage
- HTML fragments for listing, searching and editing products
- CSV/JSON export of the catalog
- A one-shot import of a remote JSON product catalog at startup
"""
