#!/usr/bin/env python3
"""
Manual catalog import.

Runs the same one-shot import the web app performs at startup, in the
foreground, and prints a summary.

Usage:
    catalog-import [--url URL] [--limit N]
"""

import argparse
import sys
from datetime import datetime

from .config import configure_logging, load_settings
from .services.catalog_service import CatalogService
from .services.database import DatabasePool
from .services.product_importer import build_importer
from .services.product_store import ProductStore


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Import the remote product catalog once')
    parser.add_argument('--url', default=None,
                        help='Catalog URL (defaults to CATALOG_URL)')
    parser.add_argument('--limit', type=int, default=None,
                        help='Maximum products to import (defaults to IMPORT_LIMIT)')
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.url:
        settings.catalog_url = args.url
    if args.limit is not None:
        settings.import_limit = args.limit
    configure_logging(settings.log_level)

    print("=" * 60, flush=True)
    print("Catalog import", flush=True)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}", flush=True)
    print(f"Source: {settings.catalog_url}", flush=True)
    print("=" * 60, flush=True)

    db_pool = DatabasePool(
        database_url=settings.database_url,
        sqlite_path=settings.sqlite_path,
        minconn=settings.db_pool_min,
        maxconn=settings.db_pool_max,
    )
    db_pool.initialize()
    try:
        importer = build_importer(settings, CatalogService(ProductStore(db_pool)))
        summary = importer.run_once()
    finally:
        db_pool.close()

    print(f"\n{'='*60}")
    if summary.error:
        print(f"Import failed: {summary.error}")
        print(f"{'='*60}", flush=True)
        return 1
    print(f"Imported: {summary.saved}/{summary.fetched} "
          f"({summary.failed} errors) in {summary.duration_ms}ms")
    print(f"{'='*60}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
