"""
Remote catalog import.

Fetches the remote catalog once, maps each remote product onto a Product and
upserts it through the CatalogService. One product failing to save never
stops the rest of the batch.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from ..config import DESCRIPTION_MAX_LENGTH, IMPORT_LIMIT, Settings
from ..models import Product, RemoteProduct, RemoteVariant
from .catalog_client import CatalogClient
from .catalog_service import CatalogService


logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Outcome of one import run."""
    fetched: int = 0
    saved: int = 0
    failed: int = 0
    error: Optional[str] = None
    duration_ms: int = 0


def parse_price(raw: Optional[str]) -> Optional[Decimal]:
    """Parse decimal price text, None if missing or not a finite number."""
    if raw is None:
        return None
    try:
        value = Decimal(raw.strip())
    except (InvalidOperation, ValueError):
        return None
    return value if value.is_finite() else None


def serialize_variants(variants: List[RemoteVariant]) -> str:
    """JSON text of the full variant list, kept for later use."""
    return json.dumps([variant.model_dump() for variant in variants])


def map_remote_product(item: RemoteProduct,
                       description_max_length: int = DESCRIPTION_MAX_LENGTH) -> Product:
    """
    Map a remote catalog product onto a Product.

    Price comes from the first variant only and defaults to 0. The image is
    the first image's src. The description is body_html cut to
    description_max_length characters; blank body_html is no description.
    """
    price = None
    if item.variants:
        price = parse_price(item.variants[0].price)
        if price is None:
            logger.debug("Unparsable price %r for %s, using 0", item.variants[0].price, item.title)
    else:
        logger.debug("No variants for %s, using price 0", item.title)

    image_url = item.images[0].src if item.images else None
    if not image_url:
        image_url = None

    description = None
    if item.body_html is None or not item.body_html.strip():
        logger.debug("No description for %s", item.title)
    else:
        description = item.body_html[:description_max_length]

    return Product(
        external_id=item.id,
        title=item.title,
        price=price if price is not None else Decimal('0'),
        image_url=image_url,
        description=description,
        variants=serialize_variants(item.variants),
    )


class ProductImporter:
    """
    One-shot import of the remote catalog into local storage.

    run_once() executes the import at most once per importer; the app starts
    it on a background thread at startup.
    """

    def __init__(self, service: CatalogService, client: CatalogClient,
                 limit: int = IMPORT_LIMIT, description_max_length: int = DESCRIPTION_MAX_LENGTH):
        self.service = service
        self.client = client
        self.limit = limit
        self.description_max_length = description_max_length
        self._started = False
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def import_products(self) -> ImportSummary:
        """Fetch, cap, map and upsert the remote catalog."""
        start_time = time.time()
        summary = ImportSummary()

        logger.info("Starting to fetch products from %s", self.client.url)
        remote_products, error = self.client.fetch_products()
        if error:
            logger.error("Failed to fetch products from API: %s", error)
            summary.error = error
            summary.duration_ms = int((time.time() - start_time) * 1000)
            return summary

        if len(remote_products) > self.limit:
            logger.info("Catalog has %d products, importing the first %d",
                        len(remote_products), self.limit)
        products = [
            map_remote_product(item, self.description_max_length)
            for item in remote_products[:self.limit]
        ]
        summary.fetched = len(products)

        for product in products:
            if self._stop.is_set():
                logger.info("Catalog import stopped, %d products not saved",
                            summary.fetched - summary.saved - summary.failed)
                break
            try:
                self.service.save_product(product)
                summary.saved += 1
                logger.debug("Saved product: %s", product.title)
            except Exception as e:
                summary.failed += 1
                logger.warning("Failed to save product %s: %s", product.title, e)

        summary.duration_ms = int((time.time() - start_time) * 1000)
        logger.info("Fetched %d products (%d saved, %d failed) in %dms",
                    summary.fetched, summary.saved, summary.failed, summary.duration_ms)
        return summary

    def run_once(self) -> Optional[ImportSummary]:
        """Run the import unless this importer has already run it."""
        with self._lock:
            if self._started:
                logger.info("Catalog import already ran, skipping")
                return None
            self._started = True

        try:
            return self.import_products()
        except Exception as e:
            logger.exception("Catalog import aborted")
            return ImportSummary(error=str(e))

    def start_background(self) -> threading.Thread:
        """Start run_once() on a daemon thread and return the thread."""
        self._thread = threading.Thread(target=self.run_once, name="catalog-import", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Ask a running import to stop and wait for its thread.

        The product being saved finishes; remaining products are skipped.
        Returns False if the thread is still alive after timeout.
        """
        self._stop.set()
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        if thread.is_alive():
            logger.warning("Catalog import still running after %ss", timeout)
            return False
        return True


def build_importer(settings: Settings, service: CatalogService) -> ProductImporter:
    """Importer wired to a CatalogClient configured from settings."""
    client = CatalogClient(
        url=settings.catalog_url,
        timeout=settings.request_timeout,
        max_bytes=settings.max_response_bytes,
    )
    return ProductImporter(
        service,
        client,
        limit=settings.import_limit,
        description_max_length=settings.description_max_length,
    )
