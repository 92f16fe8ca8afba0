"""
Remote catalog API client.

Fetches the product catalog JSON with a single GET and decodes it into
RemoteProduct models. Response bodies are capped so a misbehaving endpoint
cannot exhaust memory.
"""

import logging
from typing import List, Optional, Tuple

import requests
from pydantic import ValidationError

from ..config import CATALOG_URL, MAX_RESPONSE_BYTES, REQUEST_TIMEOUT
from ..models import RemoteCatalog, RemoteProduct


logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36',
    'Accept': 'application/json',
}


class CatalogClient:
    """
    Client for a Shopify-style /products.json endpoint.

    Errors are reported as (None, error_message) rather than raised.
    """

    def __init__(self, url: str = CATALOG_URL, timeout: float = REQUEST_TIMEOUT,
                 max_bytes: int = MAX_RESPONSE_BYTES, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)

    def _read_body(self, response: requests.Response) -> Optional[bytes]:
        """Read the body, returning None once it grows past max_bytes."""
        declared = response.headers.get('Content-Length')
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            return None

        body = bytearray()
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            body.extend(chunk)
            if len(body) > self.max_bytes:
                return None
        return bytes(body)

    def fetch_products(self) -> Tuple[Optional[List[RemoteProduct]], str]:
        """
        Fetch and decode the remote catalog.

        Returns:
            (products: list or None, error_message: str)
        """
        logger.debug("GET %s", self.url)
        try:
            response = self.session.get(self.url, timeout=self.timeout, stream=True)
            try:
                if not response.ok:
                    return None, f"HTTP {response.status_code} fetching catalog"

                body = self._read_body(response)
                if body is None:
                    return None, f"Catalog response exceeds {self.max_bytes} bytes"
            finally:
                response.close()

        except requests.exceptions.RequestException as e:
            return None, f"Catalog request failed: {str(e)}"

        try:
            catalog = RemoteCatalog.model_validate_json(body)
        except ValidationError as e:
            return None, f"Invalid catalog payload: {e.error_count()} error(s): {e.errors()[0]['msg']}"

        return catalog.products, ""
