"""
Tests for the remote catalog HTTP client.
HTTP is mocked; no network access.
"""
import json
import pytest
import requests
from unittest.mock import Mock, MagicMock

from catalog.services.catalog_client import CatalogClient

from conftest import make_payload, make_remote_product


def mock_response(body=b'', status_code=200, headers=None, chunk_size=1024):
    """Build a requests.Response stand-in streaming body in chunks."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = headers or {}
    response.iter_content.side_effect = lambda chunk_size=chunk_size: (
        body[i:i + chunk_size] for i in range(0, len(body), chunk_size)
    )
    return response


def client_returning(response, **kwargs):
    session = MagicMock()
    session.headers = {}
    session.get.return_value = response
    return CatalogClient(url="https://catalog.test/products.json", session=session, **kwargs), session


class TestFetchProducts:
    """Test fetch_products success and failure paths."""

    def test_decodes_products(self):
        body = json.dumps(make_payload(3)).encode()
        client, session = client_returning(mock_response(body))

        products, error = client.fetch_products()

        assert error == ""
        assert [p.id for p in products] == [1, 2, 3]
        assert products[0].variants[0].price == '19.99'
        session.get.assert_called_once()
        _, kwargs = session.get.call_args
        assert kwargs['timeout'] == client.timeout
        assert kwargs['stream'] is True

    def test_unknown_fields_ignored(self):
        item = make_remote_product(1, handle='blue-shirt', vendor='Acme', tags=['new'])
        item['variants'][0]['sku'] = 'SKU-1'
        item['images'][0]['width'] = 800
        body = json.dumps({'products': [item], 'next_page': 2}).encode()
        client, _ = client_returning(mock_response(body))

        products, error = client.fetch_products()

        assert error == ""
        assert products[0].title == 'Product 1'

    def test_missing_optional_fields(self):
        body = json.dumps({'products': [{'id': 5, 'title': 'Bare'}]}).encode()
        client, _ = client_returning(mock_response(body))

        products, error = client.fetch_products()

        assert error == ""
        assert products[0].body_html is None
        assert products[0].variants == []
        assert products[0].images == []

    def test_non_success_status(self):
        client, _ = client_returning(mock_response(b'oops', status_code=503))

        products, error = client.fetch_products()

        assert products is None
        assert '503' in error

    def test_network_error(self):
        client, session = client_returning(mock_response())
        session.get.side_effect = requests.exceptions.ConnectionError("connection refused")

        products, error = client.fetch_products()

        assert products is None
        assert 'connection refused' in error

    def test_timeout(self):
        client, session = client_returning(mock_response())
        session.get.side_effect = requests.exceptions.Timeout("read timed out")

        products, error = client.fetch_products()

        assert products is None
        assert 'timed out' in error

    def test_malformed_json(self):
        client, _ = client_returning(mock_response(b'{"products": ['))

        products, error = client.fetch_products()

        assert products is None
        assert 'Invalid catalog payload' in error

    def test_wrong_shape(self):
        body = json.dumps({'products': [{'title': 'No id'}]}).encode()
        client, _ = client_returning(mock_response(body))

        products, error = client.fetch_products()

        assert products is None
        assert 'Invalid catalog payload' in error


class TestResponseSizeLimit:
    """Test the response body ceiling."""

    def test_body_over_limit_while_streaming(self):
        response = mock_response(b'x' * 5000)
        client, _ = client_returning(response, max_bytes=4096)

        products, error = client.fetch_products()

        assert products is None
        assert 'exceeds 4096 bytes' in error
        response.close.assert_called_once()

    def test_declared_length_over_limit(self):
        response = mock_response(b'{}', headers={'Content-Length': '999999'})
        client, _ = client_returning(response, max_bytes=1024)

        products, error = client.fetch_products()

        assert products is None
        assert 'exceeds' in error
        response.iter_content.assert_not_called()

    def test_body_at_limit_accepted(self):
        body = json.dumps(make_payload(1)).encode()
        client, _ = client_returning(mock_response(body), max_bytes=len(body))

        products, error = client.fetch_products()

        assert error == ""
        assert len(products) == 1

    def test_default_limit_is_2_mib(self):
        client = CatalogClient()
        assert client.max_bytes >= 2 * 1024 * 1024
