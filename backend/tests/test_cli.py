"""
Tests for the manual catalog import command.
"""
import pytest
from unittest.mock import MagicMock, patch

from catalog import cli
from catalog.config import Settings
from catalog.services.product_importer import ImportSummary


@pytest.fixture
def memory_settings():
    with patch('catalog.cli.load_settings', return_value=Settings(sqlite_path=':memory:')) as mock_load:
        yield mock_load.return_value


class TestCliMain:
    """Test exit codes and argument handling."""

    def test_success_exit_code(self, memory_settings, capsys):
        importer = MagicMock()
        importer.run_once.return_value = ImportSummary(fetched=3, saved=3)

        with patch('catalog.cli.build_importer', return_value=importer):
            exit_code = cli.main([])

        assert exit_code == 0
        assert 'Imported: 3/3' in capsys.readouterr().out

    def test_failure_exit_code(self, memory_settings, capsys):
        importer = MagicMock()
        importer.run_once.return_value = ImportSummary(error="HTTP 500 fetching catalog")

        with patch('catalog.cli.build_importer', return_value=importer):
            exit_code = cli.main([])

        assert exit_code == 1
        assert 'HTTP 500' in capsys.readouterr().out

    def test_arguments_override_settings(self, memory_settings):
        importer = MagicMock()
        importer.run_once.return_value = ImportSummary()

        with patch('catalog.cli.build_importer', return_value=importer) as mock_build:
            cli.main(['--url', 'https://shop.test/products.json', '--limit', '5'])

        settings = mock_build.call_args[0][0]
        assert settings.catalog_url == 'https://shop.test/products.json'
        assert settings.import_limit == 5
