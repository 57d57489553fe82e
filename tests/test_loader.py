"""Tests for DocumentLoader."""
from unittest.mock import Mock

import pytest
import requests

from datamapper.exceptions import DocumentLoadError
from datamapper.parser.loader import DocumentLoader


@pytest.fixture
def resources(tmp_path):
    """Directory with one YAML and one JSON document"""
    (tmp_path / "mapping.yml").write_text(
        "mappings:\n  - source: user.name\n    target: fullName\n", encoding="utf-8"
    )
    (tmp_path / "data.json").write_text('{"user": {"name": "Ada"}}', encoding="utf-8")
    return tmp_path


class TestDocumentLoader:
    """Test loading documents from files."""

    def test_load_yaml(self, resources):
        tree = DocumentLoader().load(str(resources / "mapping.yml"))
        assert tree == {"mappings": [{"source": "user.name", "target": "fullName"}]}

    def test_load_json(self, resources):
        assert DocumentLoader().load(str(resources / "data.json")) == {"user": {"name": "Ada"}}

    def test_callable(self, resources):
        assert DocumentLoader()(str(resources / "data.json"))["user"]["name"] == "Ada"

    def test_resource_reference_falls_back_to_base_dir(self, resources):
        loader = DocumentLoader(base_dir=str(resources))
        assert loader.load("/data.json") == {"user": {"name": "Ada"}}

    def test_detect_format(self):
        assert DocumentLoader.detect_format("a/b.YAML") == "yaml"
        assert DocumentLoader.detect_format("https://x.io/data.json?v=2") == "json"

    def test_unsupported_format(self):
        with pytest.raises(DocumentLoadError) as exc_info:
            DocumentLoader().load("mapping.xml")
        assert "unsupported format" in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError) as exc_info:
            DocumentLoader().load(str(tmp_path / "nope.json"))
        assert exc_info.value.ref.endswith("nope.json")

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"a": "\xff\xfe"}')

        with pytest.raises(DocumentLoadError) as exc_info:
            DocumentLoader().load(str(path))
        assert "invalid utf-8" in str(exc_info.value)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DocumentLoadError):
            DocumentLoader().load(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("a: [1, 2", encoding="utf-8")

        with pytest.raises(DocumentLoadError):
            DocumentLoader().load(str(path))


class TestRemoteDocuments:
    """Test loading documents over HTTP."""

    def test_fetch(self):
        loader = DocumentLoader(timeout=5)
        response = Mock()
        response.text = "mappings: []"
        loader.session = Mock()
        loader.session.get.return_value = response

        assert loader.load("https://config.example.org/mapping.yml") == {"mappings": []}
        loader.session.get.assert_called_once_with("https://config.example.org/mapping.yml", timeout=5)
        response.raise_for_status.assert_called_once()

    def test_http_error(self):
        loader = DocumentLoader()
        loader.session = Mock()
        loader.session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(DocumentLoadError) as exc_info:
            loader.load("http://localhost:1/data.json")
        assert "refused" in str(exc_info.value)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
