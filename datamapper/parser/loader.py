"""Loads configuration and data documents from files or HTTP references."""
import json
import logging
from pathlib import Path
from typing import Any, Optional

import requests
import yaml

from datamapper.exceptions import DocumentLoadError

logger = logging.getLogger(__name__)


class DocumentLoader:
    """Loads a parsed document tree from a reference."""

    # Map extensions to formats
    FORMATS = {
        'yml': 'yaml',
        'yaml': 'yaml',
        'json': 'json',
    }

    def __init__(self, base_dir: Optional[str] = None, timeout: int = 30):
        """
        Initialize loader

        Args:
            base_dir: Directory "/name.ext" references fall back to
            timeout: Timeout in seconds for HTTP references
        """
        self.base_dir = Path(base_dir) if base_dir else None
        self.timeout = timeout
        self.session = requests.Session()

    def __call__(self, ref: str) -> Any:
        return self.load(ref)

    def load(self, ref: str) -> Any:
        """
        Load and parse a document

        Args:
            ref: File path, "/name.ext" resource reference or http(s) URL

        Returns:
            Parsed document tree

        Raises:
            DocumentLoadError: If the document cannot be read or parsed
        """
        doc_format = self.detect_format(ref)

        if ref.startswith(("http://", "https://")):
            content = self._fetch(ref)
        else:
            content = self._read(ref)

        return self.parse(content, doc_format, ref)

    @classmethod
    def detect_format(cls, ref: str) -> str:
        """Detect document format from the reference's extension."""
        name = ref.split("?", 1)[0].lower()
        ext = name.rsplit('.', 1)[-1] if '.' in name else ''

        if ext not in cls.FORMATS:
            raise DocumentLoadError(ref, f"unsupported format '{ext}'")
        return cls.FORMATS[ext]

    @staticmethod
    def parse(content: str, doc_format: str, ref: str = "<string>") -> Any:
        try:
            if doc_format == 'yaml':
                return yaml.safe_load(content)
            return json.loads(content)
        except (yaml.YAMLError, ValueError) as e:
            raise DocumentLoadError(ref, f"invalid {doc_format}: {e}")

    def resolve_path(self, ref: str) -> Path:
        path = Path(ref)
        if path.exists() or self.base_dir is None:
            return path

        # classpath-style reference, e.g. "/2.mapping-config.yml"
        candidate = self.base_dir / ref.lstrip("/")
        if candidate.exists():
            return candidate
        return path

    def _read(self, ref: str) -> str:
        path = self.resolve_path(ref)
        logger.debug(f"Reading {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise DocumentLoadError(ref, f"invalid utf-8: {e.reason} at byte {e.start}")
        except OSError as e:
            raise DocumentLoadError(ref, e.strerror or str(e))

    def _fetch(self, url: str) -> str:
        logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            raise DocumentLoadError(url, str(e))
