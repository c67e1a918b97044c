"""
Flat-file JSON storage used by the older PHP frontend.

Two whole documents, ``forms`` and ``settings``, each stored as one JSON file
in ``settings.LEGACY_DATA_DIR``. Every save overwrites the full document;
a save either lands completely or leaves the previous file untouched.
"""
import json
import logging
import os
import tempfile
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)

DOCUMENTS = ('forms', 'settings')


class LegacyStoreError(Exception):
    """Raised when a legacy document cannot be read or saved."""


class JSONDocumentStore:

    def __init__(self, directory=None):
        self.directory = Path(directory or settings.LEGACY_DATA_DIR)

    def _path(self, name):
        if name not in DOCUMENTS:
            raise LegacyStoreError(f"Unknown legacy document: {name}")
        return self.directory / f"{name}.json"

    def read(self, name):
        """Return the whole document; a missing or empty file reads as ``{}``."""
        path = self._path(name)
        try:
            content = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise LegacyStoreError(f"Failed to read {name}: {e}") from e
        if not content.strip():
            return {}
        try:
            return json.loads(content)
        except ValueError as e:
            raise LegacyStoreError(f"Corrupt {name} document: {e}") from e

    def write(self, name, document):
        """Replace the whole document atomically."""
        path = self._path(name)
        try:
            payload = json.dumps(document, indent=4)
        except (TypeError, ValueError) as e:
            raise LegacyStoreError(f"Document {name} is not JSON serializable: {e}") from e

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix='.tmp')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(payload)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error("Failed to save legacy document %s: %s", name, e)
            raise LegacyStoreError(f"Failed to save {name}") from e
