"""
Storage for generated registration pages.

Files live in ``settings.GENERATED_FORMS_DIR`` and are named from the form's
display name plus the first 8 characters of its id. Nothing here deletes files.
"""
import logging
import re
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)

_NON_SLUG_CHAR = re.compile(r'[^a-z0-9]')
_SAFE_FILENAME = re.compile(r'^[a-z0-9-]+\.html$')

ID_PREFIX_LENGTH = 8
# Keeps the full filename well under the common 255-byte limit
MAX_SLUG_LENGTH = 200


def artifact_filename(name, form_id):
    """``"My Form!"`` + ``"3f2a9c1e-..."`` -> ``"my-form--3f2a9c1e.html"``."""
    slug = _NON_SLUG_CHAR.sub('-', (name or '').lower())[:MAX_SLUG_LENGTH]
    return f"{slug}-{str(form_id)[:ID_PREFIX_LENGTH]}.html"


class ArtifactStore:
    """Reads and writes generated pages inside a single directory."""

    def __init__(self, directory=None):
        self.directory = Path(directory or settings.GENERATED_FORMS_DIR)

    def path_for(self, filename):
        """Resolve ``filename`` inside the store, or None if the name is not one we produce."""
        if not filename or not _SAFE_FILENAME.match(filename):
            return None
        return self.directory / filename

    def write(self, filename, html):
        path = self.path_for(filename)
        if path is None:
            raise ValueError(f"Refusing to write artifact with unsafe name: {filename!r}")
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding='utf-8')
        logger.info("Wrote generated form %s (%d bytes)", path, len(html))
        return path

    def exists(self, filename):
        path = self.path_for(filename)
        return path is not None and path.is_file()
