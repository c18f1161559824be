"""Loading of operation documents from files and URLs.

An operation document is the already-resolved description of an API: its
schemas and its operations with ordered, typed parameters. It can be
written as JSON or YAML and is validated into an ``OperationDocument``.
"""

import json
import logging
from pathlib import Path
from urllib.parse import urlparse

import httpx
import yaml
from pydantic import ValidationError

from optsgen.exceptions import SchemaLoadError, SchemaValidationError
from optsgen.model import OperationDocument

logger = logging.getLogger(__name__)

__all__ = ['DocumentLoader']


class DocumentLoader:
    """Loads operation documents from URLs or file paths.

    Example:
        >>> loader = DocumentLoader()
        >>> document = loader.load('./api.yaml')
        >>> document = loader.load('https://example.com/api.json')
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        base_path: str | Path | None = None,
    ):
        """Initialize the loader.

        Args:
            http_client: Optional HTTP client used for URL sources.
            base_path: Base path for relative file sources. Defaults to the
                current working directory.
        """
        self._http_client = http_client
        self._base_path = Path(base_path) if base_path else Path.cwd()

    def load(self, source: str) -> OperationDocument:
        """Load and validate an operation document.

        Raises:
            SchemaLoadError: If the content cannot be read or parsed.
            SchemaValidationError: If the content is not a valid operation document.
        """
        if self._is_url(source):
            content = self._load_from_url(source)
        else:
            content = self._load_from_file(source)

        return self.validate(content, source)

    def validate(self, content: object, source: str = '<memory>') -> OperationDocument:
        try:
            document = OperationDocument.from_content(content)
        except ValidationError as e:
            raise SchemaValidationError(
                source,
                errors=[
                    f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}"
                    for error in e.errors()
                ],
            ) from e

        logger.info(
            f'Loaded {len(document.operations)} operations and '
            f'{len(document.schemas)} schemas from {source}'
        )
        return document

    def _is_url(self, text: str) -> bool:
        try:
            result = urlparse(text)
            return result.scheme in ('http', 'https')
        except ValueError:
            return False

    def _load_from_url(self, url: str) -> object:
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')

            if 'yaml' in content_type or url.endswith(('.yaml', '.yml')):
                return yaml.safe_load(response.text)
            return json.loads(response.text)

        except httpx.HTTPError as e:
            raise SchemaLoadError(url, cause=e) from e
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(url, cause=e) from e

    def _load_from_file(self, file_path: str) -> object:
        path = Path(file_path)
        if not path.is_absolute():
            path = self._base_path / path

        if not path.exists():
            raise SchemaLoadError(
                str(file_path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError, OSError) as e:
            raise SchemaLoadError(str(file_path), cause=e) from e
