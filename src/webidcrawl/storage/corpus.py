# src/webidcrawl/storage/corpus.py
"""Corpus store: one file per accepted WebID profile."""
import asyncio
import os
import tempfile
from pathlib import Path
from typing import List
from urllib.parse import quote, unquote
import logfire

from ..exceptions import CorpusEntryNotFound, CorpusReadError, CorpusUnavailableError, CorpusWriteError

# Characters encodeURIComponent leaves untouched besides [A-Za-z0-9_.-]
_KEY_SAFE = "!~*'()"


class CorpusStore:
    """Directory of raw profile documents keyed by URL-encoded WebID."""

    def __init__(self, directory: Path, suffix: str = ".ttl"):
        self.directory = Path(directory)
        self.suffix = suffix
        self.logger = logfire

    def key_for(self, identifier: str) -> str:
        """Filename for an identifier."""
        return quote(identifier, safe=_KEY_SAFE) + self.suffix

    def identifier_for(self, filename: str) -> str:
        """Identifier stored under a filename."""
        return unquote(filename[:-len(self.suffix)] if self.suffix else filename)

    def path_for(self, identifier: str) -> Path:
        return self.directory / self.key_for(identifier)

    def ensure_directory(self) -> None:
        """Create the corpus directory if it does not exist."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CorpusUnavailableError(
                f"Cannot create corpus directory {self.directory}: {e}"
            ) from e

    def list_identifiers(self) -> List[str]:
        """
        List every identifier currently persisted.

        Returns:
            Sorted identifiers of all files carrying the corpus suffix

        Raises:
            CorpusUnavailableError: if the directory cannot be listed
        """
        try:
            filenames = os.listdir(self.directory)
        except OSError as e:
            raise CorpusUnavailableError(
                f"Cannot list corpus directory {self.directory}: {e}"
            ) from e

        return sorted(
            self.identifier_for(name)
            for name in filenames
            if name.endswith(self.suffix)
        )

    def __contains__(self, identifier: str) -> bool:
        return self.path_for(identifier).is_file()

    async def read(self, identifier: str) -> bytes:
        """Read the stored document for an identifier."""
        path = self.path_for(identifier)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise CorpusEntryNotFound(identifier) from e
        except OSError as e:
            raise CorpusReadError(f"Cannot read corpus entry {path}: {e}") from e

    async def write(self, identifier: str, body: bytes) -> Path:
        """
        Persist a document, replacing any previous content for the key.

        Args:
            identifier: WebID the document was fetched from
            body: Raw document bytes

        Returns:
            Path of the written entry

        Raises:
            CorpusWriteError: if the entry could not be written
        """
        path = self.path_for(identifier)
        try:
            await asyncio.to_thread(self._write_atomic, path, body)
        except OSError as e:
            raise CorpusWriteError(f"Cannot write {path}: {e}") from e
        return path

    def _write_atomic(self, path: Path, body: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(body)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
