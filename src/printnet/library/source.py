"""
Definition Sources
==================

Storage abstraction for animation definitions.

A DefinitionSource resolves an animation name to the raw text of its
definition. Where the text comes from (a directory, a bundle, memory) is
the source's business; the loader only parses what it gets.

Design Rules:
    - read() returns None when no definition exists for the name
    - read() raises OSError when a definition exists but cannot be read
    - Names are opaque keys; path safety is enforced by the transport
"""

import errno
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol


logger = logging.getLogger(__name__)


class DefinitionSource(Protocol):
    """
    Protocol for definition storage backends.

    Implemented by:
        - DirectorySource (JSON files on disk)
        - MemorySource (in-process mapping, used by tests and embedding)
    """

    def read(self, name: str) -> Optional[str]:
        """
        Read the raw definition for a name.

        Args:
            name: Animation name

        Returns:
            Raw definition text, or None if no definition exists
        """
        ...


class DirectorySource:
    """
    Definitions stored as <directory>/<name><extension> files.

    Attributes:
        directory: Folder holding the definitions
        extension: File extension including the dot
        encoding: Text encoding of the files
    """

    def __init__(
        self,
        directory: str,
        extension: str = ".json",
        encoding: str = "utf-8",
    ) -> None:
        self.directory = Path(directory)
        self.extension = extension
        self.encoding = encoding

        if not self.directory.is_dir():
            logger.warning(f"Animation directory does not exist: {self.directory}")
        else:
            logger.info(f"DirectorySource initialized: {self.directory.resolve()}")

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}{self.extension}"

    def read(self, name: str) -> Optional[str]:
        path = self.path_for(name)
        try:
            if not path.is_file():
                return None
        except OSError as e:
            # A name the filesystem cannot even represent has no definition
            if e.errno == errno.ENAMETOOLONG:
                return None
            raise
        return path.read_text(encoding=self.encoding)

    def names(self) -> list:
        """List the animation names currently available on disk."""
        if not self.directory.is_dir():
            return []
        return sorted(
            path.name[: -len(self.extension)]
            for path in self.directory.glob(f"*{self.extension}")
            if path.is_file()
        )


class MemorySource:
    """In-process definitions keyed by name."""

    def __init__(self, definitions: Optional[Dict[str, str]] = None) -> None:
        self._definitions: Dict[str, str] = dict(definitions or {})
        self.read_count: int = 0

    def put(self, name: str, raw: str) -> None:
        self._definitions[name] = raw

    def read(self, name: str) -> Optional[str]:
        self.read_count += 1
        return self._definitions.get(name)

    def names(self) -> list:
        return sorted(self._definitions)
