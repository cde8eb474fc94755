"""
Definition Loader
=================

Reads and parses stored animation definitions.

This loader:
    - Resolves a name through a DefinitionSource
    - Parses the JSON document into an AnimationDefinition
    - Reports NotFound / LoadError as explicit outcomes

Design Rules:
    - No caching at this layer
    - Never raises for bad content; failures are logged and returned
    - Treats the name as an opaque key
"""

import logging
import threading

from pydantic import ValidationError

from printnet.library.source import DefinitionSource
from printnet.models.animation import AnimationDefinition
from printnet.models.outcome import Found, LoadError, NotFound, Outcome


logger = logging.getLogger(__name__)


class DefinitionLoader:
    """
    Loader for raw animation definitions.

    Attributes:
        source: Where definitions are read from
        load_count: Number of load attempts (observability)
        error_count: Number of loads that ended in LoadError

    Example:
        loader = DefinitionLoader(DirectorySource("./anims"))

        outcome = loader.load("spinner")
        if isinstance(outcome, Found):
            print(len(outcome.value.frames))
    """

    def __init__(self, source: DefinitionSource) -> None:
        self.source = source

        # load() runs in worker threads
        self._lock = threading.Lock()
        self._load_count: int = 0
        self._error_count: int = 0

    @property
    def load_count(self) -> int:
        with self._lock:
            return self._load_count

    @property
    def error_count(self) -> int:
        with self._lock:
            return self._error_count

    def _record(self, error: bool = False) -> None:
        with self._lock:
            if error:
                self._error_count += 1
            else:
                self._load_count += 1

    def load(self, name: str) -> Outcome[AnimationDefinition]:
        """
        Load and validate the definition for a name.

        Args:
            name: Animation name

        Returns:
            Found(AnimationDefinition), NotFound, or LoadError
        """
        self._record()

        try:
            raw = self.source.read(name)
        except (OSError, UnicodeDecodeError) as e:
            self._record(error=True)
            logger.error(f"Failed to read animation '{name}': {e}")
            return LoadError(name=name, reason=f"unreadable: {e}")

        if raw is None:
            logger.info(f"Animation not found: '{name}'")
            return NotFound(name=name)

        try:
            definition = AnimationDefinition.model_validate_json(raw)
        except ValidationError as e:
            self._record(error=True)
            logger.warning(
                f"Malformed animation '{name}': {e.error_count()} validation error(s)"
            )
            return LoadError(name=name, reason=f"malformed: {e.errors()[0]['msg']}")

        logger.debug(
            f"Loaded animation '{name}': frames={len(definition.frames)}, "
            f"framerate={definition.frame_rate_ms}ms"
        )
        return Found(definition)
