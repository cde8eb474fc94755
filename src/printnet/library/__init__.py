"""
Library Module
==============

Definition storage and loading.

    - DefinitionSource: Protocol for definition storage
    - DirectorySource: <name>.json files in a folder
    - MemorySource: In-process mapping
    - DefinitionLoader: Parses definitions into AnimationDefinition outcomes
"""

from printnet.library.source import DefinitionSource, DirectorySource, MemorySource
from printnet.library.loader import DefinitionLoader


__all__ = [
    "DefinitionSource",
    "DirectorySource",
    "MemorySource",
    "DefinitionLoader",
]
