"""
registry.py - Virtual modules served to the bundler for one build

Maps a synthetic module id to either a finished Chunk (source text) or
Pending (id reserved, source not generated yet). Entries live until the
process exits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from mdbuild.errors import MdBuildError


@dataclass(frozen=True)
class Chunk:
    source_text: str


@dataclass(frozen=True)
class Pending:
    pass


ModuleEntry = Union[Chunk, Pending]


class ContentModuleRegistry:
    def __init__(self):
        self._modules: Dict[str, ModuleEntry] = {}

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def reserve(self, module_id: str) -> None:
        if module_id not in self._modules:
            self._modules[module_id] = Pending()

    def register(self, module_id: str, source_text: str) -> None:
        existing = self._modules.get(module_id)
        if isinstance(existing, Chunk):
            raise MdBuildError(
                message=f"Virtual module registered twice: {module_id}",
                suggestion="Two posts probably share the same slug; rename one of the directories",
                context={"module_id": module_id}
            )
        self._modules[module_id] = Chunk(source_text)

    def source(self, module_id: str) -> Optional[str]:
        """
        Source text for a known module, None for an unknown one.

        Raises:
            MdBuildError: if the module is reserved but not generated yet
        """
        entry = self._modules.get(module_id)
        if entry is None:
            return None
        if isinstance(entry, Pending):
            raise MdBuildError(
                message=f"Virtual module requested before it was generated: {module_id!r}",
                context={"module_id": module_id}
            )
        return entry.source_text
