"""
Registry of languages accepted by the execution sandbox.

Each entry maps the identifier used by callers (``"python"``) to the
``(language, version)`` pair the Piston API expects and to the file
extension used when naming the submitted source file.  A registry is built
once and never mutated; the client receives it as a constructor argument so
tests can supply their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional

FALLBACK_EXTENSION = "txt"


@dataclass(frozen=True)
class LanguageConfig:
    """Runtime selection for one supported language."""

    id: str
    language: str
    version: str
    file_extension: str


DEFAULT_LANGUAGES = (
    LanguageConfig(id="javascript", language="javascript", version="18.15.0", file_extension="js"),
    LanguageConfig(id="python", language="python", version="3.10.0", file_extension="py"),
    LanguageConfig(id="java", language="java", version="15.0.2", file_extension="java"),
)


class LanguageRegistry(Mapping[str, LanguageConfig]):
    """Read-only mapping of language identifier to :class:`LanguageConfig`."""

    def __init__(self, configs: Iterable[LanguageConfig]) -> None:
        entries = {}
        for config in configs:
            if config.id in entries:
                raise ValueError(f"Duplicate language id: {config.id}")
            entries[config.id] = config
        self._entries = MappingProxyType(entries)

    def __getitem__(self, language: str) -> LanguageConfig:
        return self._entries[language]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"LanguageRegistry({list(self._entries)!r})"

    def get(self, language: str, default: Optional[LanguageConfig] = None) -> Optional[LanguageConfig]:
        """Return the config for ``language``, or ``default`` if unsupported."""
        return self._entries.get(language, default)

    def file_extension(self, language: str) -> str:
        # Only used for naming files, so unknown languages are not an error here.
        config = self._entries.get(language)
        return config.file_extension if config else FALLBACK_EXTENSION

    def ids(self) -> List[str]:
        return list(self._entries)


def default_registry() -> LanguageRegistry:
    return LanguageRegistry(DEFAULT_LANGUAGES)
