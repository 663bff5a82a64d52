#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Read-only tables mapping canonical button names (e.g., "Volume_Up") to the
native key codes of a particular TV protocol.
"""

from __future__ import annotations

from types import MappingProxyType

from .internal_types import *

class VizioKeyCode(NamedTuple):
    """A SmartCast key: a (codeset, code) pair."""
    codeset: int
    code: int

KeyCode = Union[str, VizioKeyCode]

class CommandTable(Mapping[str, KeyCode]):
    """An immutable mapping from button name to key code with forgiving lookup.

    lookup() tries, in order:
        1. the name exactly as given
        2. the name with underscores replaced by spaces
        3. the name with spaces replaced by underscores
        4. a case-insensitive match against every entry
    """

    _entries: Mapping[str, KeyCode]
    _folded: Mapping[str, KeyCode]

    def __init__(self, entries: Mapping[str, KeyCode]) -> None:
        self._entries = MappingProxyType(dict(entries))
        folded: Dict[str, KeyCode] = {}
        for name, code in self._entries.items():
            # first entry wins among names that differ only in case
            folded.setdefault(name.casefold(), code)
        self._folded = MappingProxyType(folded)

    def lookup(self, name: str) -> Optional[KeyCode]:
        code = self._entries.get(name)
        if code is None:
            code = self._entries.get(name.replace('_', ' '))
        if code is None:
            code = self._entries.get(name.replace(' ', '_'))
        if code is None:
            code = self._folded.get(name.casefold())
        return code

    def __getitem__(self, name: str) -> KeyCode:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CommandTable({dict(self._entries)!r})"
