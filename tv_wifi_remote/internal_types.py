# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used throughout this package. Intended to be star-imported."""

from __future__ import annotations

from typing import (
    Dict,
    List,
    Optional,
    Set,
    FrozenSet,
    Tuple,
    Union,
    Any,
    Iterable,
    Iterator,
    Mapping,
    MutableMapping,
    Sequence,
    Callable,
    Awaitable,
    AsyncIterator,
    AsyncIterable,
    AsyncContextManager,
    NamedTuple,
    Type,
    TypeVar,
    cast,
    TYPE_CHECKING,
  )

from types import TracebackType

from typing_extensions import Self

Jsonable = Union[Dict[str, 'Jsonable'], List['Jsonable'], str, int, float, bool, None]
"""A value that can be serialized to JSON."""

JsonableDict = Dict[str, Jsonable]
"""A JSON object."""

HostAndPort = Tuple[str, int]
"""An (ip_address, port) pair as used by the socket module."""
