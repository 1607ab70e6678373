"""Ordered name -> bit tables backing a FlagSet.

A mapping can come from a plain dict, a sequence of ``(name, bit)`` pairs or an
int-backed ``enum.Enum`` subclass. Whatever the source, the result is a
``FlagMapping``: read-only, ordered as declared, names unique, bits
non-negative ints. Bits are not checked for uniqueness; two names may share or
overlap bits.
"""
from __future__ import annotations
import enum
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Tuple, Union
from bitflag.core.errors import InvalidMapping

MappingSource = Union["FlagMapping", Mapping, Iterable[Tuple[str, int]], type]

class FlagMapping(Mapping):
    __slots__ = ("_bits",)

    def __init__(self, pairs: Iterable[Tuple[str, int]] = ()):
        bits: Dict[str, int] = {}
        for name, bit in pairs:
            _check_entry(name, bit)
            if name in bits:
                raise InvalidMapping("duplicate flag name", name)
            bits[name] = bit
        self._bits = bits

    def __getitem__(self, name: str) -> int:
        return self._bits[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bits)

    def __len__(self) -> int:
        return len(self._bits)

    def __contains__(self, name: object) -> bool:
        return name in self._bits

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FlagMapping):
            return list(self._bits.items()) == list(other._bits.items())
        if isinstance(other, Mapping):
            return self._bits == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._bits.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v}" for k, v in self._bits.items())
        return f"FlagMapping({inner})"

    @property
    def mask(self) -> int:
        """Union of every declared bit."""
        out = 0
        for bit in self._bits.values():
            out |= bit
        return out

def _check_entry(name: Any, bit: Any):
    if not isinstance(name, str) or not name:
        raise InvalidMapping("flag names must be non-empty strings", repr(name))
    # bool is an int subclass but never a meaningful bit value
    if isinstance(bit, bool) or not isinstance(bit, int):
        raise InvalidMapping(f"bit value {bit!r} is not an integer", name)
    if bit < 0:
        raise InvalidMapping(f"bit value {bit} is negative", name)

def _from_enum(cls: type) -> FlagMapping:
    pairs = []
    for member in cls.__members__.values():
        value = member.value
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidMapping(f"enum {cls.__name__} must be backed with the type int")
        pairs.append((member.name, int(value)))
    return FlagMapping(pairs)

def build_mapping(source: MappingSource) -> FlagMapping:
    """Normalize any supported mapping source into a ``FlagMapping``."""
    if isinstance(source, FlagMapping):
        return source
    if isinstance(source, type):
        if issubclass(source, enum.Enum):
            return _from_enum(source)
        raise InvalidMapping(f"cannot read flags from class {source.__name__}")
    if isinstance(source, Mapping):
        return FlagMapping(source.items())
    if isinstance(source, (str, bytes)):
        raise InvalidMapping("expected a mapping of names to bits, got a string")
    try:
        pairs = [tuple(item) for item in source]
    except TypeError as e:
        raise InvalidMapping(f"unsupported mapping source {type(source).__name__}") from e
    for pair in pairs:
        if len(pair) != 2:
            raise InvalidMapping(f"expected (name, bit) pairs, got {pair!r}")
    return FlagMapping(pairs)

def sequential(*names: str) -> FlagMapping:
    """Assign ``1 << position`` to each name in order."""
    return FlagMapping((name, 1 << index) for index, name in enumerate(names))
