from __future__ import annotations
import operator
from typing import Dict, Iterable, ItemsView, Iterator, Optional
from bitflag.core.errors import UnknownFlag, InvalidMapping, ValidationError
from bitflag.core.logging import logger
from bitflag.core.mapping import FlagMapping, MappingSource, build_mapping

DEFAULT_WIDTH = 64

def _coerce(initial) -> int:
    if isinstance(initial, bool):
        return int(initial)
    if isinstance(initial, str):
        try:
            return int(initial.strip(), 10)
        except ValueError as e:
            raise ValidationError(f"Register value {initial!r} is not an integer") from e
    try:
        return operator.index(initial)
    except TypeError as e:
        raise ValidationError(f"Register value {initial!r} is not an integer") from e

class FlagSet:
    """Named boolean view over the bits of an integer register.

    A flag is on when *all* of its bits are set. Bits outside the mapping are
    kept untouched by ``set`` but cleared by ``reset``. When two flags share
    bits, the last write wins on the shared bits.

    With ``strict=False`` unknown names are ignored: ``get`` answers ``False``
    and ``set`` does nothing. Otherwise they raise ``UnknownFlag``.
    """

    __slots__ = ("_value", "_mapping", "strict", "width", "_mask")

    def __init__(self, initial=0, mapping: MappingSource = (), *, strict: bool = True, width: int = DEFAULT_WIDTH):
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise ValidationError(f"Register width must be a positive integer, got {width!r}")
        self.width = width
        self._mask = (1 << width) - 1
        self._mapping = build_mapping(mapping)
        for name, bit in self._mapping.items():
            if bit & ~self._mask:
                raise InvalidMapping(f"bit value {bit} does not fit in {width} bits", name)
        self.strict = strict
        self._value = _coerce(initial) & self._mask

    @classmethod
    def from_names(cls, names: Iterable[str], mapping: MappingSource, **kw) -> "FlagSet":
        """Start from an empty register and switch on every named flag."""
        flags = cls(0, mapping, **kw)
        flags.enable(*names)
        return flags

    @property
    def mapping(self) -> FlagMapping:
        return self._mapping

    @property
    def value(self) -> int:
        return self._value

    def _bit(self, name: str) -> Optional[int]:
        bit = self._mapping.get(name)
        if bit is None:
            if self.strict:
                raise UnknownFlag(name)
            logger.debug("UnknownFlagIgnored", flag=name)
        return bit

    def get(self, name: str) -> bool:
        bit = self._bit(name)
        if bit is None:
            return False
        return (self._value & bit) == bit

    def set(self, name: str, on: bool = True):
        bit = self._bit(name)
        if bit is None:
            return
        if on:
            self._value = (self._value | bit) & self._mask
        else:
            self._value &= ~bit & self._mask

    def enable(self, *names: str):
        for name in names:
            self.set(name, True)

    def disable(self, *names: str):
        for name in names:
            self.set(name, False)

    def has(self, name: str) -> bool:
        return name in self._mapping

    def reset(self):
        self._value = 0

    def to_int(self) -> int:
        return self._value

    def bit_of(self, name: str) -> Optional[int]:
        return self._mapping.get(name)

    def to_map(self) -> Dict[str, bool]:
        """Every declared flag with its state, in declaration order."""
        return {name: (self._value & bit) == bit for name, bit in self._mapping.items()}

    def to_active_map(self) -> Dict[str, int]:
        """Only the flags that are on, with their bit values."""
        return {name: bit for name, bit in self._mapping.items() if (self._value & bit) == bit}

    def copy(self) -> "FlagSet":
        return FlagSet(self._value, self._mapping, strict=self.strict, width=self.width)

    # dict-style access
    def __getitem__(self, name: str) -> bool:
        return self.get(name)

    def __setitem__(self, name: str, on: bool):
        self.set(name, on)

    def __contains__(self, name: object) -> bool:
        return name in self._mapping

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def keys(self):
        return self._mapping.keys()

    def items(self) -> ItemsView[str, bool]:
        return self.to_map().items()

    def __len__(self) -> int:
        return len(self._mapping)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        on = ", ".join(self.to_active_map()) or "-"
        return f"<FlagSet value={self._value} on=[{on}]>"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FlagSet):
            return self._value == other._value and self._mapping == other._mapping
        return NotImplemented

    __hash__ = None
