"""JSON helpers for flag sets.

The full export maps every declared flag to a bool; the active export maps the
flags that are on to their bit values. ``from_export`` accepts either shape.
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Mapping, Optional
from bitflag.core.errors import InvalidMapping, ValidationError
from bitflag.core.flags import FlagSet
from bitflag.core.logging import logger
from bitflag.core.mapping import FlagMapping, MappingSource

class FlagSetEncoder(json.JSONEncoder):
    def default(self, o: Any):
        if isinstance(o, FlagSet):
            return o.to_map()
        return super().default(o)

def dumps(flags: FlagSet, active: bool = False, indent: Optional[int] = None) -> str:
    data = flags.to_active_map() if active else flags.to_map()
    return json.dumps(data, indent=indent)

def from_export(data: Mapping[str, Any], mapping: MappingSource, **kw) -> FlagSet:
    flags = FlagSet(0, mapping, **kw)
    for name, state in data.items():
        if isinstance(state, bool):
            flags.set(name, state)
        elif isinstance(state, int):
            # active export; a stale bit value means the mapping changed
            if flags.has(name) and flags.bit_of(name) != state:
                raise ValidationError(f"Flag '{name}' exported as bit {state}, mapping says {flags.bit_of(name)}")
            flags.set(name, True)
        else:
            raise ValidationError(f"Flag '{name}' has unsupported state {state!r}")
    return flags

def load_mapping(path) -> FlagMapping:
    """Read a JSON object of name -> bit from ``path``."""
    path = Path(path)
    try:
        # objects decode to tuples of pairs so repeated names reach FlagMapping
        raw = json.loads(path.read_text(), object_pairs_hook=tuple)
    except (OSError, ValueError) as e:
        raise InvalidMapping(f"cannot read {path}: {e}") from e
    if not isinstance(raw, tuple):
        raise InvalidMapping(f"{path} must contain a JSON object")
    mapping = FlagMapping(raw)
    logger.debug("Loaded mapping", path=str(path), flags=len(mapping))
    return mapping
