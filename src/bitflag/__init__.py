"""Named boolean flags over an integer register."""
from bitflag.core.errors import BitflagError, UnknownFlag, InvalidMapping, ValidationError
from bitflag.core.flags import FlagSet
from bitflag.core.mapping import FlagMapping, build_mapping, sequential

__all__ = [
    "FlagSet", "FlagMapping", "build_mapping", "sequential",
    "BitflagError", "UnknownFlag", "InvalidMapping", "ValidationError",
]
__version__ = "1.0.0"
