from __future__ import annotations

class BitflagError(Exception):
    """Base for library errors."""

class UnknownFlag(BitflagError, KeyError):
    def __init__(self, flag: str):
        super().__init__(f"Flag '{flag}' is not defined in this bitflag")
        self.flag = flag

    def __str__(self) -> str:
        return self.args[0]

class InvalidMapping(BitflagError):
    def __init__(self, detail: str, name: str | None = None):
        msg = f"Invalid mapping for '{name}': {detail}" if name is not None else f"Invalid mapping: {detail}"
        super().__init__(msg)
        self.name = name
        self.detail = detail

class ValidationError(BitflagError):
    pass
