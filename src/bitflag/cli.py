from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.box import ROUNDED
from rich.markup import escape

from bitflag.core.errors import BitflagError, InvalidMapping
from bitflag.core.flags import FlagSet
from bitflag.core.logging import logger
from bitflag.core.mapping import FlagMapping
from bitflag.system.export import dumps, load_mapping
from bitflag.system.settings import Settings

console = Console()
err_console = Console(stderr=True)

def _parse_flag(spec: str):
    name, sep, bit = spec.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=BIT, got '{spec}'")
    try:
        return name, int(bit, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bit for '{name}' is not an integer: '{bit}'")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bitflag", description="Inspect and edit integer bitflags.")
    parser.add_argument("--options", metavar="FILE", help="JSON object of flag name -> bit")
    parser.add_argument("--flag", metavar="NAME=BIT", action="append", type=_parse_flag, default=[],
                        help="declare a flag (repeatable, appended after --options)")
    parser.add_argument("--lenient", action="store_true", help="ignore unknown flag names")
    parser.add_argument("--width", type=int, help="register width in bits")
    parser.add_argument("--log-level", choices=["DEBUG","INFO","WARN","ERROR"])
    parser.add_argument("--settings", metavar="FILE", help="settings file to use")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="print every flag and its state")
    show.add_argument("value")

    set_ = sub.add_parser("set", help="switch flags on or off and print the new value")
    set_.add_argument("value")
    set_.add_argument("--on", action="append", default=[], metavar="NAME")
    set_.add_argument("--off", action="append", default=[], metavar="NAME")
    set_.add_argument("--reset", action="store_true", help="clear the register first")

    export = sub.add_parser("export", help="print the flags as JSON")
    export.add_argument("value")
    export.add_argument("--active", action="store_true", help="only flags that are on, with their bits")
    export.add_argument("--indent", type=int)
    return parser

def _mapping(args) -> FlagMapping:
    pairs = list(load_mapping(args.options).items()) if args.options else []
    pairs.extend(args.flag)
    if not pairs:
        raise InvalidMapping("no flags declared, use --options or --flag")
    return FlagMapping(pairs)

def _register_value(text: str):
    """Accept the same literals as --flag bits (0x, 0o, 0b or decimal)."""
    try:
        return int(text, 0)
    except ValueError:
        # FlagSet handles zero-padded decimals and reports anything else
        return text

def _flagset(args, settings: Settings) -> FlagSet:
    strict = settings.data.strict and not args.lenient
    width = args.width if args.width is not None else settings.data.width
    return FlagSet(_register_value(args.value), _mapping(args), strict=strict, width=width)

def _show(flags: FlagSet):
    table = Table(box=ROUNDED, title=f"value = {flags.to_int()}")
    table.add_column("Flag", style="bold")
    table.add_column("Bit", justify="right")
    table.add_column("State")
    for name, on in flags.items():
        state = "[green]on[/green]" if on else "[dim]off[/dim]"
        table.add_row(escape(name), str(flags.bit_of(name)), state)
    console.print(table)
    unmapped = flags.to_int() & ~flags.mapping.mask
    if unmapped:
        console.print(f"[yellow]unmapped bits set:[/yellow] {unmapped}")

def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.load(args.settings)
    logger.set_level(args.log_level or settings.data.log_level)
    try:
        flags = _flagset(args, settings)
        if args.command == "show":
            _show(flags)
        elif args.command == "set":
            if args.reset:
                flags.reset()
            flags.enable(*args.on)
            flags.disable(*args.off)
            logger.debug("FlagsUpdated", on=",".join(args.on), off=",".join(args.off))
            console.print(flags.to_int())
        elif args.command == "export":
            # plain print: rich would wrap/highlight the JSON
            print(dumps(flags, active=args.active, indent=args.indent))
    except BitflagError as e:
        err_console.print(f"[red]error:[/red] {escape(str(e))}")
        return 1
    return 0

def main():
    sys.exit(run())
