# main.py
from __future__ import annotations

import argparse, json, sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Iterable, Iterator, List, TextIO

from config_reader import apply_settings, is_settings_line, load_config, parse_config
from debug import COMPONENTS, Debug
from errors import EnigmaError, InvalidConfiguration
from machine import Machine
from utilities import format_message, legacy_config, preprocess_message

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches for a translation run."""

    block: int = 5                  # output group size
    normalize: bool = False         # upper-case and drop foreign symbols first
    debug: List[str] = field(default_factory=list)   # components to log
    log_file: str | None = None     # extra log destination


def load_options(path: str | Path) -> Config:
    """Read run options from a JSON object with any subset of Config's keys."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise InvalidConfiguration(f"could not open {path}: {exc.strerror}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidConfiguration(f"{path} is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path} must hold a JSON object")
    known = {f.name for f in fields(Config)}
    unknown = set(data) - known
    if unknown:
        raise InvalidConfiguration(f"Unknown keys in options: {', '.join(sorted(unknown))}")
    if "block" in data and (not isinstance(data["block"], int) or data["block"] < 1):
        raise InvalidConfiguration("option 'block' must be a positive integer")
    for name in data.get("debug", []):
        if name not in COMPONENTS:
            raise InvalidConfiguration(f"unknown debug component {name!r}")
    return Config(**data)


# ────────────────────────────────────────────────────────────────────────
#  1. MessageProcessor – settings lines and message lines
# ────────────────────────────────────────────────────────────────────────


class MessageProcessor:
    """Run an input stream of settings and message lines through a machine."""

    def __init__(self, machine: Machine, cfg: Config | None = None) -> None:
        self.machine = machine
        self.cfg = cfg or Config()
        self._configured = False

    def process_line(self, line: str) -> str | None:
        """Return the output line for LINE, or None for a settings line."""
        if is_settings_line(line):
            self.machine.fix_rotors()
            apply_settings(self.machine, line)
            self._configured = True
            return None

        if not line.strip():
            return ""

        # kept lenient: a stray '*' blanks the line instead of failing the run
        if "*" in line:
            return ""

        if not self._configured:
            raise InvalidConfiguration("message found before any settings line")

        text = line
        if self.cfg.normalize:
            text = preprocess_message(text, self.machine.alphabet.symbols)
        return format_message(self.machine.convert(text), self.cfg.block)

    def process(self, lines: Iterable[str]) -> Iterator[str]:
        for raw in lines:
            out = self.process_line(raw.rstrip("\r\n"))
            if out is not None:
                yield out


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt messages with a rotor machine")
    p.add_argument("config", nargs="?", metavar="CONFIG", help="Machine configuration file. If omitted, the built-in historical wheels are used.")
    p.add_argument("input", nargs="?", metavar="INPUT", help="Settings and message lines (default: stdin)")
    p.add_argument("output", nargs="?", metavar="OUTPUT", help="Where to write the result (default: stdout)")
    p.add_argument("--options", metavar="FILE", help="Load run options from JSON.")
    p.add_argument("--block", type=int, help="Output group size. Default: 5")
    p.add_argument("--normalize", action="store_true", default=None, help="Upper-case input and drop symbols outside the alphabet.")
    p.add_argument("--debug", action="append", choices=COMPONENTS, metavar="COMPONENT", help=f"Log a component ({', '.join(COMPONENTS)}); repeatable.")
    p.add_argument("--log-file", dest="log_file", metavar="FILE", help="Also write log records to FILE.")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Options file first, command-line flags on top."""
    cfg = load_options(args.options) if args.options else Config()
    if args.block is not None:
        if args.block < 1:
            raise InvalidConfiguration("--block must be a positive integer")
        cfg.block = args.block
    if args.normalize is not None:
        cfg.normalize = args.normalize
    if args.debug:
        cfg.debug = list(dict.fromkeys(cfg.debug + args.debug))
    if args.log_file:
        cfg.log_file = args.log_file
    return cfg


def _open_input(name: str | None) -> TextIO:
    if name is None:
        return sys.stdin
    try:
        return open(name, "r", encoding="utf-8")
    except OSError as exc:
        raise InvalidConfiguration(f"could not open {name}: {exc.strerror}") from exc


def _open_output(name: str | None) -> TextIO:
    if name is None:
        return sys.stdout
    try:
        return open(name, "w", encoding="utf-8")
    except OSError as exc:
        raise InvalidConfiguration(f"could not open {name}: {exc.strerror}") from exc


def run(args: argparse.Namespace) -> None:
    cfg = build_config(args)
    toggles = dict(Debug.components)
    try:
        handler = Debug.configure(log_to=cfg.log_file)
    except OSError as exc:
        raise InvalidConfiguration(f"could not open {cfg.log_file}: {exc.strerror}") from exc
    try:
        if cfg.debug:
            debug.enable(*cfg.debug)
        _translate(args, cfg)
    finally:
        Debug.release(handler)
        Debug.components.update(toggles)


def _translate(args: argparse.Namespace, cfg: Config) -> None:
    machine = load_config(args.config) if args.config else parse_config(legacy_config())
    processor = MessageProcessor(machine, cfg)

    source = _open_input(args.input)
    try:
        sink = _open_output(args.output)
        try:
            for line in processor.process(source):
                sink.write(line + "\n")
        finally:
            if sink is not sys.stdout:
                sink.close()
    finally:
        if source is not sys.stdin:
            source.close()


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        run(args)
    except EnigmaError as exc:
        sys.exit(f"Error: {exc}")


if __name__ == "__main__":
    main()
