# config_reader.py
from __future__ import annotations

from pathlib import Path
from typing import List

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration
from machine import Machine
from rotor_and_reflector import RotorSpec, fixed_rotor, moving_rotor, reflector

debug = Debug()
debug.disable("config")

# symbols with a meaning of their own in config and settings lines
RESERVED = set("()*")


# ────────────────────────────────────────────────────────────────────────
#  1. Machine configuration
# ────────────────────────────────────────────────────────────────────────


def _read_alphabet(line: str) -> Alphabet:
    symbols = line.strip()
    bad = {ch for ch in symbols if ch in RESERVED or ch.isspace()}
    if bad:
        raise InvalidConfiguration(
            f"alphabet may not contain {''.join(sorted(bad))!r}"
        )
    return Alphabet(symbols)


def _read_count(tokens: List[str], pos: int, what: str) -> int:
    try:
        return int(tokens[pos])
    except IndexError:
        raise InvalidConfiguration("configuration file truncated") from None
    except ValueError:
        raise InvalidConfiguration(
            f"{what} must be an integer, got {tokens[pos]!r}"
        ) from None


def _read_rotor(tokens: List[str], pos: int, alpha: Alphabet) -> tuple[RotorSpec, int]:
    """Parse one descriptor starting at tokens[pos]; return it and the next pos."""
    name = tokens[pos]
    if name.startswith("("):
        raise InvalidConfiguration(f"bad rotor description near {name!r}")
    if pos + 1 >= len(tokens):
        raise InvalidConfiguration(f"bad rotor description: {name} has no type")

    kind, notches = tokens[pos + 1][0], tokens[pos + 1][1:]
    pos += 2
    cycles: List[str] = []
    while pos < len(tokens) and tokens[pos].startswith("("):
        cycles.append(tokens[pos])
        pos += 1
    perm = Permutation(" ".join(cycles), alpha)

    if kind == "M":
        spec = moving_rotor(name, perm, notches)
    elif kind in ("N", "R") and notches:
        raise InvalidConfiguration(f"rotor {name}: only moving rotors have notches")
    elif kind == "N":
        spec = fixed_rotor(name, perm)
    elif kind == "R":
        spec = reflector(name, perm)
    else:
        raise InvalidConfiguration(f"rotor {name}: unknown rotor type {kind!r}")

    debug.log("config", spec.descriptor())
    return spec, pos


def parse_config(text: str) -> Machine:
    """Build a Machine from configuration-file text.

    Line 1 is the alphabet; after it the file is a token stream: slot count,
    pawl count, then ``name type (cycles)...`` per rotor, freely wrapped.
    """
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise InvalidConfiguration("configuration file truncated")

    alpha = _read_alphabet(lines[0])
    tokens = " ".join(lines[1:]).split()

    num_rotors = _read_count(tokens, 0, "rotor count")
    num_pawls = _read_count(tokens, 1, "pawl count")

    rotors: List[RotorSpec] = []
    pos = 2
    while pos < len(tokens):
        spec, pos = _read_rotor(tokens, pos, alpha)
        rotors.append(spec)

    return Machine(alpha, num_rotors, num_pawls, rotors)


def load_config(path: str | Path) -> Machine:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidConfiguration(f"could not open {path}: {exc.strerror}") from exc
    return parse_config(text)


# ────────────────────────────────────────────────────────────────────────
#  2. Session settings lines
# ────────────────────────────────────────────────────────────────────────


def is_settings_line(line: str) -> bool:
    return line.startswith("*")


def apply_settings(machine: Machine, line: str) -> None:
    """Set MACHINE up from ``* NAMES... SETTING [RINGS] (plug pairs)...``."""
    if not is_settings_line(line):
        raise InvalidConfiguration(f"not a settings line: {line!r}")

    tokens = line[1:].split()
    n = machine.num_rotors
    if len(tokens) < n:
        raise InvalidConfiguration(
            f"settings line names {len(tokens)} rotors, machine has {n} slots"
        )

    names, rest = tokens[:n], tokens[n:]
    machine.insert_rotors(names)

    setting = rest.pop(0) if rest and not rest[0].startswith("(") else ""
    machine.set_rotors(setting)

    if rest and not rest[0].startswith("("):
        machine.set_rings(rest.pop(0))

    machine.set_plugboard(Permutation(" ".join(rest), machine.alphabet))
    debug.log("config", f"session {names} at {setting}")


__all__ = [
    "apply_settings",
    "is_settings_line",
    "load_config",
    "parse_config",
]
