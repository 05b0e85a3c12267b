# settings_generator.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List

from config_reader import load_config, parse_config
from errors import EnigmaError, InvalidConfiguration
from machine import Machine
from rotor_and_reflector import RotorKind
from utilities import legacy_config

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def _names(machine: Machine, kind: RotorKind) -> List[str]:
    return [spec.name for spec in machine.available_rotors if spec.kind is kind]


def generate_settings(
    machine: Machine,
    rng: Random | SystemRandom,
    *,
    pairs: int = 10,
    rings: bool = False,
) -> str:
    """Return a random settings line the machine will accept.

    Slot 0 gets a reflector, the next (slots - pawls - 1) get fixed rotors and
    the rightmost NUM_PAWLS slots get moving rotors.
    """
    alpha = machine.alphabet.symbols
    n_fixed = machine.num_rotors - machine.num_pawls - 1

    reflectors = _names(machine, RotorKind.REFLECTOR)
    fixed = _names(machine, RotorKind.FIXED)
    moving = _names(machine, RotorKind.MOVING)

    if not reflectors:
        raise InvalidConfiguration("configuration has no reflector")
    if len(fixed) < n_fixed:
        raise InvalidConfiguration(f"need {n_fixed} fixed rotors, have {len(fixed)}")
    if len(moving) < machine.num_pawls:
        raise InvalidConfiguration(
            f"need {machine.num_pawls} moving rotors, have {len(moving)}"
        )

    names = [rng.choice(reflectors)]
    names += rng.sample(fixed, n_fixed)
    names += rng.sample(moving, machine.num_pawls)

    slots = machine.num_rotors - 1
    parts = ["*", *names, "".join(rng.choices(alpha, k=slots))]
    if rings:
        parts.append("".join(rng.choices(alpha, k=slots)))
    parts += [f"({p})" for p in choose_pairs(alpha, pairs, rng)]
    return " ".join(parts)


def parse_cli(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random session settings line")
    p.add_argument("config", nargs="?", metavar="CONFIG", help="Machine configuration file (default: built-in wheels)")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard pairs (default 10)")
    p.add_argument("--rings", action="store_true", help="Also emit a ring-setting token")
    p.add_argument(
        "--outfile",
        type=Path,
        help="Write to this file (stdout if omitted)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_cli(argv)
    try:
        machine = load_config(args.config) if args.config else parse_config(legacy_config())
        line = generate_settings(
            machine, build_rng(args.seed), pairs=args.pairs, rings=args.rings
        )
    except EnigmaError as exc:
        sys.exit(f"Error: {exc}")

    if args.outfile:
        args.outfile.write_text(line + "\n", encoding="utf-8")
        print(f"Wrote {args.outfile}")
    else:
        sys.stdout.write(line + "\n")


if __name__ == "__main__":
    main()
