# utilities.py
from __future__ import annotations

from typing import List, Sequence, Tuple

from errors import InvalidConfiguration

# ────────────────────────────────────────────────────────────────────────
#  0. Alphabets
# ────────────────────────────────────────────────────────────────────────

Alpha26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# ────────────────────────────────────────────────────────────────────────
#  1. Text helpers
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, alpha: str) -> str:
    """Upper‑case (when the alphabet has no lower case) and drop symbols the
    machine cannot take. Spaces survive; the machine passes them through."""
    text = msg if any(ch.islower() for ch in alpha) else msg.upper()
    return "".join(ch for ch in text if ch == " " or ch in alpha)


def format_message(msg: str, block: int = 5) -> str:
    """Regroup MSG into BLOCK-sized groups separated by single spaces."""
    if block < 1:
        raise InvalidConfiguration(f"block size must be positive, got {block}")
    text = "".join(msg.split())
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


# ────────────────────────────────────────────────────────────────────────
#  2. Wiring → cycle notation
# ────────────────────────────────────────────────────────────────────────


def cycles_from_wiring(wiring: str, alphabet: str) -> str:
    """Turn a substitution row ("EKMFLG…": alphabet[i] → wiring[i]) into
    cycle notation, fixed points included as one-symbol cycles."""
    if sorted(wiring) != sorted(alphabet):
        raise InvalidConfiguration("wiring must be a permutation of alphabet")

    image = dict(zip(alphabet, wiring))
    seen: set[str] = set()
    groups: List[str] = []
    for start in alphabet:
        if start in seen:
            continue
        cycle = []
        ch = start
        while ch not in seen:
            seen.add(ch)
            cycle.append(ch)
            ch = image[ch]
        groups.append("(" + "".join(cycle) + ")")
    return " ".join(groups)


# ────────────────────────────────────────────────────────────────────────
#  3. Wheel database
# ────────────────────────────────────────────────────────────────────────

# (name, type token, wiring) – type token as in configuration files
LEGACY_ROTORS: Tuple[Tuple[str, str, str], ...] = (
    ("I",    "MQ",  "EKMFLGDQVZNTOWYHXUSPAIBRCJ"),
    ("II",   "ME",  "AJDKSIRUXBLHWTMCQGZNPYFVOE"),
    ("III",  "MV",  "BDFHJLCPRTXVZNYEIWGAKMUSQO"),
    ("IV",   "MJ",  "ESOVPZJAYQUIRHXLNFTGKDCMWB"),
    ("V",    "MZ",  "VZBRGITYUPSDNHLXAWMJQOFECK"),
    ("VI",   "MZM", "JPGVOUMFYQBENHZRDKASXLICTW"),
    ("VII",  "MZM", "NZJHGRCXMYSWBOUFAIVLPEKQDT"),
    ("VIII", "MZM", "FKQHTLXOCBJSPDZRAMEWNIUYGV"),
    ("BETA",  "N",  "LEYJVCNIXWPBQMDRTAKZGFUHOS"),
    ("GAMMA", "N",  "FSOKANUERHMBTIYCWLQPZXVGJD"),
)

LEGACY_REFLECTORS: Tuple[Tuple[str, str, str], ...] = (
    ("A",     "R", "EJMZALYXVBWFCRQUONTSPIKHGD"),
    ("B",     "R", "YRUHQSLDPXNGOKMIEBFZCWVJAT"),
    ("C",     "R", "FVPJIAOYEDRZXWGCTKUQSBNMHL"),
    ("B-THIN", "R", "ENKQAUYWJICOPBLMDXZVFTHRGS"),
    ("C-THIN", "R", "RDOBJNTKVEHMLFCWZAXGYIPSUQ"),
)


def wheel_lines(
    wheels: Sequence[Tuple[str, str, str]], alphabet: str = Alpha26
) -> List[str]:
    return [
        f"{name} {kind} {cycles_from_wiring(wiring, alphabet)}"
        for name, kind, wiring in wheels
    ]


def legacy_config(num_rotors: int = 5, num_pawls: int = 3) -> str:
    """Configuration-file text for the historical wheel set.

    The default 5 slots / 3 pawls is the naval four-rotor layout:
    reflector, Beta or Gamma, then three moving rotors.
    """
    lines = [Alpha26, f"{num_rotors} {num_pawls}"]
    lines += wheel_lines(LEGACY_ROTORS)
    lines += wheel_lines(LEGACY_REFLECTORS)
    return "\n".join(lines) + "\n"


__all__ = [
    "Alpha26",
    "LEGACY_ROTORS",
    "LEGACY_REFLECTORS",
    "cycles_from_wiring",
    "format_message",
    "legacy_config",
    "preprocess_message",
    "wheel_lines",
]
