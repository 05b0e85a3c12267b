# alphabet_and_permutation.py
from __future__ import annotations

import re
from typing import Dict, List, Tuple

from debug import Debug
from errors import InvalidConfiguration, InvalidSymbol

debug = Debug()
debug.disable("alphabet", "permutation")

# one whitespace-free token: one or more back-to-back "(abc)" groups
_TOKEN_RE = re.compile(r"(?:\([^()\s]+\))+")
_GROUP_RE = re.compile(r"\(([^()\s]+)\)")


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    def __init__(self, symbols: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ") -> None:
        if not symbols:
            raise InvalidConfiguration("alphabet must contain at least one symbol")

        self._symbols: str = symbols
        self._index: Dict[str, int] = {}
        for i, ch in enumerate(symbols):
            if ch in self._index:
                raise InvalidConfiguration(f"duplicate symbol {ch!r} in alphabet")
            self._index[ch] = i

        debug.log("alphabet", f"{len(symbols)} symbols: {symbols}")

    @property
    def symbols(self) -> str:
        return self._symbols

    @property
    def size(self) -> int:
        return len(self._symbols)

    def contains(self, symbol: str) -> bool:
        return symbol in self._index

    # symbol → integer signal
    def to_int(self, symbol: str) -> int:
        try:
            return self._index[symbol]
        except KeyError:
            raise InvalidSymbol(
                f"Invalid character {symbol!r} for current alphabet."
            ) from None

    # integer signal → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self._symbols)):
            hi = len(self._symbols) - 1
            raise InvalidSymbol(f"Signal {index} out of range 0–{hi}")
        return self._symbols[index]

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self):
        return iter(self._symbols)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __repr__(self) -> str:
        return f"<Alphabet {self._symbols!r}>"


# ── cycle notation ────────────────────────────────────────────────
def parse_cycles(text: str) -> List[str]:
    """Split "(AELT) (BKNW)(CM) ..." into ["AELT", "BKNW", "CM", ...].

    Whitespace between groups is ignored; anything that is not a run of
    non-empty, non-nested parenthesised groups is rejected.
    """
    cycles: List[str] = []
    for token in text.split():
        if not _TOKEN_RE.fullmatch(token):
            raise InvalidConfiguration(f"malformed cycle notation near {token!r}")
        cycles.extend(_GROUP_RE.findall(token))
    return cycles


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    """A permutation of an alphabet given in cycle notation.

    Symbols that appear in no cycle map to themselves. Both directions are
    kept as symbol tables (for the symbol API) and as integer lookup tables
    (for the rotor signal path).
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self._alphabet = alphabet
        self._cycles: Tuple[str, ...] = tuple(parse_cycles(cycles))

        self._forward: Dict[str, str] = {ch: ch for ch in alphabet}
        self._inverse: Dict[str, str] = {ch: ch for ch in alphabet}
        seen: set[str] = set()

        for cycle in self._cycles:
            for i, ch in enumerate(cycle):
                if ch not in alphabet:
                    raise InvalidConfiguration(
                        f"Symbol {ch!r} in cycle ({cycle}) not in alphabet"
                    )
                if ch in seen:
                    raise InvalidConfiguration(
                        f"Symbol {ch!r} appears in more than one cycle position"
                    )
                seen.add(ch)

                nxt = cycle[(i + 1) % len(cycle)]
                self._forward[ch] = nxt
                self._inverse[nxt] = ch

        # integer lookup tables
        self._fwd = [alphabet.to_int(self._forward[ch]) for ch in alphabet]
        self._rev = [alphabet.to_int(self._inverse[ch]) for ch in alphabet]

        debug.log("permutation", f"{self!r}")

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def size(self) -> int:
        return self._alphabet.size

    @property
    def cycles(self) -> Tuple[str, ...]:
        return self._cycles

    def wrap(self, p: int) -> int:
        """Return P reduced into [0, size); negative input included."""
        n = self.size
        return ((p % n) + n) % n

    def permute(self, p: int | str) -> int | str:
        """Index in → index out, symbol in → symbol out."""
        if isinstance(p, str):
            self._alphabet.to_int(p)            # raises on foreign symbols
            return self._forward[p]
        return self._fwd[self.wrap(p)]

    def invert(self, c: int | str) -> int | str:
        if isinstance(c, str):
            self._alphabet.to_int(c)
            return self._inverse[c]
        return self._rev[self.wrap(c)]

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(self._forward[ch] != ch for ch in self._alphabet)

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        groups = " ".join(f"({c})" for c in self._cycles)
        return f"<Permutation {groups or 'identity'}>"
