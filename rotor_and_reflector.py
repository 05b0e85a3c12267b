# rotor_and_reflector.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration

debug = Debug()
debug.disable("rotor")


class RotorKind(Enum):
    """Rotor variants, valued by their configuration-file type letter."""

    MOVING = "M"
    FIXED = "N"
    REFLECTOR = "R"


# ── wheel identity (shared, immutable) ────────────────────────────
@dataclass(frozen=True, slots=True)
class RotorSpec:
    name: str
    kind: RotorKind
    permutation: Permutation
    notches: frozenset[int] = field(default_factory=frozenset)

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def rotates(self) -> bool:
        return self.kind is RotorKind.MOVING

    @property
    def reflecting(self) -> bool:
        return self.kind is RotorKind.REFLECTOR

    def notch_symbols(self) -> str:
        return "".join(self.alphabet.to_char(i) for i in sorted(self.notches))

    def descriptor(self) -> str:
        """Render the wheel back into configuration-file form."""
        kind = self.kind.value
        if self.kind is RotorKind.MOVING:
            kind += self.notch_symbols()
        cycles = " ".join(f"({c})" for c in self.permutation.cycles)
        return f"{self.name} {kind} {cycles}".rstrip()


def moving_rotor(name: str, perm: Permutation, notches: str) -> RotorSpec:
    if not set(notches) <= set(perm.alphabet.symbols):
        raise InvalidConfiguration(
            f"Notch characters of rotor {name} must be in the alphabet"
        )
    marks = frozenset(perm.alphabet.to_int(ch) for ch in notches)
    return RotorSpec(name, RotorKind.MOVING, perm, marks)


def fixed_rotor(name: str, perm: Permutation) -> RotorSpec:
    return RotorSpec(name, RotorKind.FIXED, perm)


def reflector(name: str, perm: Permutation) -> RotorSpec:
    if not perm.derangement():
        debug.warning("rotor", f"reflector {name} has fixed points")
    return RotorSpec(name, RotorKind.REFLECTOR, perm)


# ── wheel in a machine slot (per-session, mutable) ────────────────
class Rotor:
    def __init__(self, spec: RotorSpec) -> None:
        self.spec = spec
        self._setting = 0
        self._ring = 0

    # ── identity passthroughs -------------------------------------
    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def kind(self) -> RotorKind:
        return self.spec.kind

    @property
    def permutation(self) -> Permutation:
        return self.spec.permutation

    @property
    def alphabet(self) -> Alphabet:
        return self.spec.alphabet

    @property
    def size(self) -> int:
        return self.spec.permutation.size

    @property
    def rotates(self) -> bool:
        return self.spec.rotates

    @property
    def reflecting(self) -> bool:
        return self.spec.reflecting

    # ── position & ring helpers -----------------------------------
    @property
    def setting(self) -> int:
        return self._setting

    @property
    def ring(self) -> int:
        return self._ring

    def _position(self, position: int | str) -> int:
        # unwrapped: a reflector must see 26 or -1 as it was given
        if isinstance(position, str):
            return self.alphabet.to_int(position)
        return position

    def set(self, position: int | str) -> None:
        posn = self._position(position)
        match self.kind:
            case RotorKind.REFLECTOR:
                if posn != 0:
                    raise InvalidConfiguration("reflector has only one position")
            case RotorKind.MOVING | RotorKind.FIXED:
                self._setting = self.permutation.wrap(posn)

    def set_ring(self, position: int | str) -> None:
        posn = self._position(position)
        match self.kind:
            case RotorKind.REFLECTOR:
                if posn != 0:
                    raise InvalidConfiguration("reflector has only one ring position")
            case RotorKind.MOVING | RotorKind.FIXED:
                self._ring = self.permutation.wrap(posn)

    # ── stepping --------------------------------------------------
    def at_notch(self) -> bool:
        match self.kind:
            case RotorKind.MOVING:
                return self._setting in self.spec.notches
            case _:
                return False

    def advance(self) -> None:
        match self.kind:
            case RotorKind.MOVING:
                self._setting = self.permutation.wrap(self._setting + 1)
                debug.log("rotor", f"{self.name} -> {self._setting}")
            case _:
                pass

    # ── signal paths ---------------------------------------------
    def convert_forward(self, c: int) -> int:
        perm = self.permutation
        shift = self._setting - self._ring
        return perm.wrap(perm.permute(perm.wrap(c + shift)) - shift)

    def convert_backward(self, c: int) -> int:
        perm = self.permutation
        shift = self._setting - self._ring
        return perm.wrap(perm.invert(perm.wrap(c + shift)) - shift)

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor {self.name} {self.kind.name} pos={self._setting} ring={self._ring}>"
