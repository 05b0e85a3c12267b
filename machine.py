# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration, InvalidSymbol
from rotor_and_reflector import Rotor, RotorSpec

debug = Debug()
debug.disable("machine", "stepping", "session")


@dataclass(slots=True)
class Session:
    """Everything a settings line replaces: the wheel order and the plugs."""

    slots: List[Rotor]
    plugboard: Permutation


class Machine:
    """A rotor machine with NUM_ROTORS slots, NUM_PAWLS of them driven.

    The available-rotor pool is fixed at construction; every call to
    insert_rotors() starts a new Session with freshly allocated slot state.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        num_pawls: int,
        all_rotors: Iterable[RotorSpec],
    ) -> None:
        if num_rotors <= 1:
            raise InvalidConfiguration(f"need more than one rotor slot, got {num_rotors}")
        if not 0 <= num_pawls < num_rotors:
            raise InvalidConfiguration(
                f"pawl count {num_pawls} must be in 0..{num_rotors - 1}"
            )

        self.alphabet = alphabet
        self.num_rotors = num_rotors
        self.num_pawls = num_pawls

        self._pool: Dict[str, RotorSpec] = {}
        for spec in all_rotors:
            key = spec.name.upper()
            if key in self._pool:
                raise InvalidConfiguration(f"rotor {spec.name} defined twice")
            if spec.alphabet != alphabet:
                raise InvalidConfiguration(
                    f"rotor {spec.name} is wired for a different alphabet"
                )
            self._pool[key] = spec

        self._session: Session | None = None

    # ── pool & session views ────────────────────────────────────

    @property
    def available_rotors(self) -> Tuple[RotorSpec, ...]:
        return tuple(self._pool.values())

    @property
    def slots(self) -> Tuple[Rotor, ...]:
        return tuple(self._require_session().slots)

    @property
    def plugboard(self) -> Permutation:
        return self._require_session().plugboard

    def rotor_settings(self) -> str:
        """Window letters of every non-reflector slot, left to right."""
        return "".join(
            self.alphabet.to_char(rotor.setting) for rotor in self.slots[1:]
        )

    def _require_session(self) -> Session:
        if self._session is None:
            raise InvalidConfiguration("no rotors inserted")
        return self._session

    # ── session setup ───────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots with the rotors NAMES (NAMES[0] is the reflector)."""
        if len(names) != self.num_rotors:
            raise InvalidConfiguration(
                f"expected {self.num_rotors} rotor names, got {len(names)}"
            )

        slots: List[Rotor] = []
        chosen: set[str] = set()
        for name in names:
            key = name.upper()
            if key not in self._pool:
                raise InvalidConfiguration(f"unknown rotor {name!r}")
            if key in chosen:
                raise InvalidConfiguration(f"rotor {name!r} selected twice")
            chosen.add(key)
            slots.append(Rotor(self._pool[key]))

        if not slots[0].reflecting or slots[0].rotates:
            raise InvalidConfiguration(
                f"slot 0 must hold a reflector, not {slots[0].name}"
            )

        moving = sum(1 for rotor in slots if rotor.rotates)
        if moving > self.num_pawls:
            debug.warning(
                "machine",
                f"{moving} moving rotors selected but only {self.num_pawls} pawls",
            )

        self._session = Session(slots, Permutation("", self.alphabet))
        debug.log("session", f"rotors {[r.name for r in slots]}")

    def fix_rotors(self) -> None:
        """Forget the current selection; the pool is left alone."""
        self._session = None

    def set_rotors(self, setting: str) -> None:
        """Rotate each non-reflector slot to its window letter in SETTING."""
        slots = self._require_session().slots
        if len(setting) != self.num_rotors - 1:
            raise InvalidConfiguration(
                f"rotor setting {setting!r} must be {self.num_rotors - 1} symbols"
            )
        for rotor, letter in zip(slots[1:], setting):
            rotor.set(letter)

    def set_rings(self, rings: str) -> None:
        """Apply ring-stellung offsets to each non-reflector slot."""
        slots = self._require_session().slots
        if len(rings) != self.num_rotors - 1:
            raise InvalidConfiguration(
                f"ring setting {rings!r} must be {self.num_rotors - 1} symbols"
            )
        for rotor, letter in zip(slots[1:], rings):
            rotor.set_ring(letter)

    def set_plugboard(self, plugboard: Permutation) -> None:
        session = self._require_session()
        if plugboard.alphabet != self.alphabet:
            raise InvalidConfiguration("plugboard uses a different alphabet")
        session.plugboard = plugboard
        debug.log("session", f"plugboard {plugboard!r}")

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self, slots: List[Rotor]) -> None:
        """Advance rotors one key-press, double step included.

        Notch state is sampled for every slot before anything moves, so all
        advances of one key-press are simultaneous.
        """
        notched = [rotor.at_notch() for rotor in slots]
        stepping = [False] * len(slots)
        stepping[-1] = True

        for i in range(len(slots) - 2, -1, -1):
            if notched[i + 1]:
                stepping[i] = True
                # a pawl engaging the left wheel also pushes this notch
                if slots[i].rotates:
                    stepping[i + 1] = True

        for rotor, step in zip(slots, stepping):
            if step:
                rotor.advance()

        debug.log("stepping", f"positions {[r.setting for r in slots]}")

    # ── encipher one symbol  ────────────────────────────────────

    def convert(self, value: int | str) -> int | str:
        """Index in → index out (one key-press); text in → text out."""
        if isinstance(value, str):
            return self._convert_message(value)
        return self._convert_index(value)

    def _convert_index(self, c: int) -> int:
        session = self._require_session()
        if not 0 <= c < self.alphabet.size:
            raise InvalidSymbol(f"index {c} outside alphabet of {self.alphabet.size}")

        slots = session.slots
        signal = session.plugboard.permute(c)
        self._step_rotors(slots)

        for rotor in reversed(slots):
            signal = rotor.convert_forward(signal)

        for rotor in slots[1:]:
            signal = rotor.convert_backward(signal)

        signal = session.plugboard.invert(signal)
        debug.log("machine", f"{c} -> {signal}")
        return signal

    def _convert_message(self, msg: str) -> str:
        # no partial line is returned; rotors already stepped stay stepped
        self._require_session()
        out: List[str] = []
        for ch in msg:
            if ch == " ":
                out.append(ch)
                continue
            out.append(self.alphabet.to_char(self._convert_index(self.alphabet.to_int(ch))))
        return "".join(out)

    def __repr__(self) -> str:
        names = [r.name for r in self._session.slots] if self._session else []
        return f"<Machine slots={self.num_rotors} pawls={self.num_pawls} rotors={names}>"
