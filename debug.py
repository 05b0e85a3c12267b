# debug.py
from __future__ import annotations
import logging
from typing import Dict

COMPONENTS = (
    "alphabet",
    "permutation",
    "rotor",
    "stepping",
    "machine",
    "config",
    "session",
)

FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


class Debug:
    _root_configured: bool = False          # class-level guard

    # toggles are shared by every Debug() so the CLI can flip them globally
    components: Dict[str, bool] = {name: False for name in COMPONENTS}

    def __init__(self, *, log_to: str | None = None) -> None:
        """
        If `log_to` is given, messages also stream to that file.
        Multiple Debug() instances share the same root logger config.
        """
        if not Debug._root_configured:
            handlers: list[logging.Handler] = [logging.StreamHandler()]
            if log_to:
                handlers.append(logging.FileHandler(log_to, encoding="utf-8"))

            logging.basicConfig(
                level=logging.DEBUG,
                format=FORMAT,
                datefmt=DATEFMT,
                handlers=handlers,
            )
            Debug._root_configured = True

        self.logger = logging.getLogger("ENIGMA")

    @classmethod
    def configure(cls, *, log_to: str | None = None) -> logging.Handler | None:
        """
        Attach a file handler once the CLI knows where to log.
        The caller owns the returned handler and hands it back to `release`.
        """
        if not log_to:
            return None
        handler = logging.FileHandler(log_to, encoding="utf-8")
        handler.setFormatter(logging.Formatter(FORMAT, datefmt=DATEFMT))
        logger = logging.getLogger("ENIGMA")
        logger.setLevel(logging.DEBUG)
        logger.addHandler(handler)
        return handler

    @classmethod
    def release(cls, handler: logging.Handler | None) -> None:
        if handler is None:
            return
        logging.getLogger("ENIGMA").removeHandler(handler)
        handler.close()

    # ── logging API ──────────────────────────────────────────────
    def log(self, component: str, message: str) -> None:
        if Debug.components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    def warning(self, component: str, message: str) -> None:
        """Warnings bypass the component toggles."""
        self.logger.warning("[%s] %s", component.upper(), message)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            Debug.components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            Debug.components[c] = False

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in Debug.components:
            raise ValueError(f"No such component: {component!r}")
