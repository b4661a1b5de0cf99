"""
Keyboard routing and the menu state machine.

The router is always in exactly one ``MenuMode``. Each mode owns a complete
key binding table; entering a mode swaps the whole table in one step, so a
key is never interpreted by two modes at once.
"""
import logging
from enum import Enum
from functools import partial
from typing import Callable, Dict, Optional

from rich.text import Text

from composedash.ui import menus
from .exceptions import ContainerNotFound
from .runner import Verb

logger = logging.getLogger('composedash.router')

VERB_KEYS = {
    'r': Verb.RESTART,
    's': Verb.STOP,
    't': Verb.START,
    'l': Verb.BUILD,
    'm': Verb.REMOVE,
    'k': Verb.KILL,
}

# Verbs after which the container is expected to be running again
RESPAWN_VERBS = (Verb.START, Verb.RESTART)


class MenuMode(Enum):
    MAIN_MENU = 'main_menu'
    PROCESS_LIST = 'process_list'
    AWAITING_SELECTION = 'awaiting_selection'
    EXITED = 'exited'


class InputRouter:
    """Interprets key presses according to the current menu mode."""

    def __init__(self, registry, runner, streams, console, on_quit: Callable[[], None]):
        self.registry = registry
        self.runner = runner
        self.streams = streams
        self.console = console
        self._on_quit = on_quit
        self.mode: Optional[MenuMode] = None
        self.verb: Optional[Verb] = None
        self._bindings: Dict[str, Callable[[], None]] = {}
        self._on_digit: Optional[Callable[[int], None]] = None

    @property
    def bound_keys(self):
        """Keys the current mode reacts to, digits included."""
        keys = set(self._bindings)
        if self._on_digit is not None:
            keys.update(str(d) for d in range(10))
        return frozenset(keys)

    def _enter(self, mode, bindings=None, on_digit=None, verb=None):
        # Swap the whole table; nothing from the previous mode survives
        self.mode = mode
        self.verb = verb
        self._bindings = dict(bindings or {})
        self._on_digit = on_digit
        logger.debug(f"Entered {mode.value} (verb={verb.value if verb else None})")

    def handle_key(self, key: str) -> bool:
        """Dispatch one key press. Returns False when the key was ignored."""
        if len(key) != 1:
            return False
        key = key.lower()
        handler = self._bindings.get(key)
        if handler is not None:
            handler()
            return True
        if key.isdigit() and self._on_digit is not None:
            self._on_digit(int(key))
            return True
        return False

    def enter_main_menu(self):
        bindings = {'p': self.enter_process_list, 'q': self.quit}
        for key, verb in VERB_KEYS.items():
            bindings[key] = partial(self.enter_selection, verb)
        self._enter(MenuMode.MAIN_MENU, bindings)
        self.console.set_status([menus.main_menu()])

    def enter_process_list(self):
        result = self.runner.process_list()
        self._enter(MenuMode.PROCESS_LIST, {'b': self.enter_main_menu})
        if result.exit_code == 0:
            listing = menus.process_list_menu(result.output)
        else:
            logger.warning(f"Process list exited with code {result.exit_code}")
            listing = menus.process_list_error(result.output, result.exit_code)
        self.console.set_status([listing, menus.back_menu()])

    def enter_selection(self, verb: Verb):
        self._enter(
            MenuMode.AWAITING_SELECTION,
            {'b': self.enter_main_menu},
            on_digit=self.select,
            verb=verb,
        )
        self.console.set_status([menus.container_menu(verb, self.registry.list())])

    def select(self, index: int):
        """Apply the pending verb to the container at ``index``."""
        try:
            container = self.registry.by_index(index)
        except ContainerNotFound:
            logger.debug(f"Ignoring selection {index}: no such container")
            return

        verb = self.verb
        self.streams.detach(container)
        self.console.log(Text(
            f"composedash | Attempting to execute {verb.value} {container.name}",
            style="white",
        ))

        result = self.runner.run(container, verb)
        if result.output.strip():
            self.console.log(Text(result.output.rstrip("\n")))
        self.console.log(Text(
            f"composedash | {verb.value} {container.name} exited with code {result.exit_code}",
            style="green" if result.exit_code == 0 else "red",
        ))

        if verb in RESPAWN_VERBS and result.exit_code == 0:
            self.streams.attach(container)

    def interrupt(self):
        self.quit()

    def quit(self):
        if self.mode is MenuMode.EXITED:
            return
        self._enter(MenuMode.EXITED)
        self._on_quit()
