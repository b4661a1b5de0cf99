"""Single-key keyboard input on the asyncio event loop."""
import os
import sys
import tty
import logging
import termios

logger = logging.getLogger('composedash.keyboard')

ESCAPE = '\x1b'
CTRL_C = '\x03'
SEQUENCE_INTRODUCERS = '[O'
# Parameter and intermediate bytes of a control sequence
PARAMETER_BYTES = ('\x20', '\x3f')


class KeyboardInput:
    """Puts the terminal in cbreak mode and feeds each key press to a callback."""

    def __init__(self, on_key, on_interrupt=None, stream=None):
        self.on_key = on_key
        self.on_interrupt = on_interrupt
        self.stream = stream or sys.stdin
        self._old_settings = None
        self._loop = None

    def start(self, loop):
        fd = self.stream.fileno()
        if os.isatty(fd):
            try:
                self._old_settings = termios.tcgetattr(fd)
                tty.setcbreak(fd)
            except termios.error as e:
                logger.warning(f"Could not switch terminal to cbreak mode: {e}")
                self._old_settings = None
        loop.add_reader(fd, self._on_readable)
        self._loop = loop

    def stop(self):
        if self._loop is None:
            return
        fd = self.stream.fileno()
        self._loop.remove_reader(fd)
        self._loop = None
        if self._old_settings is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None

    def _on_readable(self):
        data = os.read(self.stream.fileno(), 64)
        if not data:
            # stdin closed
            if self.on_interrupt:
                self.on_interrupt()
            return
        self.feed(data.decode('utf-8', errors='ignore'))

    def feed(self, chars: str):
        """Dispatch decoded input, skipping escape sequences wherever they occur."""
        i = 0
        while i < len(chars):
            ch = chars[i]
            if ch == ESCAPE:
                i = self._skip_escape(chars, i)
                continue
            if ch == CTRL_C and self.on_interrupt:
                self.on_interrupt()
                return
            self.on_key(ch)
            i += 1

    @staticmethod
    def _skip_escape(chars: str, start: int) -> int:
        """Return the index just past the escape sequence starting at ``start``.

        A sequence is ESC, an optional ``[`` or ``O``, any parameter bytes,
        then one final byte. A trailing ESC cut off by the read is dropped.
        """
        i = start + 1
        if i < len(chars) and chars[i] in SEQUENCE_INTRODUCERS:
            i += 1
        while i < len(chars) and PARAMETER_BYTES[0] <= chars[i] <= PARAMETER_BYTES[1]:
            i += 1
        return min(i + 1, len(chars))
