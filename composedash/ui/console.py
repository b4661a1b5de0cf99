"""Console UI for composedash."""
from typing import Iterable, List, Optional, Union

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.text import Text


class DashboardConsole:
    """
    The single output surface of the dashboard.

    Log lines scroll in the normal terminal buffer while a rich ``Live``
    display keeps the status bar pinned below them. Each status section is
    drawn under a full-width border that is recomputed on resize.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.border = self._make_border()
        self._sections: List[Text] = []
        self._live = Live(
            Text(),
            console=self.console,
            auto_refresh=False,
            transient=False,
        )
        self._started = False

    def _make_border(self) -> str:
        return "=" * self.console.width

    def start(self):
        """Start drawing the pinned status bar."""
        if not self._started:
            self._live.start(refresh=False)
            self._started = True
            self._refresh()

    def stop(self):
        if self._started:
            self._live.stop()
            self._started = False

    def log(self, text: Union[str, Text]):
        """Append a line to the scrolling region."""
        if isinstance(text, str):
            text = Text(text)
        self.console.print(text, highlight=False)

    def set_status(self, sections: Iterable[Text]):
        """Replace the pinned status bar contents."""
        self._sections = list(sections)
        self._refresh()

    def render_status(self) -> Text:
        status = Text(style="white")
        for section in self._sections:
            status.append(self.border + "\n")
            status.append_text(section)
        return status

    def on_resize(self):
        """Redraw the status bar borders for the new terminal width."""
        self.border = self._make_border()
        self._refresh()

    def print_error(self, error, show_traceback=False):
        """Print error message."""
        self.console.print(f"[red]Error:[/red] {escape(str(error))}")
        if show_traceback:
            self.console.print_exception()

    def _refresh(self):
        self._live.update(self.render_status(), refresh=self._started)
