"""
Log stream multiplexing.

Every running container gets at most one ``<runtime> logs -f`` subprocess.
Its stdout and stderr are read line by line on the event loop and written to
the dashboard console, prefixed with the container name in the container's
color. Detaching a session unbinds it immediately, so anything the process
still emits afterwards is dropped, and asks the process to terminate without
waiting for it.
"""
import asyncio
import logging
from typing import Dict, Optional

from rich.text import Text

from .registry import Container

logger = logging.getLogger('composedash.logstream')

# Upper bound on a single log line before asyncio refuses to buffer it
LINE_LIMIT = 1024 * 1024


class LogSession:
    """The live association between a container and its log-follow process."""

    def __init__(self, container: Container):
        self.container = container
        self.process = None
        self.task: Optional[asyncio.Task] = None
        self.active = True
        self.listening = True

    def __repr__(self):
        return (f"LogSession({self.container.name!r}, active={self.active}, "
                f"listening={self.listening})")


class LogStreamManager:
    """Owns all log-follow subprocesses and forwards their output to the console."""

    def __init__(self, console, runner, spawn=None):
        self.console = console
        self.runner = runner
        self._spawn = spawn or asyncio.create_subprocess_exec
        self._sessions: Dict[str, LogSession] = {}

    @property
    def sessions(self) -> Dict[str, LogSession]:
        return dict(self._sessions)

    def session(self, container: Container) -> Optional[LogSession]:
        return self._sessions.get(container.name)

    def attach(self, container: Container) -> LogSession:
        """Start following a container's logs, replacing any existing session."""
        if container.name in self._sessions:
            self.detach(container)

        session = LogSession(container)
        self._sessions[container.name] = session
        session.task = asyncio.get_running_loop().create_task(self._follow(session))
        logger.debug(f"Attached log session for {container.name}")
        return session

    def detach(self, container: Container):
        """Stop following a container's logs. No-op without a session."""
        session = self._sessions.pop(container.name, None)
        if session is None:
            return
        session.listening = False
        session.active = False
        self._terminate(session)
        logger.debug(f"Detached log session for {container.name}")

    def detach_all(self):
        for session in list(self._sessions.values()):
            self.detach(session.container)

    async def _follow(self, session: LogSession):
        argv = self.runner.logs_command(session.container)
        try:
            process = await self._spawn(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=LINE_LIMIT,
            )
        except OSError as e:
            logger.error(f"Could not follow logs for {session.container.name}: {e}")
            session.active = False
            if session.listening:
                self._write(session, f"failed to follow logs: {e}")
            return

        session.process = process
        if not session.listening:
            # Detached while the process was being spawned
            self._terminate(session)
            return

        await asyncio.gather(
            self._pump(session, process.stdout),
            self._pump(session, process.stderr),
        )
        code = await process.wait()
        session.active = False
        if session.listening:
            self._write(session, f"exited with code {code}")
        logger.debug(f"Log process for {session.container.name} exited with code {code}")

    async def _pump(self, session: LogSession, stream):
        while session.listening:
            try:
                line = await stream.readline()
            except ValueError:
                logger.warning(f"Dropped an oversized log line from {session.container.name}")
                continue
            if not line:
                break
            if session.listening:
                self._write_line(session, line.decode('utf-8', errors='replace').rstrip('\r\n'))

    def _write_line(self, session: LogSession, line: str):
        container = session.container
        self.console.log(Text.assemble((f"{container.name} | ", container.color), Text.from_ansi(line)))

    def _write(self, session: LogSession, message: str):
        container = session.container
        self.console.log(Text(f"{container.name} | {message}", style=container.color))

    def _terminate(self, session: LogSession):
        process = session.process
        if process is None or process.returncode is not None:
            return
        try:
            process.terminate()
        except ProcessLookupError:
            pass
