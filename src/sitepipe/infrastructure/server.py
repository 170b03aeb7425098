"""Development server with live reload, built on livereload.

Lifecycle::

    idle --start()--> serving --stop() / Ctrl-C--> stopped

``start()`` hands the output root to a :class:`livereload.Server` and
blocks in its IOLoop. livereload polls every watched path. A changed source
file covered by a :class:`WatchRule` queues that rule's action on a worker
thread, so a style rebuild and a script rebuild can run at the same time.
Changes that arrive while a rule is running are coalesced into one more run.

Source watches never reload browsers themselves (``delay="forever"``).
The output root is watched without an action instead: browsers reload when
a rebuilt artifact lands there, and stylesheets are swapped in place when
``live_css`` is on. A server without watch rules is a plain static preview.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from fnmatch import fnmatch
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from livereload import Server
from tornado.ioloop import IOLoop

if TYPE_CHECKING:
    from sitepipe.config.models import ServerConfig

log = structlog.get_logger(__name__)


class ServerState(str, enum.Enum):
    IDLE = "idle"
    SERVING = "serving"
    STOPPED = "stopped"


@dataclass(frozen=True)
class WatchRule:
    """Source files below *root* whose changes re-run *action*.

    *glob* matches file names. A recursive rule covers every directory
    below *root*; otherwise only files directly in *root* count.
    """

    name: str
    root: Path
    glob: str
    action: Callable[[], object]
    recursive: bool = False

    @property
    def target(self) -> str:
        """What livereload watches: the whole directory, or a one-level glob."""
        return str(self.root) if self.recursive else str(self.root / self.glob)

    def matches(self, path: str) -> bool:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        try:
            relative = candidate.relative_to(self.root)
        except ValueError:
            return False
        if not relative.parts or (not self.recursive and len(relative.parts) > 1):
            return False
        return fnmatch(relative.name, self.glob)

    def ignores(self, path: str) -> bool:
        """livereload ``ignore`` hook: skip files this rule does not cover."""
        return not self.matches(path)


class DevServer:
    """Serve a directory and push reloads to connected browsers.

    Parameters:
        root: Directory to serve (the output root).
        config: ``[server]`` settings.
        rules: Watch rules to register when serving starts.
    """

    def __init__(
        self,
        root: Path,
        config: ServerConfig,
        *,
        rules: Sequence[WatchRule] = (),
    ) -> None:
        self.root = root.resolve()
        self.config = config
        self.rules = tuple(rules)
        self.state = ServerState.IDLE
        self._loop: IOLoop | None = None
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, len(self.rules)), thread_name_prefix="sitepipe-watch"
        )
        self._lock = threading.Lock()
        self._running: set[str] = set()
        self._pending: set[str] = set()

    @property
    def url(self) -> str:
        return f"http://{self.config.host}:{self.config.port}/"

    def build(self) -> Server:
        """A livereload server with every watch registered."""
        server = Server()
        for rule in self.rules:
            server.watch(rule.target, self._rebuild(rule), delay="forever", ignore=rule.ignores)
            log.debug("server.watch", rule=rule.name, target=rule.target)
        if self.rules:
            server.watch(str(self.root))
        return server

    # --- Lifecycle ---

    def start(self) -> None:
        """Serve and watch until stopped or interrupted.

        Raises:
            RuntimeError: if the server was already started.
        """
        if self.state is not ServerState.IDLE:
            msg = f"Server cannot start from state {self.state.value!r}"
            raise RuntimeError(msg)
        server = self.build()
        self._loop = IOLoop.current()
        self.state = ServerState.SERVING
        log.info(
            "server.start",
            url=self.url,
            root=str(self.root),
            watching=[rule.name for rule in self.rules],
        )
        try:
            server.serve(
                port=self.config.port,
                host=self.config.host,
                root=str(self.root),
                live_css=self.config.live_css,
                open_url_delay=1 if self.config.open_browser else None,
            )
        except KeyboardInterrupt:
            log.info("server.interrupted")
        finally:
            self.state = ServerState.STOPPED
            self._executor.shutdown(wait=False, cancel_futures=True)
            log.info("server.stop", url=self.url)

    def stop(self) -> None:
        """Ask the serving loop to finish. Safe to call from any thread."""
        if self.state is not ServerState.SERVING or self._loop is None:
            return
        self._loop.add_callback(self._loop.stop)

    # --- Change handling ---

    def _rebuild(self, rule: WatchRule) -> Callable[[], None]:
        # livereload passes the file name to callables that take arguments.
        def rebuild() -> None:
            self.trigger(rule)

        rebuild.__name__ = f"rebuild {rule.name}"
        return rebuild

    def trigger(self, rule: WatchRule) -> None:
        """Run *rule* on a worker, or queue one rerun if it is already running."""
        with self._lock:
            if rule.name in self._running:
                self._pending.add(rule.name)
                log.debug("watch.coalesced", rule=rule.name)
                return
            self._running.add(rule.name)
        log.info("watch.change", rule=rule.name)
        self._launch(rule)

    def _launch(self, rule: WatchRule) -> None:
        future = self._executor.submit(rule.action)
        future.add_done_callback(partial(self._finished, rule))

    def _finished(self, rule: WatchRule, future: Future[object]) -> None:
        if not future.cancelled() and future.exception() is not None:
            # The server outlives a broken rebuild; the next change retries.
            log.error("watch.action_failed", rule=rule.name, exc_info=future.exception())
        with self._lock:
            rerun = (
                rule.name in self._pending
                and not future.cancelled()
                and self.state is not ServerState.STOPPED
            )
            self._pending.discard(rule.name)
            if not rerun:
                self._running.discard(rule.name)
        if rerun:
            self._launch(rule)
