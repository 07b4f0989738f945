"""Process supervision for the ngrok binary."""

import asyncio
import atexit
import threading
from typing import Any

from ..common.exceptions import AlreadyRunningError, SpawnError
from ..common.logging import get_logger
from .args import build_args

logger = get_logger(__name__)


class NgrokProcess:
    """Supervises at most one ngrok child process.

    The running state is a one-shot kill signal held in a lock guarded slot.
    A background task owns the child: it waits for either the child to exit
    on its own or the kill signal to fire, and only that task ever kills the
    child, so a caller never races the natural exit against a forced kill.
    """

    def __init__(self, binary: str = "ngrok"):
        """Initialize the supervisor.

        Args:
            binary: ngrok executable name or path
        """
        self.binary = binary
        self._slot_lock = threading.Lock()
        self._start_lock = asyncio.Lock()
        self._kill_signal: asyncio.Future[None] | None = None
        self._process: asyncio.subprocess.Process | None = None
        self._watcher: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[Any]] = set()
        atexit.register(self._kill_orphan)

    async def start(
        self,
        connection_type: str,
        port: int,
        domain: str | None = None,
        kill_on_start: bool = True,
    ) -> str:
        """Start an ngrok tunnel.

        Args:
            connection_type: Tunnel type (http, tcp, tls)
            port: Local port to expose
            domain: Custom domain, used for http tunnels only
            kill_on_start: Kill a running tunnel first instead of refusing

        Returns:
            Human readable start report

        Raises:
            AlreadyRunningError: If ngrok runs and kill_on_start is False
            SpawnError: If the binary could not be spawned
        """
        async with self._start_lock:
            if self.is_run():
                if not kill_on_start:
                    raise AlreadyRunningError(
                        f"Ngrok is already running, refusing to start "
                        f"{connection_type} connection on {port} port"
                    )
                logger.info("Killing running ngrok before start")
                self.kill()

            # two tunnels would fight over the local API port
            await self._wait_watcher()

            self._bump_version()

            args = build_args(connection_type, port, domain)
            logger.info("Starting ngrok...", binary=self.binary, args=args)

            try:
                process = await asyncio.create_subprocess_exec(
                    self.binary,
                    *args,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.DEVNULL,
                )
            except OSError as e:
                logger.error("Failed to start ngrok", error=str(e))
                raise SpawnError(
                    f"Failed to start {connection_type} connection on {port} port"
                ) from e

            kill_signal: asyncio.Future[None] = asyncio.get_running_loop().create_future()
            with self._slot_lock:
                self._kill_signal = kill_signal
                self._process = process
            self._watcher = asyncio.create_task(self._supervise(process, kill_signal))

            logger.info("Ngrok process spawned", pid=process.pid)
            return f"Start {connection_type} connection on {port} port"

    def kill(self) -> None:
        """Send the kill signal to the running ngrok.

        Termination happens asynchronously in the supervising task. Does
        nothing when ngrok is not running.
        """
        with self._slot_lock:
            kill_signal, self._kill_signal = self._kill_signal, None

        if kill_signal is None:
            logger.debug("Ngrok is not running, nothing to kill")
            return

        if kill_signal.done():
            logger.error("Fail to send a kill signal to ngrok!")
            return

        kill_signal.set_result(None)
        logger.info("Kill signal sent to ngrok")

    def is_run(self) -> bool:
        """Check whether an ngrok child is owned by this supervisor."""
        with self._slot_lock:
            return self._kill_signal is not None

    @property
    def pid(self) -> int | None:
        """Get process ID if running"""
        with self._slot_lock:
            process = self._process
        if process is not None and process.returncode is None:
            return process.pid
        return None

    async def stop(self) -> None:
        """Kill ngrok and wait until the child is gone."""
        self.kill()
        await self._wait_watcher()

    async def shutdown(self) -> None:
        """Stop ngrok and wait for pending version probes.

        The interpreter exit hook is dropped as well, so a shut down
        supervisor can be garbage collected.
        """
        await self.stop()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        atexit.unregister(self._kill_orphan)
        logger.info("Ngrok supervisor shut down")

    async def _wait_watcher(self) -> None:
        watcher = self._watcher
        if watcher is not None and not watcher.done():
            await asyncio.shield(watcher)

    async def _supervise(
        self, process: asyncio.subprocess.Process, kill_signal: asyncio.Future[None]
    ) -> None:
        """Wait for the child to exit or for the kill signal, whichever comes first."""
        exit_wait = asyncio.ensure_future(process.wait())
        try:
            await asyncio.wait(
                {exit_wait, kill_signal}, return_when=asyncio.FIRST_COMPLETED
            )

            if exit_wait.done():
                logger.info(
                    "Ngrok was stopped by itself or by ctrl+c sequence",
                    pid=process.pid,
                    returncode=exit_wait.result(),
                )
                return

            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    logger.debug("Ngrok already exited before kill", pid=process.pid)
            returncode = await exit_wait
            logger.info("Ngrok was killed!", pid=process.pid, returncode=returncode)
        finally:
            if not exit_wait.done():
                exit_wait.cancel()
            with self._slot_lock:
                if self._kill_signal is kill_signal:
                    self._kill_signal = None
                if self._process is process:
                    self._process = None
            if not kill_signal.done():
                kill_signal.cancel()

    def _bump_version(self) -> None:
        """Run ``ngrok -v`` in the background so an outdated binary updates itself."""
        task = asyncio.create_task(self._probe_version())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _probe_version(self) -> None:
        try:
            probe = await asyncio.create_subprocess_exec(
                self.binary,
                "-v",
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await probe.wait()
        except OSError as e:
            logger.debug("Ngrok version probe failed", error=str(e))

    def _kill_orphan(self) -> None:
        """Kill a child left behind when the interpreter exits."""
        process = self._process
        if process is None or process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
