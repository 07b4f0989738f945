"""Shared pytest fixtures for ngrok bot tests."""

import asyncio
from typing import Any

import pytest

from ngrok_bot.config import BotConfig, NgrokSettings, TunnelProfile


class FakeProcess:
    """Stand-in for ``asyncio.subprocess.Process`` driven by the test."""

    def __init__(self, pid: int):
        self.pid = pid
        self.returncode: int | None = None
        self.kill_calls = 0
        self._exited = asyncio.Event()

    async def wait(self) -> int | None:
        await self._exited.wait()
        return self.returncode

    def exit(self, returncode: int = 0) -> None:
        """Simulate the process exiting on its own."""
        self.returncode = returncode
        self._exited.set()

    def kill(self) -> None:
        self.kill_calls += 1
        if self.returncode is not None:
            raise ProcessLookupError
        self.exit(-9)


class FakeExec:
    """Replacement for ``asyncio.create_subprocess_exec`` recording every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []
        self.processes: list[FakeProcess] = []
        self.fail = False
        self.probe_fail = False
        self._next_pid = 1000

    async def __call__(self, *args: Any, **kwargs: Any) -> FakeProcess:
        self.calls.append((args, kwargs))

        if args[1:2] == ("-v",):
            if self.probe_fail:
                raise FileNotFoundError(args[0])
            probe = FakeProcess(pid=1)
            probe.exit(0)
            return probe

        if self.fail:
            raise FileNotFoundError(args[0])

        process = FakeProcess(pid=self._next_pid)
        self._next_pid += 1
        self.processes.append(process)
        return process

    @property
    def spawns(self) -> list[tuple[tuple[Any, ...], dict[str, Any]]]:
        """Calls that started a tunnel, version probes excluded."""
        return [call for call in self.calls if call[0][1:2] != ("-v",)]

    @property
    def probes(self) -> list[tuple[tuple[Any, ...], dict[str, Any]]]:
        return [call for call in self.calls if call[0][1:2] == ("-v",)]

    def alive(self) -> list[FakeProcess]:
        return [process for process in self.processes if process.returncode is None]


@pytest.fixture
def fake_exec(monkeypatch):
    """Patch subprocess creation used by the ngrok supervisor.

    Returns:
        FakeExec: Recorder of spawned processes
    """
    fake = FakeExec()
    monkeypatch.setattr("ngrok_bot.ngrok.process.asyncio.create_subprocess_exec", fake)
    return fake


@pytest.fixture
def profiles():
    """Two profiles: user 1 may start both, user 2 only the tcp one."""
    return [
        TunnelProfile(
            description="Web app",
            connection_type="http",
            port=3000,
            permitted_users=[1],
            howto="Open in browser",
        ),
        TunnelProfile(
            description="SSH",
            connection_type="tcp",
            port=22,
            permitted_users=[1, 2],
        ),
    ]


@pytest.fixture
def bot_config(profiles):
    """Bot configuration serving chat 100 without settle delay."""
    return BotConfig(
        bot_key="123456:test-key",
        permitted_chats=[100],
        ngrok_cmds=profiles,
        ngrok=NgrokSettings(settle_delay=0.0),
    )
