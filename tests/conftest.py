"""Shared fixtures for fsmkit tests."""
import asyncio

import pytest

from fsmkit import MachineConfig, Settings, StateDefinition


@pytest.fixture
def settings():
    """Settings independent of the environment, metrics off."""
    return Settings(metrics_enabled=False, history_size=20)


@pytest.fixture
def calls():
    """Ordered log of hook invocations."""
    return []


@pytest.fixture
def idle_running(calls):
    """idle <-> running config whose hooks append to ``calls``.

    The running state's hooks are coroutines that yield to the loop before
    recording, so tests can tell whether they were awaited.
    """

    async def enter_running():
        await asyncio.sleep(0)
        calls.append("enter:running")

    async def exit_running():
        await asyncio.sleep(0)
        calls.append("exit:running")

    return MachineConfig(
        initial="idle",
        states={
            "idle": StateDefinition(
                on={"START": "running"},
                on_enter=lambda: calls.append("enter:idle"),
                on_exit=lambda: calls.append("exit:idle"),
            ),
            "running": StateDefinition(
                on={"STOP": "idle"},
                on_enter=enter_running,
                on_exit=exit_running,
            ),
        },
    )
