import asyncio
import socket

import pytest
import pytest_asyncio

from api.main import create_app
from lifecycle.api_server_wrapper import APIServerWrapper


async def wait_until_running(wrapper, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not (wrapper.is_running and wrapper._server.started):
        if loop.time() > deadline:
            raise AssertionError("server did not start")
        await asyncio.sleep(0.02)


@pytest_asyncio.fixture
async def api_wrapper():
    return APIServerWrapper(create_app(docs_enabled=False), host="127.0.0.1", port=8010)


@pytest.mark.asyncio
async def test_start_and_stop(api_wrapper):
    task = asyncio.create_task(api_wrapper.start())
    await wait_until_running(api_wrapper)

    await api_wrapper.stop()
    # start() returns normally once stop() was requested
    await asyncio.wait_for(task, timeout=2.0)
    assert api_wrapper.is_running is False


@pytest.mark.asyncio
async def test_stop_without_start(api_wrapper):
    await api_wrapper.stop()
    assert api_wrapper.is_running is False


@pytest.mark.asyncio
async def test_stop_releases_port():
    wrapper = APIServerWrapper(create_app(), host="127.0.0.1", port=8011)

    task = asyncio.create_task(wrapper.start())
    await wait_until_running(wrapper)
    await wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)

    s = socket.socket()
    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    s.bind(("127.0.0.1", 8011))
    s.close()


@pytest.mark.asyncio
async def test_start_cancelled_externally():
    wrapper = APIServerWrapper(create_app(), host="127.0.0.1", port=8012)

    task = asyncio.create_task(wrapper.start())
    await wait_until_running(wrapper)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert wrapper.is_running is False


@pytest.mark.asyncio
async def test_start_twice_is_refused(api_wrapper):
    task = asyncio.create_task(api_wrapper.start())
    await wait_until_running(api_wrapper)

    with pytest.raises(RuntimeError):
        await api_wrapper.start()

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)
