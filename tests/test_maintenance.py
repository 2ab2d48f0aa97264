import asyncio
import logging

import pytest

from smsauth import main
from smsauth.exceptions import StorageUnavailable


async def _run_sweeps(until_calls: int, calls: list) -> None:
    task = asyncio.create_task(main.purge_codes_periodically(0))
    for _ in range(500):
        if len(calls) >= until_calls:
            break
        await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.parametrize("error", [RuntimeError("boom"), StorageUnavailable("database is locked")])
def test_purge_loop_survives_failed_sweep(monkeypatch, caplog, error):
    calls = []

    def flaky_purge():
        calls.append(1)
        if len(calls) == 1:
            raise error
        return 0

    monkeypatch.setattr(main, "purge_codes_once", flaky_purge)
    with caplog.at_level(logging.ERROR, logger="smsauth.main"):
        asyncio.run(_run_sweeps(3, calls))

    assert len(calls) >= 3
    assert "Verification code purge failed" in caplog.text
