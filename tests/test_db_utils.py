import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from goalquest.core.db_utils import with_db_retry


def connection_lost():
    return OperationalError("SELECT 1", {}, Exception("server closed the connection"))


@pytest.mark.asyncio
async def test_retries_connection_errors_until_success():
    calls = []

    @with_db_retry(max_retries=3, retry_delay=0)
    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise connection_lost()
        return "ok"

    assert await flaky() == "ok"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_gives_up_after_max_retries():
    calls = []

    @with_db_retry(max_retries=2, retry_delay=0)
    async def down():
        calls.append(1)
        raise connection_lost()

    with pytest.raises(OperationalError):
        await down()
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_other_errors_are_not_retried():
    calls = []

    @with_db_retry(retry_delay=0)
    async def broken():
        calls.append(1)
        raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(IntegrityError):
        await broken()
    assert len(calls) == 1
