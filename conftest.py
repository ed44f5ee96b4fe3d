# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"
