# Serve the FastAPI app in-process through httpx via TestClient.

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from orbitchess.app import app


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c
