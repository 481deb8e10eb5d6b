import os
import tempfile

# point the app at a throwaway database before anything imports solestyle.db
_tmpdir = tempfile.mkdtemp(prefix="solestyle-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from solestyle.db import SessionLocal, init_db  # noqa: E402
from solestyle.main import app  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def setup_db():
    init_db(reset=True)


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client():
    # fresh cookie jar per test -> fresh client_id / session_id
    return TestClient(app)


@pytest.fixture
def checkout_fields():
    return {
        "first-name": "Ada",
        "last-name": "Lovelace",
        "email": "ada@example.com",
        "phone": "555-0100",
        "address": "12 Analytical Way",
        "city": "London",
        "state": "LDN",
        "zip": "N1 9GU",
        "country": "UK",
        "card-name": "Ada Lovelace",
        "card-number": "4111 1111 1111 1111",
        "expiry": "12/29",
        "cvv": "123",
    }
