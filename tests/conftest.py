"""pytest: окружение тестов и общие фикстуры."""

import os
import tempfile

# Настройки читаются при импорте storefront, поэтому окружение: до импорта.
_TMP = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["LOG_DIR"] = os.path.join(_TMP, "log")
os.environ["LOG_PRINT"] = "0"
os.environ["APP_ENV"] = "development"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/orders.db"
os.environ["LOCAL_STORE_PATH"] = os.path.join(_TMP, "orders.dat")
os.environ["ADMIN_PASSWORD"] = "magie-secret"
for _key in ("ADMIN_PASSWORD_HASH", "RESEND_API_KEY", "ORDER_EMAIL_FROM", "ORDER_NOTIFY_TO", "OPENAI_API_KEY"):
    os.environ.pop(_key, None)

import copy

import pytest
from fastapi.testclient import TestClient

from storefront.config import settings
from storefront.main import app
from storefront.utils.database import create_engine, create_session_factory, init_db
from storefront.utils.log import Log

ADMIN_PASSWORD = "magie-secret"

VALID_ORDER = {
    "customer": {
        "emri": "Arta",
        "mbiemri": "Krasniqi",
        "email": "arta@example.com",
        "adresa": "Rr. Nëna Terezë 12",
        "shteti": "Kosova",
        "qyteti": "Prishtinë",
    },
    "items": [{"product": {"id": "p1", "name": "Magie Renewal Serum", "price": 125}, "quantity": 2}],
    "total": 250,
}


@pytest.fixture
def order_payload() -> dict:
    """Свежая копия валидного заказа: тест может её менять."""
    return copy.deepcopy(VALID_ORDER)


@pytest.fixture
def admin_headers() -> dict:
    return {"x-admin-password": ADMIN_PASSWORD}


@pytest.fixture
async def log(tmp_path):
    log = Log(log_dir=str(tmp_path / "log"), log_print=False)
    yield log
    await log.shutdown()


@pytest.fixture
async def session_factory(tmp_path):
    """Хостовая база на SQLite-файле во временной папке."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path}/hosted.db")
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def client_factory(tmp_path, monkeypatch):
    """
    TestClient с переопределёнными настройками. Каждый вызов: отдельная
    база и отдельный файл локального хранилища.
    """
    def factory(**overrides) -> TestClient:
        values = {
            "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path}/api.db",
            "LOCAL_STORE_PATH": str(tmp_path / "orders.dat"),
            "ADMIN_PASSWORD": ADMIN_PASSWORD,
            **overrides,
        }
        for key, value in values.items():
            monkeypatch.setattr(settings, key, value)
        return TestClient(app)

    return factory


@pytest.fixture
def client(client_factory):
    with client_factory() as c:
        yield c
