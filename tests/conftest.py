import pytest
from fastapi.testclient import TestClient

from naijascholar.main import app
from naijascholar.services import get_client_factory
from naijascholar.settings import settings

from helpers import FakeGemini


@pytest.fixture
def api_key(monkeypatch):
	monkeypatch.setattr(settings, "api_key", "test-key")


@pytest.fixture
def no_api_key(monkeypatch):
	monkeypatch.setattr(settings, "api_key", None)


@pytest.fixture
def fake_gemini(api_key):
	fake = FakeGemini()
	app.dependency_overrides[get_client_factory] = lambda: fake.open
	yield fake
	app.dependency_overrides.pop(get_client_factory, None)


@pytest.fixture
def http():
	with TestClient(app) as c:
		yield c
