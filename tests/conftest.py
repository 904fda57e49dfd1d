from __future__ import annotations

from datetime import date
from typing import Any

import pytest
from fastapi.testclient import TestClient

from pricer_setter import classifier as classifier_module
from pricer_setter.app import create_app
from pricer_setter.auth import AccessCodeVerifier
from pricer_setter.catalog_store import PriceCatalogStore
from pricer_setter.config import Settings
from pricer_setter.database import build_engine, init_db
from pricer_setter.models.catalog import PriceCatalogInput

ACCESS_CODE = "open-sesame"


class FakeLLMAdapter:
    """Answers classifier and similarity prompts with canned payloads."""

    model_name = "fake"

    def __init__(
        self,
        *,
        classification: Any = None,
        similarity: Any = None,
        classification_error: Exception | None = None,
        similarity_error: Exception | None = None,
    ) -> None:
        self.classification = classification if classification is not None else {
            "status": "ok",
            "modules": [
                {"name": "User Authentication", "level": "medium", "description": "Login and register"},
                {"name": "Dashboard", "level": "simple", "description": None},
            ],
            "summary": "A member portal for a gym. Members can log in and view stats.",
            "required_details": [],
            "keywords": ["gym", "portal", "members"],
        }
        self.similarity = similarity if similarity is not None else {
            "similar": False,
            "matchedProjectId": None,
            "similarity_score": 10,
        }
        self.classification_error = classification_error
        self.similarity_error = similarity_error
        self.calls: list[tuple[str, str]] = []

    def generate_json(self, system_prompt: str, user_prompt: str, *, temperature: float = 0.3) -> Any:
        if system_prompt == classifier_module.SYSTEM_PROMPT:
            self.calls.append(("classify", user_prompt))
            if self.classification_error:
                raise self.classification_error
            return self.classification
        self.calls.append(("similarity", user_prompt))
        if self.similarity_error:
            raise self.similarity_error
        return self.similarity

    def count(self, kind: str) -> int:
        return sum(1 for call_kind, _ in self.calls if call_kind == kind)


@pytest.fixture
def engine():
    engine = build_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def catalog(engine) -> PriceCatalogStore:
    store = PriceCatalogStore(engine)
    store.add_entry(
        PriceCatalogInput(
            module_name="User Authentication",
            complexity_level="medium",
            base_price=190,
            student_price=90,
            description="Login, register, password reset",
        )
    )
    return store


@pytest.fixture
def settings() -> Settings:
    return Settings(token_secret="test-secret", database_url="sqlite:///:memory:")


@pytest.fixture
def fake_llm() -> FakeLLMAdapter:
    return FakeLLMAdapter()


@pytest.fixture
def app(settings, engine, fake_llm):
    return create_app(
        settings,
        engine=engine,
        llm_adapter=fake_llm,
        verifier=AccessCodeVerifier(ACCESS_CODE),
        today=lambda: date(2026, 10, 19),
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"code": ACCESS_CODE})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
