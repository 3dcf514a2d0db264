from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from retirement_sim.app import create_app
from retirement_sim.config import Settings


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        LOG_LEVEL="WARNING",
        CORS_ORIGIN_URLS=["http://localhost:5173"],
        ANNUAL_GROSS_RATE=0.1165,
        CONSERVATIVE_FRACTION=0.85,
        ANNUAL_ADMIN_FEE_RATE=0.015,
        LOADING_FEE_RATE=0.005,
        LIFE_EXPECTANCY=85,
    )


@pytest.fixture()
def client(settings: Settings) -> FlaskClient:
    app = create_app(settings)
    with app.test_client() as test_client:
        yield test_client
