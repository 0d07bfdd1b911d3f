# backend/tests/conftest.py
from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_MODE", "dev")
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inspector360.db import Base, get_db
from inspector360.main import create_app
from inspector360.models import Station

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

ADMIN = {"X-User-Email": "admin@test.local", "X-User-Role": "admin"}


def supervisor_of(station: str) -> dict[str, str]:
    return {
        "X-User-Email": f"supervisor.{station.lower()}@test.local",
        "X-User-Role": "supervisor",
        "X-User-Station": station,
    }


def inspector_of(station: str) -> dict[str, str]:
    return {
        "X-User-Email": f"inspector.{station.lower()}@test.local",
        "X-User-Role": "inspector",
        "X-User-Station": station,
    }


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def stations(db_session):
    rows = [
        Station(code="AQP", name="Arequipa"),
        Station(code="CUZ", name="Cusco"),
        Station(code="PIU", name="Piura", is_active=False),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture()
def client(db_session):
    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app = create_app()
    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
