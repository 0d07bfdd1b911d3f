# backend/tests/test_auth.py
from __future__ import annotations

import jwt
import pytest
from fastapi import HTTPException

from inspector360.auth import Principal, scope_station
from inspector360.config import Settings, settings
from inspector360.models import AppUser

SECRET = "test-secret-with-enough-length-for-hs256"


def _token(email: str, aud: str = "authenticated", secret: str = SECRET) -> str:
    return jwt.encode({"email": email, "aud": aud, "sub": "u-1"}, secret, algorithm="HS256")


@pytest.fixture()
def jwt_mode(monkeypatch):
    monkeypatch.setattr(settings, "auth_mode", "jwt")
    monkeypatch.setattr(settings, "supabase_jwt_secret", SECRET)


def test_scope_station():
    admin = Principal(email="a@x", role="admin")
    sig = Principal(email="s@x", role="sig")
    sup = Principal(email="b@x", role="supervisor", station="AQP")
    nobody = Principal(email="c@x", role="inspector")

    assert scope_station(admin, None) is None
    assert scope_station(admin, "cuz") == "CUZ"
    assert scope_station(sig, "AQP") == "AQP"
    assert scope_station(sup, None) == "AQP"
    assert scope_station(sup, "aqp") == "AQP"
    with pytest.raises(HTTPException) as e:
        scope_station(sup, "CUZ")
    assert e.value.status_code == 403
    with pytest.raises(HTTPException) as e:
        scope_station(nobody, None)
    assert e.value.status_code == 403


def test_jwt_principal_comes_from_profile(client, db_session, stations, jwt_mode):
    db_session.add(AppUser(email="ana@test.local", full_name="Ana", role="supervisor", station="AQP"))
    db_session.commit()

    headers = {"Authorization": f"Bearer {_token('ana@test.local')}"}
    r = client.get("/api/inspections", headers=headers)
    assert r.status_code == 200, r.text

    r = client.get("/api/inspections?station=CUZ", headers=headers)
    assert r.status_code == 403


def test_jwt_rejections(client, db_session, jwt_mode):
    assert client.get("/api/inspections").status_code == 401
    bad_sig = {"Authorization": f"Bearer {_token('ana@test.local', secret='other-secret-that-is-long-enough')}"}
    assert client.get("/api/inspections", headers=bad_sig).status_code == 401
    bad_aud = {"Authorization": f"Bearer {_token('ana@test.local', aud='anon')}"}
    assert client.get("/api/inspections", headers=bad_aud).status_code == 401
    no_profile = {"Authorization": f"Bearer {_token('ghost@test.local')}"}
    assert client.get("/api/inspections", headers=no_profile).status_code == 403


def test_dev_mode_needs_email(client, db_session):
    assert client.get("/api/inspections").status_code == 401
    r = client.get("/api/inspections", headers={"X-User-Email": "x@test.local", "X-User-Role": "pirate"})
    assert r.status_code == 401


def test_prod_settings_reject_dev_auth():
    with pytest.raises(ValueError):
        Settings(app_env="prod", auth_mode="dev", supabase_jwt_secret="s", cors_allow_origins="https://inspector.local")
    with pytest.raises(ValueError):
        Settings(app_env="prod", auth_mode="jwt", supabase_jwt_secret="s", cors_allow_origins="*")
