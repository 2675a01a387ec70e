import os
import sys
import json

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
import pytest

from app.client.api_client import ApiClient, ApiError, AuthError
from app.client.services import AuthClient, MatchingClient, create_api_client
from app.client.session import SessionManager, SessionState

BASE_URL = "http://api.test"


def ok(data, status_code=200):
    return httpx.Response(status_code, json={"success": True, "data": data})


def fail(status_code, code, message):
    return httpx.Response(status_code, json={"success": False, "error": {"code": code, "message": message}})


def make_session():
    return SessionManager(SessionState(access_token="old-access", refresh_token="refresh-1", user={"user_id": "u1"}))


class Recorder:
    """記錄每個請求，並依順序回傳預先準備好的回應"""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request, len(self.requests))

    def paths(self):
        return [r.url.path for r in self.requests]


async def test_success_envelope_is_unwrapped():
    recorder = Recorder(lambda request, n: ok({"user_id": "u1"}))
    session = make_session()

    async with ApiClient(BASE_URL, session, transport=httpx.MockTransport(recorder)) as api:
        data = await api.get("/auth/me")

    assert data == {"user_id": "u1"}
    assert recorder.requests[0].headers["Authorization"] == "Bearer old-access"


async def test_error_envelope_raises_api_error():
    recorder = Recorder(lambda request, n: fail(404, "MISSION_NOT_FOUND", "任務不存在"))

    async with ApiClient(BASE_URL, make_session(), transport=httpx.MockTransport(recorder)) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.get("/missions/unknown")

    assert exc_info.value.code == "MISSION_NOT_FOUND"
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "任務不存在"


async def test_401_refreshes_once_and_retries_with_new_token():
    def handler(request, n):
        if request.url.path == "/auth/refresh":
            assert json.loads(request.content) == {"refresh_token": "refresh-1"}
            return ok({"access_token": "new-access", "refresh_token": "refresh-2", "token_type": "bearer"})
        if request.headers.get("Authorization") == "Bearer new-access":
            return ok([{"mission_id": "m1"}])
        return fail(401, "INVALID_TOKEN", "無法驗證憑證")

    recorder = Recorder(handler)
    session = make_session()

    async with ApiClient(BASE_URL, session, transport=httpx.MockTransport(recorder)) as api:
        data = await api.get("/missions")

    assert data == [{"mission_id": "m1"}]
    assert recorder.paths() == ["/missions", "/auth/refresh", "/missions"]
    assert session.access_token == "new-access"
    assert session.refresh_token == "refresh-2"
    assert session.user == {"user_id": "u1"}


async def test_second_401_logs_out_without_second_refresh():
    def handler(request, n):
        if request.url.path == "/auth/refresh":
            return ok({"access_token": "new-access"})
        return fail(401, "INVALID_TOKEN", "無法驗證憑證")

    recorder = Recorder(handler)
    session = make_session()
    logouts = []

    async with ApiClient(
        BASE_URL, session, on_logout=lambda: logouts.append("login"), transport=httpx.MockTransport(recorder)
    ) as api:
        with pytest.raises(AuthError):
            await api.get("/missions")

    assert recorder.paths() == ["/missions", "/auth/refresh", "/missions"]
    assert session.access_token is None
    assert session.refresh_token is None
    assert logouts == ["login"]


async def test_failed_refresh_logs_out():
    def handler(request, n):
        if request.url.path == "/auth/refresh":
            return fail(401, "INVALID_REFRESH_TOKEN", "Refresh token 無效")
        return fail(401, "INVALID_TOKEN", "無法驗證憑證")

    recorder = Recorder(handler)
    session = make_session()
    logouts = []

    async def on_logout():
        logouts.append("login")

    async with ApiClient(BASE_URL, session, on_logout=on_logout, transport=httpx.MockTransport(recorder)) as api:
        with pytest.raises(AuthError):
            await api.get("/contracts/my")

    assert recorder.paths() == ["/contracts/my", "/auth/refresh"]
    assert not session.state.is_authenticated
    assert logouts == ["login"]


async def test_unauthenticated_request_is_not_refreshed():
    recorder = Recorder(lambda request, n: fail(401, "INVALID_CREDENTIALS", "帳號或密碼錯誤"))
    session = SessionManager()

    async with ApiClient(BASE_URL, session, transport=httpx.MockTransport(recorder)) as api:
        with pytest.raises(AuthError) as exc_info:
            await api.post("/auth/login", json={"email": "a@example.com", "password": "bad"}, auth=False)

    assert exc_info.value.code == "INVALID_CREDENTIALS"
    assert recorder.paths() == ["/auth/login"]


async def test_transport_errors_propagate():
    def handler(request, n):
        raise httpx.ConnectTimeout("timed out", request=request)

    async with ApiClient(BASE_URL, make_session(), transport=httpx.MockTransport(lambda r: handler(r, 0))) as api:
        with pytest.raises(httpx.ConnectTimeout):
            await api.get("/missions")


async def test_refresh_with_non_json_body_logs_out():
    def handler(request, n):
        if request.url.path == "/auth/refresh":
            return httpx.Response(200, text="<html>gateway</html>")
        return fail(401, "INVALID_TOKEN", "無法驗證憑證")

    recorder = Recorder(handler)
    session = make_session()
    logouts = []

    async with ApiClient(
        BASE_URL, session, on_logout=lambda: logouts.append("login"), transport=httpx.MockTransport(recorder)
    ) as api:
        with pytest.raises(AuthError):
            await api.get("/missions")

    assert recorder.paths() == ["/missions", "/auth/refresh"]
    assert not session.state.is_authenticated
    assert logouts == ["login"]


async def test_auth_client_login_and_refresh_write_through_session():
    def handler(request, n):
        if request.url.path == "/auth/login":
            assert "Authorization" not in request.headers
            return ok({
                "access_token": "access-1",
                "refresh_token": "refresh-1",
                "token_type": "bearer",
                "user": {"user_id": "u1", "email": "amy@example.com"},
            })
        if request.url.path == "/auth/refresh":
            assert json.loads(request.content) == {"refresh_token": "refresh-1"}
            return ok({"access_token": "access-2", "token_type": "bearer"})
        return fail(404, "NOT_FOUND", "not found")

    recorder = Recorder(handler)
    session = SessionManager()

    async with create_api_client(session, transport=httpx.MockTransport(recorder)) as api:
        auth = AuthClient(api)
        user = await auth.login("amy@example.com", "secret123")
        assert user == {"user_id": "u1", "email": "amy@example.com"}
        assert session.access_token == "access-1"

        await auth.refresh()

        assert session.access_token == "access-2"
        # 沒有新的 refresh token 時沿用舊的
        assert session.refresh_token == "refresh-1"
        assert session.user["user_id"] == "u1"

        auth.logout()

    assert not session.state.is_authenticated
    assert recorder.paths() == ["/auth/login", "/auth/refresh"]


async def test_find_talent_filters_by_skill_overlap_and_labels_reasons():
    matches = [
        {
            "freelancer": {"profile_id": "f1", "skills": [{"name": "React.js", "level": "expert"}]},
            "score": 88,
            "reasons": ["skill_match", "budget_fit"],
        },
        {
            "freelancer": {"profile_id": "f2", "skills": [{"name": "Vue", "level": "advanced"}]},
            "score": 61,
            "reasons": ["experience_match"],
        },
    ]

    def handler(request, n):
        if request.url.path == "/missions/m1":
            return ok({"mission_id": "m1", "required_skills": ["react"]})
        if request.url.path == "/matching/freelancers":
            assert request.url.params["mission_id"] == "m1"
            assert request.url.params["limit"] == "5"
            return ok(matches)
        return fail(404, "NOT_FOUND", "not found")

    recorder = Recorder(handler)

    async with ApiClient(BASE_URL, make_session(), transport=httpx.MockTransport(recorder)) as api:
        talent = await MatchingClient(api).find_talent("m1", limit=5)

    assert [t["freelancer"]["profile_id"] for t in talent] == ["f1"]
    assert talent[0]["score"] == 88
    assert talent[0]["reason_labels"] == ["skill match", "budget fit"]
    assert recorder.paths() == ["/missions/m1", "/matching/freelancers"]
