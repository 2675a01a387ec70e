# app/client/api_client.py
"""
httpx 非同步 API 包裝：
- 自動帶上 Authorization: Bearer <access_token>
- 收到 401 時最多 refresh 一次、重送一次；再失敗就登出
- 解開 {success, data} 信封，失敗轉成 ApiError
"""
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from app.client.session import SessionManager

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh"


class ApiError(Exception):
    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ApiError(code={self.code!r}, status_code={self.status_code}, message={self.message!r})"


class AuthError(ApiError):
    """憑證失效且無法換發，session 已被清除"""


@dataclass
class RequestSpec:
    method: str
    path: str
    json: Any = None
    params: Optional[dict] = None
    # 不需要登入的請求 (login / register) 收到 401 不做 refresh
    auth: bool = True
    # 每個請求自己記錄是否已重送過
    retried: bool = False


class ApiClient:

    def __init__(
        self,
        base_url: str,
        session: SessionManager,
        timeout: float = 30.0,
        on_logout: Optional[Callable[[], Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.on_logout = on_logout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- HTTP method helpers ---
    async def get(self, path: str, params: Optional[dict] = None, auth: bool = True) -> Any:
        return await self.request("GET", path, params=params, auth=auth)

    async def post(self, path: str, json: Any = None, auth: bool = True) -> Any:
        return await self.request("POST", path, json=json, auth=auth)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict] = None,
        auth: bool = True,
    ) -> Any:
        spec = RequestSpec(method=method, path=path, json=json, params=params, auth=auth)
        return await self._send(spec)

    def _headers(self, spec: RequestSpec) -> dict:
        token = self.session.access_token
        if spec.auth and token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _send(self, spec: RequestSpec) -> Any:
        response = await self._client.request(
            spec.method,
            spec.path,
            json=spec.json,
            params=spec.params,
            headers=self._headers(spec),
        )

        if response.status_code == 401 and spec.auth:
            if spec.retried:
                logger.warning(f"重送後仍然 401: {spec.method} {spec.path}")
                await self._force_logout()
                raise AuthError("登入已失效，請重新登入", code="SESSION_EXPIRED", status_code=401)

            spec.retried = True
            if not await self._refresh_tokens():
                await self._force_logout()
                raise AuthError("登入已失效，請重新登入", code="SESSION_EXPIRED", status_code=401)
            return await self._send(spec)

        return self._unwrap(response)

    async def _refresh_tokens(self) -> bool:
        refresh_token = self.session.refresh_token
        if not refresh_token:
            return False

        try:
            response = await self._client.post(REFRESH_PATH, json={"refresh_token": refresh_token})
        except httpx.HTTPError as e:
            logger.warning(f"Token 換發失敗: {e}")
            return False

        if response.status_code != 200:
            logger.warning(f"Token 換發失敗: HTTP {response.status_code}")
            return False

        try:
            body = response.json()
        except ValueError:
            logger.warning("Token 換發失敗: 回應不是 JSON")
            return False

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data.get("access_token"):
            return False

        self.session.refresh(data["access_token"], data.get("refresh_token"))
        return True

    async def _force_logout(self) -> None:
        self.session.logout()
        if self.on_logout is not None:
            result = self.on_logout()
            if inspect.isawaitable(result):
                await result

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            if response.is_success:
                return response.text
            raise ApiError(f"HTTP {response.status_code}", status_code=response.status_code)

        if isinstance(body, dict) and body.get("success") is True:
            return body.get("data")

        error = body.get("error") if isinstance(body, dict) else None
        error = error or {}
        error_cls = AuthError if response.status_code == 401 else ApiError
        raise error_cls(
            error.get("message") or f"HTTP {response.status_code}",
            code=error.get("code") or "UNKNOWN_ERROR",
            status_code=response.status_code,
        )
