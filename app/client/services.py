# app/client/services.py
import logging
from typing import List, Optional

from app.client.api_client import ApiClient
from app.client.session import SessionManager
from app.core.config import settings
from app.client.filters import filter_by_skill_overlap, humanize_reason

logger = logging.getLogger(__name__)


def create_api_client(session: Optional[SessionManager] = None, on_logout=None, transport=None) -> ApiClient:
    """以設定檔的 API_BASE_URL / API_TIMEOUT_SECONDS 建立 ApiClient"""
    return ApiClient(
        settings.API_BASE_URL,
        session or SessionManager(),
        timeout=settings.API_TIMEOUT_SECONDS,
        on_logout=on_logout,
        transport=transport,
    )


class AuthClient:
    """登入相關 API，寫入 session 一律透過 SessionManager"""

    def __init__(self, api: ApiClient):
        self.api = api

    async def login(self, email: str, password: str) -> dict:
        result = await self.api.post(
            "/auth/login", json={"email": email, "password": password}, auth=False
        )
        self.api.session.login(result)
        return result["user"]

    async def register(self, email: str, name: str, password: str, role: str) -> dict:
        payload = {"email": email, "name": name, "password": password, "role": role}
        result = await self.api.post("/auth/register", json=payload, auth=False)
        self.api.session.login(result)
        return result["user"]

    async def refresh(self) -> None:
        result = await self.api.post(
            "/auth/refresh",
            json={"refresh_token": self.api.session.refresh_token},
            auth=False,
        )
        self.api.session.refresh(result["access_token"], result.get("refresh_token"))

    async def me(self) -> dict:
        return await self.api.get("/auth/me")

    def logout(self) -> None:
        # JWT 無伺服器端狀態，清掉本地 session 即可
        self.api.session.logout()


class MatchingClient:

    def __init__(self, api: ApiClient):
        self.api = api

    async def get_matching_missions(self, freelancer_id: Optional[str] = None, limit: int = 10) -> List[dict]:
        params = {"limit": limit}
        if freelancer_id:
            params["freelancer_id"] = freelancer_id
        return await self.api.get("/matching/missions", params=params)

    async def get_matching_freelancers(self, mission_id: str, limit: int = 10) -> List[dict]:
        return await self.api.get(
            "/matching/freelancers", params={"mission_id": mission_id, "limit": limit}
        )

    async def find_talent(self, mission_id: str, limit: int = 10) -> List[dict]:
        """
        伺服器端媒合 + 顯示前的技能寬鬆篩選。
        每筆結果額外附上 reason_labels (給 UI 顯示的文字)。
        """
        mission = await self.api.get(f"/missions/{mission_id}")
        matches = await self.get_matching_freelancers(mission_id, limit)

        filtered = filter_by_skill_overlap(matches, mission.get("required_skills") or [])
        logger.info(f"任務 {mission_id} 推薦人才: 伺服器 {len(matches)} 筆，篩選後 {len(filtered)} 筆")

        for match in filtered:
            match["reason_labels"] = [humanize_reason(r) for r in match.get("reasons", [])]
        return filtered
