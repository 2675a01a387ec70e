# app/client/session.py
# 前端 / 腳本端的登入狀態。只有 SessionManager 可以寫入，其他人只讀。
import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: dict = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None


class SessionManager:
    """
    Session 的唯一寫入者 (last-write-wins)。
    login / refresh / logout 是僅有的三個寫入操作。
    """

    def __init__(self, state: Optional[SessionState] = None):
        self._state = state or SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def access_token(self) -> Optional[str]:
        return self._state.access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._state.refresh_token

    @property
    def user(self) -> dict:
        return self._state.user

    def login(self, auth_result: dict) -> SessionState:
        """以 /auth/login 或 /auth/register 的回傳資料建立新的 session"""
        self._state = SessionState(
            access_token=auth_result["access_token"],
            refresh_token=auth_result.get("refresh_token"),
            user=auth_result.get("user") or {},
        )
        logger.info(f"使用者登入: {self._state.user.get('email')}")
        return self._state

    def refresh(self, access_token: str, refresh_token: Optional[str] = None) -> SessionState:
        """換發 token，沒有給新的 refresh token 時沿用舊的"""
        self._state = SessionState(
            access_token=access_token,
            refresh_token=refresh_token or self._state.refresh_token,
            user=self._state.user,
        )
        logger.info("Access token 已更新")
        return self._state

    def logout(self) -> None:
        self._state = SessionState()
        logger.info("Session 已清除")
