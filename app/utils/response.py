# app/utils/response.py
from typing import Any, Optional


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    """包成 {success: true, data, message?}，交給 Router 的 response_model 序列化"""
    return {"success": True, "data": data, "message": message}
