# app/utils/pagination.py
# 分頁計算，以及 Repository 共用的「總數 + 當頁資料」查詢
import math
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.core.config import settings


def paginate(total: int, page: int, limit: int) -> dict:
    """
    回傳 {page, limit, total, pages}
    - pages = ceil(total / limit)，total 為 0 時 pages 也是 0
    """
    if page < 1:
        raise ValueError("page 必須 >= 1")
    if limit < 1:
        raise ValueError("limit 必須 >= 1")
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }


def get_pagination(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> dict:
    """把使用者傳入的 page / limit 夾在合法範圍內，並換算成 skip / take"""
    max_limit = max_limit or settings.PAGINATION_MAX_LIMIT
    page = max(page or 1, 1)
    limit = limit or settings.PAGINATION_DEFAULT_LIMIT
    limit = min(max(limit, 1), max_limit)
    return {
        "skip": (page - 1) * limit,
        "take": limit,
        "page": page,
        "limit": limit,
    }


async def fetch_page(
    db: AsyncSession,
    stmt: Select,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    options: Sequence = (),
) -> dict:
    """
    執行分頁查詢，回傳 {items, pagination}。
    stmt 不應帶 eager loading 的 options (只用來算總數)，關聯載入請傳 options。
    同一個 AsyncSession 不能同時執行兩個查詢，所以總數與當頁資料依序執行。
    """
    params = get_pagination(page, limit)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    page_stmt = stmt.options(*options).offset(params["skip"]).limit(params["take"])
    result = await db.execute(page_stmt)
    items = result.scalars().unique().all()

    return {
        "items": items,
        "pagination": paginate(total, params["page"], params["limit"]),
    }
