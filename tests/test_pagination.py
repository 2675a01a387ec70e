import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from app.utils.pagination import get_pagination, paginate


def test_pages_is_ceiling_of_total_over_limit():
    assert paginate(45, 1, 20) == {"page": 1, "limit": 20, "total": 45, "pages": 3}
    assert paginate(40, 2, 20)["pages"] == 2
    assert paginate(1, 1, 20)["pages"] == 1


def test_zero_total_has_zero_pages():
    assert paginate(0, 1, 20) == {"page": 1, "limit": 20, "total": 0, "pages": 0}


@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 10)])
def test_invalid_page_or_limit_raises(page, limit):
    with pytest.raises(ValueError):
        paginate(10, page, limit)


def test_get_pagination_clamps_and_computes_skip():
    params = get_pagination(3, 10)
    assert params == {"skip": 20, "take": 10, "page": 3, "limit": 10}

    clamped = get_pagination(0, 1000, max_limit=50)
    assert clamped["page"] == 1
    assert clamped["limit"] == 50
    assert clamped["skip"] == 0


def test_get_pagination_uses_default_limit():
    params = get_pagination()
    assert params["limit"] == 20
    assert params["page"] == 1


async def test_fetch_page_returns_items_and_meta(db_session, make_user):
    from sqlalchemy.future import select
    from app.models.user import User
    from app.utils.pagination import fetch_page

    for i in range(5):
        await make_user(f"user{i}@example.com")

    stmt = select(User).order_by(User.email)
    result = await fetch_page(db_session, stmt, page=2, limit=2)

    assert [u.email for u in result["items"]] == ["user2@example.com", "user3@example.com"]
    assert result["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}

    empty = await fetch_page(db_session, select(User).where(User.email == "nobody"), page=1, limit=10)
    assert empty["items"] == []
    assert empty["pagination"]["pages"] == 0
