import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.models.feedback import Feedback
from app.models.user import UserRoleEnum
from app.repositories.feedback_repo import FeedbackRepository


async def _seed_ratings(repo, author, target, ratings, is_public=True):
    for rating in ratings:
        await repo.create(Feedback(
            from_user_id=author.user_id,
            to_user_id=target.user_id,
            rating=rating,
            comment="Worked together on a mission",
            is_public=is_public,
        ))


async def test_rating_only_counts_public_feedback(db_session, make_user):
    company = await make_user("company@example.com", UserRoleEnum.company)
    freelancer = await make_user("freelancer@example.com", UserRoleEnum.freelancer)
    repo = FeedbackRepository(db_session)

    await _seed_ratings(repo, company, freelancer, [4, 5, 3])
    await _seed_ratings(repo, company, freelancer, [1], is_public=False)

    rating = await repo.calculate_user_rating(freelancer.user_id)

    assert rating == {"average_rating": 4, "total_reviews": 3}


async def test_rating_without_feedback_is_zero(db_session, make_user):
    user = await make_user("lonely@example.com")
    repo = FeedbackRepository(db_session)

    assert await repo.calculate_user_rating(user.user_id) == {"average_rating": 0, "total_reviews": 0}


async def test_find_by_user_id_filters_public(db_session, make_user):
    company = await make_user("company@example.com", UserRoleEnum.company)
    freelancer = await make_user("freelancer@example.com", UserRoleEnum.freelancer)
    repo = FeedbackRepository(db_session)

    await _seed_ratings(repo, company, freelancer, [5, 4])
    await _seed_ratings(repo, company, freelancer, [2], is_public=False)

    public_page = await repo.find_by_user_id(freelancer.user_id, is_public=True)
    all_page = await repo.find_by_user_id(freelancer.user_id)

    assert public_page["pagination"]["total"] == 2
    assert all(f.is_public for f in public_page["items"])
    assert all_page["pagination"]["total"] == 3
    # from_user 已預先載入，可直接讀取
    assert public_page["items"][0].from_user.email == "company@example.com"
