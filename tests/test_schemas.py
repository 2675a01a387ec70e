import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from pydantic import ValidationError

from app.schemas.contract_schema import ContractCreate
from app.schemas.dispute_schema import DisputeCreate, DisputeResolve
from app.schemas.feedback_schema import FeedbackCreate, FeedbackUpdate
from app.schemas.mission_schema import MissionCreate, MissionUpdate
from app.schemas.profile_schema import FreelancerProfileUpdate
from app.schemas.user_schema import UserCreate


def _error_fields(exc: ValidationError):
    return [err["loc"][0] for err in exc.errors()]


# --- Feedback ---
def test_feedback_requires_mission_or_contract():
    with pytest.raises(ValidationError) as exc_info:
        FeedbackCreate(to_user_id="u1", rating=5)
    assert _error_fields(exc_info.value) == ["mission_id"]


def test_feedback_with_only_mission_or_only_contract():
    assert FeedbackCreate(to_user_id="u1", rating=4, mission_id="m1").mission_id == "m1"
    assert FeedbackCreate(to_user_id="u1", rating=4, contract_id="c1").contract_id == "c1"


@pytest.mark.parametrize("rating", [0, 6])
def test_feedback_rating_out_of_range(rating):
    with pytest.raises(ValidationError) as exc_info:
        FeedbackCreate(to_user_id="u1", rating=rating, mission_id="m1")
    assert "rating" in _error_fields(exc_info.value)


@pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
def test_feedback_rating_in_range(rating):
    assert FeedbackCreate(to_user_id="u1", rating=rating, mission_id="m1").rating == rating


def test_feedback_skill_scores_bounded():
    with pytest.raises(ValidationError):
        FeedbackCreate(to_user_id="u1", rating=5, mission_id="m1", skills={"python": 7})


# --- Dispute ---
def test_dispute_description_length():
    with pytest.raises(ValidationError):
        DisputeCreate(contract_id="c1", reason="late", description="too short")
    ok = DisputeCreate(contract_id="c1", reason="late", description="Delivery is two weeks late.")
    assert ok.reason == "late"


def test_dispute_resolve_requires_ten_characters():
    with pytest.raises(ValidationError):
        DisputeResolve(resolution="refund")


def test_dispute_resolve_defaults_to_resolved():
    data = DisputeResolve(resolution="Partial refund agreed by both parties")
    assert data.status == "RESOLVED"
    assert DisputeResolve(resolution="Closed without action", status="CLOSED").status == "CLOSED"


# --- Contract ---
def test_contract_requires_a_price():
    with pytest.raises(ValidationError) as exc_info:
        ContractCreate(mission_id="m1", freelancer_id="f1", title="Build API")
    assert _error_fields(exc_info.value) == ["hourly_rate"]


def test_contract_with_fixed_price_only():
    contract = ContractCreate(mission_id="m1", freelancer_id="f1", title="Build API", fixed_price=1500)
    assert contract.hourly_rate is None


# --- Mission ---
def test_mission_budget_range_and_skill_cleanup():
    with pytest.raises(ValidationError):
        MissionCreate(
            title="Backend work", description="Build a REST API for our platform",
            required_skills=["python"], budget_min=500, budget_max=100,
        )

    mission = MissionCreate(
        title="Backend work", description="Build a REST API for our platform",
        required_skills=[" python ", "python", "fastapi"],
    )
    assert mission.required_skills == ["python", "fastapi"]


# --- User ---
def test_register_rejects_admin_role_and_weak_password():
    with pytest.raises(ValidationError):
        UserCreate(email="a@example.com", name="Admin", password="password123", role="ADMIN")
    with pytest.raises(ValidationError):
        UserCreate(email="a@example.com", name="Alice", password="onlyletters", role="FREELANCE")


# --- 部分更新 ---
@pytest.mark.parametrize("rating", [0, 6])
def test_feedback_update_rating_out_of_range(rating):
    with pytest.raises(ValidationError) as exc_info:
        FeedbackUpdate(rating=rating)
    assert _error_fields(exc_info.value) == ["rating"]


def test_feedback_update_omitted_fields_stay_unset():
    data = FeedbackUpdate(comment="Updated after the second milestone")
    assert data.model_dump(exclude_unset=True) == {"comment": "Updated after the second milestone"}


@pytest.mark.parametrize("field", ["rating", "is_public"])
def test_feedback_update_rejects_explicit_null(field):
    with pytest.raises(ValidationError) as exc_info:
        FeedbackUpdate(**{field: None})
    assert _error_fields(exc_info.value) == [field]


def test_feedback_update_allows_clearing_comment():
    assert FeedbackUpdate(comment=None).model_dump(exclude_unset=True) == {"comment": None}


@pytest.mark.parametrize("field", ["title", "description", "required_skills"])
def test_mission_update_rejects_explicit_null(field):
    with pytest.raises(ValidationError) as exc_info:
        MissionUpdate(**{field: None})
    assert _error_fields(exc_info.value) == [field]


def test_freelancer_profile_update_rejects_null_skills():
    with pytest.raises(ValidationError) as exc_info:
        FreelancerProfileUpdate(skills=None)
    assert _error_fields(exc_info.value) == ["skills"]
