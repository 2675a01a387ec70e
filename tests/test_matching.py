import os
import sys
import types
from datetime import datetime

# Ensure backend package is on sys.path for imports during tests
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.utils.matching import (
    calculate_freelancer_match,
    calculate_mission_match,
    has_any_required_skill,
    rank_matches,
    skill_matches,
)


def make_mission(required_skills, budget_max=None, experience="mid", modality="remote"):
    return types.SimpleNamespace(
        required_skills=required_skills,
        budget_max=budget_max,
        experience=experience,
        modality=modality,
    )


def make_freelancer(skill_names, daily_rate=None, seniority="mid", remote=True,
                    location=None, availability_status="available"):
    return types.SimpleNamespace(
        skills=[{"name": s, "level": "advanced"} for s in skill_names],
        daily_rate=daily_rate,
        seniority=seniority,
        remote=remote,
        location=location,
        availability={"status": availability_status},
    )


def make_result(item_id, score, created_at=None):
    return {"item_id": item_id, "score": score, "reasons": [], "created_at": created_at, "item_object": None}


def test_skill_matches_substring_and_fuzzy():
    assert skill_matches("react", ["react.js"])
    assert skill_matches("reactjs", ["react.js"])
    assert not skill_matches("vue", ["react.js", "angular"])


def test_has_any_required_skill():
    assert has_any_required_skill(["React"], [{"name": "React.js"}])
    assert not has_any_required_skill(["vue"], [{"name": "React.js"}])
    # 任務沒有必要技能時不過濾
    assert has_any_required_skill([], [{"name": "anything"}])


def test_perfect_mission_match_scores_high():
    mission = make_mission(["python", "fastapi"], budget_max=500, experience="senior")
    freelancer = make_freelancer(["Python", "FastAPI"], daily_rate=400, seniority="senior")

    score, reasons = calculate_mission_match(freelancer, mission, rating=4.5)

    # 技能 40 + 預算 25 + 年資 20 + 遠端 10 + 評價 5
    assert score == 100
    assert reasons == ["skill_match", "budget_fit", "experience_match", "remote_match", "high_rating"]


def test_partial_skill_and_budget_close():
    mission = make_mission(["python", "django"], budget_max=500, experience="senior")
    freelancer = make_freelancer(["python"], daily_rate=550, seniority="mid", remote=False, location="Taipei")

    score, reasons = calculate_mission_match(freelancer, mission)

    # 技能 20 + 預算接近 15 + 相鄰年資 10 (遠端任務但工作者不接遠端)
    assert score == 45
    assert "budget_close" in reasons
    assert "experience_close" in reasons
    assert "remote_match" not in reasons


def test_freelancer_match_availability_and_experience():
    mission = make_mission(["go"], budget_max=None, experience="junior")
    freelancer = make_freelancer(["Go"], seniority="senior", availability_status="busy")

    score, reasons = calculate_freelancer_match(mission, freelancer, rating=4.0, completed_jobs=6)

    # 技能 40 + 評價 3 + 經驗 2，年資差兩級不加分，忙碌中不加分
    assert score == 45
    assert reasons == ["skill_match", "high_rating", "experienced"]


def test_decimal_budget_is_supported():
    from decimal import Decimal

    mission = make_mission(["python"], budget_max=Decimal("300.00"))
    freelancer = make_freelancer(["python"], daily_rate=Decimal("250.00"))
    _, reasons = calculate_freelancer_match(mission, freelancer)
    assert "budget_fit" in reasons


def test_rank_matches_filters_and_sorts():
    older = datetime(2024, 1, 1)
    newer = datetime(2024, 6, 1)
    results = [
        make_result("c", 80, newer),
        make_result("a", 80, older),
        make_result("b", 80, older),
        make_result("d", 95, newer),
        make_result("e", 30, older),  # 不超過門檻 30，排除
    ]

    ranked = rank_matches(results, limit=10, min_score=30)

    assert [r["item_id"] for r in ranked] == ["d", "a", "b", "c"]


def test_rank_matches_respects_limit():
    results = [make_result(str(i), 50 + i) for i in range(10)]
    ranked = rank_matches(results, limit=3, min_score=0)
    assert [r["score"] for r in ranked] == [59, 58, 57]


def test_raw_score_above_threshold_is_kept_before_rounding():
    required = [
        "python", "django", "flask", "docker", "kubernetes", "react", "vue",
        "angular", "rust", "java", "kotlin", "swift", "scala",
    ]
    mission = make_mission(required, budget_max=100, experience="senior")
    freelancer = make_freelancer(required[:5], daily_rate=110, seniority="junior", remote=False)

    score, reasons = calculate_mission_match(freelancer, mission)

    # 技能 40 * 5/13 + 預算接近 15 = 30.38
    assert 30 < score < 30.5
    assert reasons == ["skill_match", "budget_close"]

    ranked = rank_matches([make_result("m", score)], limit=10, min_score=30)
    assert [r["score"] for r in ranked] == [30]
