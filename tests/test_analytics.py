import os
import sys
import types
from datetime import datetime

# Ensure backend package is on sys.path for imports during tests
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from app.repositories.profile_repo import is_passing_score
from app.services.analytics_service import (
    average_days,
    count_top_skills,
    group_market_trends,
    skill_demand,
)


def make_mission(created_at, budget_min=None, budget_max=None, sector=None, required_skills=()):
    return types.SimpleNamespace(
        created_at=created_at,
        budget_min=budget_min,
        budget_max=budget_max,
        sector=sector,
        required_skills=list(required_skills),
    )


def test_top_skills_counts_missions_and_freelancers():
    mission_skills = [(["python", "django"], ["docker"]), (["python"], [])]
    freelancer_skills = [[{"name": "python", "level": "expert"}, {"name": "docker"}], ["go"]]

    top = count_top_skills(mission_skills, freelancer_skills)

    assert [(s.skill, s.count) for s in top] == [
        ("python", 3), ("docker", 2), ("django", 1), ("go", 1),
    ]


def test_top_skills_respects_limit():
    mission_skills = [([f"skill-{i}"], []) for i in range(30)]
    assert len(count_top_skills(mission_skills, [])) == 20
    assert len(count_top_skills(mission_skills, [], limit=5)) == 5


def test_skill_demand_is_case_insensitive_and_sorted():
    profile_skills = [{"name": "Vue"}, {"name": "React"}]
    mission_skills = [(["react"], []), ([" REACT "], ["vue"]), (["python"], ["React"])]

    demand = skill_demand(profile_skills, mission_skills)

    assert [(d.skill, d.demand) for d in demand] == [("react", 3), ("vue", 1)]


def test_market_trends_grouped_by_quarter():
    missions = [
        make_mission(datetime(2024, 1, 10), 100, 300, sector="Fintech"),
        make_mission(datetime(2024, 3, 5), None, 400, sector="Fintech"),
        make_mission(datetime(2024, 3, 20), 200, 200, sector="Retail"),
        make_mission(datetime(2024, 4, 1), 1000, 2000),
    ]

    trends = group_market_trends(missions, "quarterly")

    assert [t.period for t in trends] == ["2024-Q1", "2024-Q2"]
    q1 = trends[0]
    assert q1.mission_count == 3
    # (200 + 200 + 200) / 3，缺少的 budget_min 視為 0
    assert q1.average_budget == 200
    assert [(s.sector, s.count) for s in q1.top_sectors] == [("Fintech", 2), ("Retail", 1)]
    assert trends[1].top_sectors == []
    assert trends[1].average_budget == 1500


@pytest.mark.parametrize("period, expected", [
    ("monthly", ["2023-11", "2024-2"]),
    ("yearly", ["2023", "2024"]),
])
def test_market_trend_period_keys(period, expected):
    missions = [make_mission(datetime(2023, 11, 2), 10, 10), make_mission(datetime(2024, 2, 3), 10, 10)]
    assert [t.period for t in group_market_trends(missions, period)] == expected


def test_market_trends_filtered_by_required_skill():
    missions = [
        make_mission(datetime(2024, 5, 1), 100, 100, required_skills=["Python"]),
        make_mission(datetime(2024, 5, 2), 900, 900, required_skills=["go"]),
    ]
    trends = group_market_trends(missions, "monthly", skills=["python"])
    assert [(t.mission_count, t.average_budget) for t in trends] == [(1, 100)]


def test_average_days():
    pairs = [
        (datetime(2024, 1, 1), datetime(2024, 1, 3)),
        (datetime(2024, 1, 1), datetime(2024, 1, 5)),
        (datetime(2024, 1, 1), None),
    ]
    assert average_days(pairs) == 3
    assert average_days([]) == 0


@pytest.mark.parametrize("score, max_score, passed", [
    (7, 10, True),
    (6.9, 10, False),
    (70, 100, True),
    (70, None, True),
    (69, None, False),
    (None, 10, False),
])
def test_certification_pass_score(score, max_score, passed):
    assert is_passing_score(score, max_score) is passed
