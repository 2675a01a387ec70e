import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.client.filters import filter_by_skill_overlap, humanize_reason, skills_overlap


def make_match(profile_id, skills, score=70):
    return {
        "freelancer": {"profile_id": profile_id, "skills": [{"name": s, "level": "advanced"} for s in skills]},
        "score": score,
        "reasons": ["skill_match"],
    }


def test_partial_skill_name_is_kept():
    matches = [make_match("f1", ["React.js"]), make_match("f2", ["vue"])]

    filtered = filter_by_skill_overlap(matches, ["react"])

    assert [m["freelancer"]["profile_id"] for m in filtered] == ["f1"]


def test_required_skill_containing_candidate_skill():
    # 候選技能被必要技能包含也算
    assert skills_overlap(["Node.js"], ["node"])
    assert skills_overlap(["PYTHON"], [{"name": "python"}])
    assert not skills_overlap(["rust"], ["go", "java"])


def test_filter_keeps_order_and_scores():
    matches = [make_match("f1", ["react"], 90), make_match("f2", ["java"], 80), make_match("f3", ["reactjs"], 60)]

    filtered = filter_by_skill_overlap(matches, ["React"])

    assert [(m["freelancer"]["profile_id"], m["score"]) for m in filtered] == [("f1", 90), ("f3", 60)]


def test_no_required_skills_filters_everything_out():
    assert filter_by_skill_overlap([make_match("f1", ["react"])], []) == []


def test_humanize_reason():
    assert humanize_reason("skill_match") == "skill match"
    assert humanize_reason("high_rating") == "high rating"
