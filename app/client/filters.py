# app/client/filters.py
# 伺服器回傳媒合結果後，顯示前的技能寬鬆篩選 (只影響名單，不改分數)
from typing import Iterable, List


def _lower_names(skills: Iterable) -> List[str]:
    names = []
    for skill in skills or []:
        name = skill.get("name") if isinstance(skill, dict) else skill
        if name:
            names.append(str(name).strip().lower())
    return names


def _candidate_skills(match: dict) -> list:
    # 支援 {"freelancer": {...skills}} 或直接是工作者檔案
    freelancer = match.get("freelancer", match)
    return freelancer.get("skills") or []


def skills_overlap(required_skills: Iterable, candidate_skills: Iterable) -> bool:
    """
    任一候選技能與任一必要技能相等、包含或被包含 (不分大小寫) 即算符合。
    例如必要技能 "react" 與 "React.js" 相符。
    """
    required = _lower_names(required_skills)
    for candidate in _lower_names(candidate_skills):
        for req in required:
            if candidate == req or req in candidate or candidate in req:
                return True
    return False


def filter_by_skill_overlap(matches: List[dict], required_skills: Iterable) -> List[dict]:
    """保留至少有一項技能重疊的候選人，順序與分數維持不變"""
    required = list(required_skills or [])
    return [m for m in matches if skills_overlap(required, _candidate_skills(m))]


def humanize_reason(tag: str) -> str:
    """skill_match -> "skill match" """
    return tag.replace("_", " ")
