# app/utils/matching.py
# 任務 <-> 工作者的媒合分數 (0 ~ 100) 與排序
import Levenshtein
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.config import settings

EXPERIENCE_LEVELS = ['junior', 'mid', 'senior']

# Levenshtein 相似度達到此門檻即視為同一技能 (e.g. "reactjs" / "react.js")
SKILL_SIMILARITY_THRESHOLD = 0.8

# 各項權重 (總和 100)
SKILLS_WEIGHT = 40
BUDGET_FIT_POINTS = 25
BUDGET_CLOSE_POINTS = 15
BUDGET_CLOSE_RATIO = 1.2
EXPERIENCE_MATCH_POINTS = 20
EXPERIENCE_CLOSE_POINTS = 10
REMOTE_MATCH_POINTS = 10
LOCATION_POINTS = 5
MISSION_HIGH_RATING_POINTS = 5
AVAILABLE_POINTS = 10
FREELANCER_HIGH_RATING_POINTS = 3
EXPERIENCED_POINTS = 2
HIGH_RATING = 4.0
EXPERIENCED_MIN_JOBS = 5


# (輔助函式) 取得兩個字串的 Levenshtein 相似度 (0.0 ~ 1.0)
def _get_string_similarity(s1: str, s2: str) -> float:
    # Levenshtein.distance 算出的是 "編輯距離" (差多少)，標準化成 1.0 表示完全相同
    if not s1 or not s2:
        return 0.0
    distance = Levenshtein.distance(s1.lower(), s2.lower())
    max_len = max(len(s1), len(s2))
    return 1.0 - (distance / max_len)


def _to_float(value) -> Optional[float]:
    # DECIMAL 欄位讀出來是 Decimal，不能直接跟 float 相乘
    if value is None:
        return None
    return float(value)


def skill_names(skills) -> List[str]:
    """Profile 的技能可能是 [{"name": ..., "level": ...}] 或純字串列表，一律轉成小寫名稱"""
    names = []
    for skill in skills or []:
        name = skill.get("name") if isinstance(skill, dict) else skill
        if name:
            names.append(str(name).strip().lower())
    return names


def skill_matches(required: str, candidates: Iterable[str]) -> bool:
    """候選技能包含必要技能 (不分大小寫)，或兩者夠相似，即視為符合"""
    required = required.strip().lower()
    if not required:
        return False
    for candidate in candidates:
        if required in candidate:
            return True
        if _get_string_similarity(required, candidate) >= SKILL_SIMILARITY_THRESHOLD:
            return True
    return False


def has_any_required_skill(required_skills: Iterable[str], candidate_skills) -> bool:
    """伺服器端預先過濾：至少符合一項必要技能 (任務沒有必要技能時一律通過)"""
    required = [s for s in (required_skills or []) if s]
    if not required:
        return True
    candidates = skill_names(candidate_skills)
    return any(skill_matches(skill, candidates) for skill in required)


def _score_common(mission, freelancer) -> Tuple[float, List[str]]:
    """技能 / 預算 / 年資 三項，兩個方向的媒合共用"""
    score = 0.0
    reasons = []

    # 1. 技能 (40)
    required = [s for s in (mission.required_skills or []) if s]
    candidates = skill_names(freelancer.skills)
    if required:
        matched = [s for s in required if skill_matches(s, candidates)]
        if matched:
            score += SKILLS_WEIGHT * len(matched) / len(required)
            reasons.append("skill_match")

    # 2. 預算 (25 / 15)
    budget_max = _to_float(mission.budget_max)
    daily_rate = _to_float(freelancer.daily_rate)
    if budget_max and daily_rate:
        if daily_rate <= budget_max:
            score += BUDGET_FIT_POINTS
            reasons.append("budget_fit")
        elif daily_rate <= budget_max * BUDGET_CLOSE_RATIO:
            score += BUDGET_CLOSE_POINTS
            reasons.append("budget_close")

    # 3. 年資 (20 / 相鄰等級 10)
    if mission.experience and mission.experience == freelancer.seniority:
        score += EXPERIENCE_MATCH_POINTS
        reasons.append("experience_match")
    elif mission.experience in EXPERIENCE_LEVELS and freelancer.seniority in EXPERIENCE_LEVELS:
        gap = abs(EXPERIENCE_LEVELS.index(mission.experience) - EXPERIENCE_LEVELS.index(freelancer.seniority))
        if gap == 1:
            score += EXPERIENCE_CLOSE_POINTS
            reasons.append("experience_close")

    return score, reasons


def calculate_mission_match(freelancer, mission, rating: float = 0.0) -> Tuple[float, List[str]]:
    """
    工作者角度：這個任務適不適合我
    回傳 (原始分數 0 ~ 100, 理由標籤)，四捨五入留到 rank_matches 篩選之後
    """
    score, reasons = _score_common(mission, freelancer)

    # 4. 遠端 / 地點 (10 / 5)
    if mission.modality == 'remote' and freelancer.remote:
        score += REMOTE_MATCH_POINTS
        reasons.append("remote_match")
    elif mission.modality != 'remote' and freelancer.location:
        score += LOCATION_POINTS
        reasons.append("location_considered")

    # 5. 評價 (5)
    if rating and rating >= HIGH_RATING:
        score += MISSION_HIGH_RATING_POINTS
        reasons.append("high_rating")

    return min(score, 100.0), reasons


def calculate_freelancer_match(
    mission,
    freelancer,
    rating: float = 0.0,
    completed_jobs: int = 0,
) -> Tuple[float, List[str]]:
    """
    公司角度：這位工作者適不適合這個任務
    回傳 (原始分數 0 ~ 100, 理由標籤)，四捨五入留到 rank_matches 篩選之後
    """
    score, reasons = _score_common(mission, freelancer)

    # 4. 可接案 (10)
    availability = freelancer.availability or {}
    if isinstance(availability, dict) and availability.get("status") == "available":
        score += AVAILABLE_POINTS
        reasons.append("available")

    # 5. 表現 (3 + 2)
    if rating and rating >= HIGH_RATING:
        score += FREELANCER_HIGH_RATING_POINTS
        reasons.append("high_rating")
    if completed_jobs > EXPERIENCED_MIN_JOBS:
        score += EXPERIENCED_POINTS
        reasons.append("experienced")

    return min(score, 100.0), reasons


def rank_matches(
    results: List[Dict],
    limit: int,
    min_score: Optional[int] = None,
) -> List[Dict]:
    """
    results 的每個元素: {"item_id", "score", "reasons", "created_at", "item_object"}
    只保留 score > min_score，依 分數 (高到低) -> 建立時間 (舊到新) -> id 排序
    門檻與排序都用原始分數，回傳前才四捨五入成整數
    """
    if min_score is None:
        min_score = settings.MATCHING_MIN_SCORE

    kept = [r for r in results if r["score"] > min_score]
    kept.sort(
        key=lambda r: (
            -r["score"],
            r.get("created_at") or datetime.max,
            r["item_id"],
        )
    )
    return [{**r, "score": int(round(r["score"]))} for r in kept[:limit]]
