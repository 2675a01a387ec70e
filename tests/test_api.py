import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.models.user import UserRoleEnum

COVER_LETTER = (
    "I have built several React dashboards for fintech clients and can start next week."
)


async def _setup_company(client, register):
    headers, user = await register("company@example.com", "COMPANY", name="Acme Corp")
    res = await client.post(
        "/profiles/company/me",
        json={"name": "Acme Corp", "industry": "Fintech", "location": "Taipei"},
        headers=headers,
    )
    assert res.status_code == 201, res.text
    return headers, user


async def _setup_freelancer(client, register, email="dev@example.com"):
    headers, user = await register(email, "FREELANCE", name="Dev Chen")
    res = await client.post(
        "/profiles/freelancer/me",
        json={
            "title": "Frontend Developer",
            "skills": [{"name": "React.js", "level": "expert"}],
            "seniority": "senior",
            "daily_rate": 300,
            "remote": True,
        },
        headers=headers,
    )
    assert res.status_code == 201, res.text
    return headers, user, res.json()["data"]


async def _publish_mission(client, company_headers):
    res = await client.post(
        "/missions",
        json={
            "title": "Build analytics dashboard",
            "description": "We need a React dashboard for our analytics product.",
            "required_skills": ["react"],
            "budget_min": 200,
            "budget_max": 500,
            "experience": "senior",
            "modality": "remote",
        },
        headers=company_headers,
    )
    assert res.status_code == 201, res.text
    mission = res.json()["data"]
    assert mission["status"] == "DRAFT"

    res = await client.patch(
        f"/missions/{mission['mission_id']}/status", json={"status": "PUBLISHED"}, headers=company_headers
    )
    assert res.status_code == 200, res.text
    return res.json()["data"]


async def test_root_health(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json()["success"] is True


async def test_register_login_and_me(client, register):
    headers, user = await register("alice@example.com", "FREELANCE", name="Alice")
    assert user["role"] == "FREELANCE"

    res = await client.post("/auth/login", json={"email": "alice@example.com", "password": "password123"})
    body = res.json()
    assert res.status_code == 200
    assert body["success"] is True
    assert body["data"]["refresh_token"]

    res = await client.get("/auth/me", headers=headers)
    assert res.json()["data"]["email"] == "alice@example.com"


async def test_refresh_token_flow(client, register):
    await register("bob@example.com", "COMPANY", name="Bob")
    login = (await client.post("/auth/login", json={"email": "bob@example.com", "password": "password123"})).json()

    res = await client.post("/auth/refresh", json={"refresh_token": login["data"]["refresh_token"]})
    assert res.status_code == 200
    assert res.json()["data"]["access_token"]

    # access token 不能拿來 refresh
    res = await client.post("/auth/refresh", json={"refresh_token": login["data"]["access_token"]})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"


async def test_error_envelopes(client, register):
    await register("carol@example.com", "FREELANCE", name="Carol")

    res = await client.post("/auth/login", json={"email": "carol@example.com", "password": "wrongpass1"})
    assert res.status_code == 401
    assert res.json() == {
        "success": False,
        "error": {"code": "INVALID_CREDENTIALS", "message": res.json()["error"]["message"]},
    }

    res = await client.post("/auth/register", json={
        "email": "carol@example.com", "name": "Carol", "password": "password123", "role": "FREELANCE",
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "EMAIL_EXISTS"

    res = await client.get("/missions")
    assert res.status_code == 401
    assert res.json()["success"] is False


async def test_feedback_validation_error_points_at_mission_id(client, register):
    headers, _ = await register("dan@example.com", "COMPANY", name="Dan")

    res = await client.post("/feedback", json={"to_user_id": "someone", "rating": 5}, headers=headers)

    assert res.status_code == 422
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in error["details"]] == ["mission_id"]


async def test_role_guard(client, register):
    headers, _, _ = await _setup_freelancer(client, register)

    res = await client.post(
        "/missions",
        json={
            "title": "Freelancers cannot post",
            "description": "This request should be rejected by the role guard.",
            "required_skills": ["python"],
        },
        headers=headers,
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_draft_mission_hidden_from_others(client, register):
    company_headers, _ = await _setup_company(client, register)
    freelancer_headers, _, _ = await _setup_freelancer(client, register)

    res = await client.post(
        "/missions",
        json={
            "title": "Secret draft mission",
            "description": "Not yet ready to be shown to freelancers.",
            "required_skills": ["react"],
        },
        headers=company_headers,
    )
    mission_id = res.json()["data"]["mission_id"]

    res = await client.get(f"/missions/{mission_id}", headers=freelancer_headers)
    assert res.status_code == 404

    res = await client.get("/missions", headers=freelancer_headers)
    assert res.json()["data"]["pagination"]["total"] == 0

    # 已發佈的任務不能回到草稿
    await client.patch(f"/missions/{mission_id}/status", json={"status": "PUBLISHED"}, headers=company_headers)
    res = await client.patch(f"/missions/{mission_id}/status", json={"status": "DRAFT"}, headers=company_headers)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


async def test_matching_both_directions(client, register):
    company_headers, _ = await _setup_company(client, register)
    freelancer_headers, _, profile = await _setup_freelancer(client, register)
    await _setup_freelancer(client, register, email="vue@example.com")
    mission = await _publish_mission(client, company_headers)

    res = await client.get("/matching/missions", headers=freelancer_headers)
    assert res.status_code == 200
    matches = res.json()["data"]
    assert [m["mission"]["mission_id"] for m in matches] == [mission["mission_id"]]
    assert matches[0]["score"] == 95
    assert "skill_match" in matches[0]["reasons"]

    res = await client.get(
        "/matching/freelancers", params={"mission_id": mission["mission_id"]}, headers=company_headers
    )
    assert res.status_code == 200
    talent = res.json()["data"]
    # 兩位工作者技能都是 React.js
    assert {t["freelancer"]["profile_id"] for t in talent} >= {profile["profile_id"]}
    assert all(t["freelancer"]["is_certified"] is False for t in talent)

    # 加入候選名單後不再出現在推薦中
    res = await client.post(
        "/shortlist",
        json={"mission_id": mission["mission_id"], "freelancer_id": profile["profile_id"]},
        headers=company_headers,
    )
    assert res.status_code == 201, res.text
    res = await client.get(
        "/matching/freelancers", params={"mission_id": mission["mission_id"]}, headers=company_headers
    )
    assert profile["profile_id"] not in {t["freelancer"]["profile_id"] for t in res.json()["data"]}


async def test_full_contract_flow(client, register):
    company_headers, company_user = await _setup_company(client, register)
    freelancer_headers, freelancer_user, profile = await _setup_freelancer(client, register)
    mission = await _publish_mission(client, company_headers)
    mission_id = mission["mission_id"]

    # --- 申請 ---
    res = await client.post(
        f"/missions/{mission_id}/applications",
        json={"cover_letter": COVER_LETTER, "proposed_rate": 280},
        headers=freelancer_headers,
    )
    assert res.status_code == 201, res.text
    application = res.json()["data"]
    assert application["status"] == "PENDING"

    res = await client.post(
        f"/missions/{mission_id}/applications",
        json={"cover_letter": COVER_LETTER},
        headers=freelancer_headers,
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_APPLIED"

    res = await client.get(f"/missions/{mission_id}/applications", headers=company_headers)
    assert res.json()["data"]["pagination"]["total"] == 1

    # 公司收到申請通知
    res = await client.get("/notifications/my", headers=company_headers)
    assert res.json()["data"]["pagination"]["total"] == 1
    notification = res.json()["data"]["items"][0]
    assert notification["type"] == "APPLICATION_RECEIVED"
    assert notification["data"]["application_id"] == application["application_id"]

    res = await client.get(
        "/notifications/my", params={"type": "PAYMENT_RECEIVED"}, headers=company_headers
    )
    assert res.json()["data"]["pagination"]["total"] == 0

    # 還沒錄取不能建立合約
    contract_payload = {
        "mission_id": mission_id,
        "freelancer_id": profile["profile_id"],
        "title": "Analytics dashboard contract",
        "fixed_price": 3000,
    }
    res = await client.post("/contracts", json=contract_payload, headers=company_headers)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "APPLICATION_NOT_ACCEPTED"

    res = await client.patch(
        f"/applications/{application['application_id']}/status",
        json={"status": "ACCEPTED"},
        headers=company_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["status"] == "ACCEPTED"

    # --- 合約 ---
    res = await client.post("/contracts", json=contract_payload, headers=company_headers)
    assert res.status_code == 201, res.text
    contract = res.json()["data"]
    contract_id = contract["contract_id"]
    assert contract["status"] == "DRAFT"

    res = await client.post(f"/contracts/{contract_id}/sign", headers=freelancer_headers)
    assert res.json()["data"]["status"] == "PENDING_SIGNATURES"

    res = await client.post(f"/contracts/{contract_id}/sign", headers=freelancer_headers)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_SIGNED"

    res = await client.post(f"/contracts/{contract_id}/sign", headers=company_headers)
    signed = res.json()["data"]
    assert signed["status"] == "ACTIVE"
    assert signed["signed_at"] is not None

    # --- 里程碑與付款 ---
    res = await client.post(
        f"/contracts/{contract_id}/milestones",
        json={"title": "Dashboard MVP", "amount": 1000},
        headers=company_headers,
    )
    assert res.status_code == 201, res.text
    milestone_id = res.json()["data"]["milestone_id"]

    # 未核准前不能付款
    res = await client.post(f"/milestones/{milestone_id}/payments", json={}, headers=company_headers)
    assert res.status_code == 400

    res = await client.patch(
        f"/milestones/{milestone_id}/status",
        json={"status": "SUBMITTED", "deliverable": "https://example.com/demo"},
        headers=freelancer_headers,
    )
    assert res.json()["data"]["status"] == "SUBMITTED"

    # 工作者不能自己核准
    res = await client.patch(
        f"/milestones/{milestone_id}/status", json={"status": "APPROVED"}, headers=freelancer_headers
    )
    assert res.status_code == 403

    res = await client.patch(
        f"/milestones/{milestone_id}/status", json={"status": "APPROVED"}, headers=company_headers
    )
    assert res.json()["data"]["status"] == "APPROVED"

    res = await client.post(f"/milestones/{milestone_id}/payments", json={}, headers=company_headers)
    assert res.status_code == 201, res.text
    assert float(res.json()["data"]["amount"]) == 1000

    res = await client.get(f"/contracts/{contract_id}/milestones", headers=freelancer_headers)
    assert [m["status"] for m in res.json()["data"]] == ["PAID"]

    res = await client.get(f"/contracts/{contract_id}/payments", headers=freelancer_headers)
    assert res.json()["data"]["pagination"]["total"] == 1

    # --- 工時 ---
    res = await client.post(
        f"/contracts/{contract_id}/tracking",
        json={"date": "2024-05-01", "hours": 6.5, "description": "Built chart components"},
        headers=freelancer_headers,
    )
    assert res.status_code == 201, res.text
    entry_id = res.json()["data"]["entry_id"]

    res = await client.post(f"/tracking/{entry_id}/approve", json={}, headers=company_headers)
    assert res.json()["data"]["approved"] is True

    res = await client.put(f"/tracking/{entry_id}", json={"hours": 8}, headers=freelancer_headers)
    assert res.status_code == 400

    # --- 評價 ---
    res = await client.post(
        "/feedback",
        json={
            "to_user_id": freelancer_user["user_id"],
            "contract_id": contract_id,
            "rating": 5,
            "comment": "Great work",
        },
        headers=company_headers,
    )
    assert res.status_code == 201, res.text
    feedback = res.json()["data"]
    assert feedback["from_user"]["name"] == "Acme Corp"

    res = await client.get(f"/feedback/user/{freelancer_user['user_id']}/rating", headers=company_headers)
    assert res.json()["data"] == {"average_rating": 5.0, "total_reviews": 1}

    res = await client.get(f"/profiles/freelancers/{profile['profile_id']}", headers=company_headers)
    view = res.json()["data"]
    assert view["rating"] == 5.0
    assert view["total_reviews"] == 1

    # --- 爭議 ---
    res = await client.post(
        "/disputes",
        json={
            "contract_id": contract_id,
            "reason": "Scope change",
            "description": "The company asked for extra pages outside the agreed scope.",
        },
        headers=freelancer_headers,
    )
    assert res.status_code == 201, res.text

    res = await client.get("/disputes", headers=company_headers)
    assert res.json()["data"]["pagination"]["total"] == 1

    # 只有管理員可以結案
    dispute_id = res.json()["data"]["items"][0]["dispute_id"]
    res = await client.post(
        f"/disputes/{dispute_id}/resolve",
        json={"resolution": "Extra pages moved to a new milestone."},
        headers=company_headers,
    )
    assert res.status_code == 403

    # --- 完成合約 ---
    res = await client.patch(
        f"/contracts/{contract_id}/status", json={"status": "COMPLETED"}, headers=freelancer_headers
    )
    assert res.status_code == 403

    res = await client.patch(
        f"/contracts/{contract_id}/status", json={"status": "COMPLETED"}, headers=company_headers
    )
    assert res.json()["data"]["status"] == "COMPLETED"

    res = await client.get("/contracts/my", headers=freelancer_headers)
    assert res.json()["data"]["pagination"]["total"] == 1


async def _apply(client, freelancer_headers, mission_id):
    res = await client.post(
        f"/missions/{mission_id}/applications",
        json={"cover_letter": COVER_LETTER},
        headers=freelancer_headers,
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]


async def _login_admin(client, make_user):
    await make_user("admin@example.com", role=UserRoleEnum.admin, name="Admin")
    res = await client.post("/auth/login", json={"email": "admin@example.com", "password": "password123"})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['data']['access_token']}"}


async def test_feedback_edit_and_delete_permissions(client, register, make_user):
    company_headers, _ = await _setup_company(client, register)
    freelancer_headers, freelancer_user, _ = await _setup_freelancer(client, register)
    outsider_headers, _, _ = await _setup_freelancer(client, register, email="other@example.com")
    mission = await _publish_mission(client, company_headers)

    res = await client.post(
        "/feedback",
        json={
            "to_user_id": freelancer_user["user_id"],
            "mission_id": mission["mission_id"],
            "rating": 3,
            "is_public": False,
        },
        headers=company_headers,
    )
    assert res.status_code == 201, res.text
    feedback_id = res.json()["data"]["feedback_id"]

    # 非公開評價對第三人而言不存在
    res = await client.get(f"/feedback/{feedback_id}", headers=outsider_headers)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "FEEDBACK_NOT_FOUND"
    res = await client.patch(f"/feedback/{feedback_id}", json={"rating": 1}, headers=outsider_headers)
    assert res.status_code == 404

    res = await client.get(f"/feedback/user/{freelancer_user['user_id']}", headers=outsider_headers)
    assert res.json()["data"]["pagination"]["total"] == 0

    # 被評價者看得到，但不能改也不能刪
    res = await client.get(f"/feedback/{feedback_id}", headers=freelancer_headers)
    assert res.status_code == 200
    res = await client.patch(f"/feedback/{feedback_id}", json={"rating": 5}, headers=freelancer_headers)
    assert res.status_code == 403
    res = await client.delete(f"/feedback/{feedback_id}", headers=freelancer_headers)
    assert res.status_code == 403

    res = await client.patch(f"/feedback/{feedback_id}", json={"rating": 6}, headers=company_headers)
    assert res.status_code == 422
    assert [d["field"] for d in res.json()["error"]["details"]] == ["rating"]

    # 必填欄位可以省略，但不能送 null
    for payload, field in (({"rating": None}, "rating"), ({"is_public": None}, "is_public")):
        res = await client.patch(f"/feedback/{feedback_id}", json=payload, headers=company_headers)
        assert res.status_code == 422, res.text
        error = res.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert [d["field"] for d in error["details"]] == [field]

    res = await client.patch(
        f"/feedback/{feedback_id}", json={"rating": 4, "comment": "Solid delivery"}, headers=company_headers
    )
    assert res.status_code == 200, res.text
    updated = res.json()["data"]
    assert updated["rating"] == 4
    assert updated["comment"] == "Solid delivery"
    assert updated["is_public"] is False

    admin_headers = await _login_admin(client, make_user)
    res = await client.get(f"/feedback/{feedback_id}", headers=admin_headers)
    assert res.status_code == 200
    res = await client.delete(f"/feedback/{feedback_id}", headers=admin_headers)
    assert res.status_code == 200, res.text

    res = await client.get(f"/feedback/{feedback_id}", headers=company_headers)
    assert res.status_code == 404


async def test_mission_update_checks_budget_against_stored_values(client, register):
    company_headers, _ = await _setup_company(client, register)
    mission = await _publish_mission(client, company_headers)
    mission_id = mission["mission_id"]

    # 資料庫裡 budget_min = 200
    res = await client.put(f"/missions/{mission_id}", json={"budget_max": 100}, headers=company_headers)
    assert res.status_code == 422, res.text
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in error["details"]] == ["budget_max"]

    res = await client.put(f"/missions/{mission_id}", json={"budget_min": 600}, headers=company_headers)
    assert res.status_code == 422

    res = await client.put(f"/missions/{mission_id}", json={"title": None}, headers=company_headers)
    assert res.status_code == 422

    res = await client.put(f"/missions/{mission_id}", json={"budget_max": 250}, headers=company_headers)
    assert res.status_code == 200, res.text
    assert float(res.json()["data"]["budget_max"]) == 250
    assert res.json()["data"]["title"] == mission["title"]


async def test_assessment_flow_certifies_freelancer(client, register):
    company_headers, _ = await _setup_company(client, register)
    freelancer_headers, _, profile = await _setup_freelancer(client, register)
    mission = await _publish_mission(client, company_headers)
    application = await _apply(client, freelancer_headers, mission["mission_id"])
    application_id = application["application_id"]

    payload = {
        "application_id": application_id,
        "type": "QCM",
        "title": "React fundamentals",
        "questions": [
            {"question": "What does JSX compile to?", "type": "text"},
            {"question": "Which hook stores local state?", "type": "multiple_choice",
             "options": ["useState", "useMemo"], "correct_answer": "useState"},
        ],
        "max_score": 10,
        "time_limit": 30,
    }
    res = await client.post("/assessments", json=payload, headers=freelancer_headers)
    assert res.status_code == 403

    res = await client.post("/assessments", json=payload, headers=company_headers)
    assert res.status_code == 201, res.text
    assessment = res.json()["data"]
    assessment_id = assessment["assessment_id"]
    question_ids = [q["id"] for q in assessment["questions"]]
    assert all(question_ids)
    assert assessment["score"] is None

    res = await client.get(f"/applications/{application_id}", headers=freelancer_headers)
    assert res.json()["data"]["status"] == "ASSESSMENT_SENT"

    res = await client.patch(f"/assessments/{assessment_id}/score", json={"score": 8}, headers=company_headers)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "ASSESSMENT_NOT_SUBMITTED"

    res = await client.post(
        f"/assessments/{assessment_id}/submit",
        json={"answers": [{"question_id": question_ids[0], "answer": "React.createElement calls"}]},
        headers=freelancer_headers,
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "MISSING_ANSWERS"
    assert error["details"]["question_ids"] == [question_ids[1]]

    answers = [
        {"question_id": question_ids[0], "answer": "React.createElement calls"},
        {"question_id": question_ids[1], "answer": "useState"},
    ]
    res = await client.post(
        f"/assessments/{assessment_id}/submit", json={"answers": answers}, headers=freelancer_headers
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["submitted_at"] is not None

    res = await client.post(
        f"/assessments/{assessment_id}/submit", json={"answers": answers}, headers=freelancer_headers
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "ASSESSMENT_ALREADY_SUBMITTED"

    res = await client.get(f"/applications/{application_id}", headers=company_headers)
    assert res.json()["data"]["status"] == "ASSESSMENT_COMPLETED"

    # 評分前還不算認證
    res = await client.get(f"/missions/{mission['mission_id']}/applications", headers=company_headers)
    assert res.json()["data"]["items"][0]["freelancer"]["is_certified"] is False

    res = await client.patch(f"/assessments/{assessment_id}/score", json={"score": 11}, headers=company_headers)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SCORE_EXCEEDS_MAX"

    res = await client.patch(
        f"/assessments/{assessment_id}/score",
        json={"score": 8, "review_notes": "Good grasp of hooks"},
        headers=company_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["score"] == 8

    res = await client.get(f"/missions/{mission['mission_id']}/applications", headers=company_headers)
    applicant = res.json()["data"]["items"][0]["freelancer"]
    assert applicant["profile_id"] == profile["profile_id"]
    assert applicant["is_certified"] is True

    res = await client.get(f"/profiles/freelancers/{profile['profile_id']}", headers=company_headers)
    assert res.json()["data"]["is_certified"] is True

    res = await client.get("/assessments", headers=freelancer_headers)
    assert [a["assessment_id"] for a in res.json()["data"]["items"]] == [assessment_id]

    res = await client.get(
        "/notifications/my", params={"type": "ASSESSMENT_SCORED"}, headers=freelancer_headers
    )
    assert res.json()["data"]["pagination"]["total"] == 1


async def test_low_assessment_score_does_not_certify(client, register):
    company_headers, _ = await _setup_company(client, register)
    freelancer_headers, _, profile = await _setup_freelancer(client, register)
    outsider_headers, _, _ = await _setup_freelancer(client, register, email="other@example.com")
    mission = await _publish_mission(client, company_headers)
    application = await _apply(client, freelancer_headers, mission["mission_id"])

    res = await client.post(
        "/assessments",
        json={
            "application_id": application["application_id"],
            "type": "CHALLENGE",
            "title": "Build a todo list",
            "questions": [{"question": "Link your repository", "type": "text"}],
            "max_score": 10,
        },
        headers=company_headers,
    )
    assert res.status_code == 201, res.text
    assessment = res.json()["data"]
    assessment_id = assessment["assessment_id"]

    res = await client.get(f"/assessments/{assessment_id}", headers=outsider_headers)
    assert res.status_code == 403

    res = await client.post(
        f"/assessments/{assessment_id}/submit",
        json={"answers": [{"question_id": assessment["questions"][0]["id"], "answer": "https://example.com/repo"}]},
        headers=freelancer_headers,
    )
    assert res.status_code == 200, res.text

    res = await client.patch(f"/assessments/{assessment_id}/score", json={"score": 6}, headers=company_headers)
    assert res.status_code == 200, res.text

    res = await client.get(f"/profiles/freelancers/{profile['profile_id']}", headers=company_headers)
    assert res.json()["data"]["is_certified"] is False

    res = await client.patch(
        f"/applications/{application['application_id']}/status",
        json={"status": "REJECTED"},
        headers=company_headers,
    )
    assert res.status_code == 200, res.text


async def test_analytics_summary_by_role(client, register, make_user):
    company_headers, _ = await _setup_company(client, register)
    freelancer_headers, _, _ = await _setup_freelancer(client, register)
    mission = await _publish_mission(client, company_headers)
    application = await _apply(client, freelancer_headers, mission["mission_id"])
    await client.patch(
        f"/applications/{application['application_id']}/status",
        json={"status": "ACCEPTED"},
        headers=company_headers,
    )

    res = await client.get("/analytics/summary", headers=freelancer_headers)
    assert res.status_code == 200, res.text
    summary = res.json()["data"]
    assert summary["role"] == "FREELANCE"
    assert summary["total_applications"] == 1
    assert summary["recent_applications"] == 1
    assert summary["conversion_rate"] == 100
    assert summary["skill_demand"] == [{"skill": "react.js", "demand": 0}]

    res = await client.get("/analytics/summary", headers=company_headers)
    summary = res.json()["data"]
    assert summary["role"] == "COMPANY"
    assert summary["total_missions"] == 1
    assert summary["active_missions"] == 1
    assert summary["total_applications"] == 1
    assert summary["avg_applications_per_mission"] == 1

    # 只有管理員可以看熱門技能
    res = await client.get("/analytics/top-skills", headers=company_headers)
    assert res.status_code == 403

    admin_headers = await _login_admin(client, make_user)
    res = await client.get("/analytics/summary", headers=admin_headers)
    summary = res.json()["data"]
    assert summary["role"] == "ADMIN"
    assert summary["total_users"] == 3
    assert summary["total_missions"] == 1
    assert summary["growth"]["new_missions"] == 1
    assert summary["freelancers_count"] == 1
    assert summary["companies_count"] == 1

    res = await client.get("/analytics/top-skills", headers=admin_headers)
    assert res.json()["data"] == [{"skill": "react", "count": 1}, {"skill": "React.js", "count": 1}]

    res = await client.get("/analytics/market-trends", params={"period": "yearly"}, headers=company_headers)
    trends = res.json()["data"]
    assert len(trends) == 1
    assert trends[0]["mission_count"] == 1
    assert trends[0]["average_budget"] == 350

    res = await client.get("/analytics/market-trends", params={"period": "weekly"}, headers=company_headers)
    assert res.status_code == 422

    res = await client.get("/analytics/active-contracts", headers=company_headers)
    assert res.json()["data"] == {"active_contracts": 0}
    res = await client.get("/analytics/active-freelancers", headers=company_headers)
    assert res.json()["data"] == {"active_freelancers": 0}
