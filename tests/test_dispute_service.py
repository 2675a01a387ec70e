import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from app.core.exceptions import BadRequestError, ForbiddenError, ValidationError
from app.models.company_profile import CompanyProfile
from app.models.contract import Contract, ContractStatusEnum
from app.models.dispute import DisputeStatusEnum
from app.models.freelancer_profile import FreelancerProfile
from app.models.mission import Mission, MissionStatusEnum
from app.models.user import UserRoleEnum
from app.schemas.dispute_schema import DisputeCreate, DisputeResolve, DisputeUpdate
from app.services.dispute_service import DisputeService


@pytest.fixture
async def active_contract(db_session, make_user):
    company_user = await make_user("company@example.com", UserRoleEnum.company)
    freelancer_user = await make_user("freelancer@example.com", UserRoleEnum.freelancer)

    company = CompanyProfile(user_id=company_user.user_id, name="Acme Corp")
    freelancer = FreelancerProfile(user_id=freelancer_user.user_id, title="Backend Developer", skills=[])
    db_session.add_all([company, freelancer])
    await db_session.commit()

    mission = Mission(
        company_id=company.profile_id,
        title="Build payment API",
        description="Design and build the payment API for our shop",
        required_skills=["python"],
        status=MissionStatusEnum.published,
    )
    db_session.add(mission)
    await db_session.commit()

    contract = Contract(
        mission_id=mission.mission_id,
        freelancer_id=freelancer.profile_id,
        company_id=company.profile_id,
        title="Payment API contract",
        fixed_price=1200,
        status=ContractStatusEnum.active,
        freelancer_signed=True,
        company_signed=True,
    )
    db_session.add(contract)
    await db_session.commit()

    return {"contract": contract, "company_user": company_user, "freelancer_user": freelancer_user}


async def _open(service, ctx):
    data = DisputeCreate(
        contract_id=ctx["contract"].contract_id,
        reason="Late delivery",
        description="The second milestone is two weeks overdue.",
    )
    return await service.open_dispute(data, ctx["freelancer_user"])


async def test_party_can_open_dispute(db_session, active_contract):
    service = DisputeService(db_session)

    dispute = await _open(service, active_contract)

    assert dispute.status == DisputeStatusEnum.open
    assert dispute.opened_by == active_contract["freelancer_user"].user_id
    assert dispute.contract.contract_id == active_contract["contract"].contract_id


async def test_outsider_cannot_open_dispute(db_session, active_contract, make_user):
    outsider = await make_user("outsider@example.com", UserRoleEnum.freelancer)
    service = DisputeService(db_session)

    with pytest.raises(ForbiddenError):
        await service.open_dispute(
            DisputeCreate(
                contract_id=active_contract["contract"].contract_id,
                reason="Spam",
                description="I am not part of this contract.",
            ),
            outsider,
        )


async def test_resolve_without_status_moves_to_resolved(db_session, active_contract, make_user):
    admin = await make_user("admin@example.com", UserRoleEnum.admin)
    service = DisputeService(db_session)
    dispute = await _open(service, active_contract)

    resolved = await service.resolve_dispute(
        dispute.dispute_id,
        DisputeResolve(resolution="Company agreed to extend the deadline."),
        admin,
    )

    assert resolved.status == DisputeStatusEnum.resolved
    assert resolved.resolution == "Company agreed to extend the deadline."
    assert resolved.resolved_at is not None


async def test_status_update_rules(db_session, active_contract, make_user):
    admin = await make_user("admin@example.com", UserRoleEnum.admin)
    service = DisputeService(db_session)
    dispute = await _open(service, active_contract)

    # 沒有處理結果不能結案
    with pytest.raises(ValidationError):
        await service.update_dispute(dispute.dispute_id, DisputeUpdate(status=DisputeStatusEnum.resolved), admin)

    in_review = await service.update_dispute(
        dispute.dispute_id, DisputeUpdate(status=DisputeStatusEnum.in_review), admin
    )
    assert in_review.status == DisputeStatusEnum.in_review

    # 不能倒退回 OPEN
    with pytest.raises(BadRequestError):
        await service.update_dispute(dispute.dispute_id, DisputeUpdate(status=DisputeStatusEnum.open), admin)
