# app/models/shortlist.py

import uuid
from sqlalchemy import Column, TEXT, TIMESTAMP, ForeignKey, CHAR, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base

class Shortlist(Base):
    __tablename__ = "shortlists"
    __table_args__ = (
        UniqueConstraint("company_id", "mission_id", "freelancer_id", name="uq_shortlist_company_mission_freelancer"),
    )

    shortlist_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id = Column(CHAR(36), ForeignKey("company_profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    mission_id = Column(CHAR(36), ForeignKey("missions.mission_id", ondelete="CASCADE"), nullable=False, index=True)
    freelancer_id = Column(CHAR(36), ForeignKey("freelancer_profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    notes = Column(TEXT)
    created_at = Column(TIMESTAMP, server_default=func.now())

    freelancer = relationship("FreelancerProfile")
