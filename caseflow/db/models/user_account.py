"""
UserAccount model
"""
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, CheckConstraint
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.helpers import generate_uuid


class UserAccount(BaseModel):
    """Directory of clients, lawyers and court staff"""
    __tablename__ = "user_accounts"
    __table_args__ = (
        CheckConstraint(
            "user_type IN ('client', 'lawyer', 'admin', 'court_scheduler')",
            name="check_user_type"
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_type = Column(String(20), nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True)
    phone = Column(String(30))

    # Lawyer attributes
    specialization = Column(String(100))
    is_available = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    rating = Column(Float, nullable=False, default=0)
    years_experience = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
