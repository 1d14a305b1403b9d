"""
Citizen reward wallet
"""
from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from civicresolve.database import Base


class RewardWallet(Base):
    __tablename__ = "reward_wallets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, unique=True, nullable=False, index=True)
    points = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
