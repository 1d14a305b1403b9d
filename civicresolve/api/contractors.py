"""
Contractors API - public leaderboard
"""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from civicresolve.database import get_db
from civicresolve.services.contractor_ledger import ContractorLedger

router = APIRouter()


class ContractorResponse(BaseModel):
    id: str
    name: str
    points: int
    total_works: int
    quality_rating: float
    registered_at: datetime

    class Config:
        from_attributes = True


@router.get("/", response_model=List[ContractorResponse])
async def list_contractors(db: AsyncSession = Depends(get_db)):
    """Contractors ranked by evaluation points"""
    return await ContractorLedger(db).list_ranked()
