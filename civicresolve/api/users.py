"""
Citizen reward wallet endpoints
"""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from civicresolve.database import get_db
from civicresolve.services.reward_wallet import RewardWalletService

router = APIRouter()


class WalletAdd(BaseModel):
    userId: str
    points: int = 0


class WalletResponse(BaseModel):
    user_id: str
    points: int


@router.get("/wallet", response_model=WalletResponse)
async def get_wallet(userId: str = Query(""), db: AsyncSession = Depends(get_db)):
    points = await RewardWalletService(db).balance(userId)
    return {"user_id": userId, "points": points}


@router.post("/wallet/add", response_model=WalletResponse)
async def add_points(body: WalletAdd, db: AsyncSession = Depends(get_db)):
    points = await RewardWalletService(db).add(body.userId, body.points)
    await db.commit()
    return {"user_id": body.userId, "points": points}
