"""
Reward wallet tests - balances, point accumulation and first-time creation.
"""
import asyncio

import pytest
from sqlalchemy import select, func

from civicresolve.errors import InvalidInputError
from civicresolve.models.user import RewardWallet
from civicresolve.services.reward_wallet import RewardWalletService


async def test_unknown_user_has_no_points(db_session):
    assert await RewardWalletService(db_session).balance("nobody") == 0


async def test_add_creates_then_accumulates(db_session):
    wallets = RewardWalletService(db_session)

    assert await wallets.add("citizen-1", 10) == 10
    assert await wallets.add(" citizen-1 ", -3) == 7

    count = await db_session.execute(select(func.count(RewardWallet.id)))
    assert count.scalar() == 1


async def test_blank_user_rejected(db_session):
    with pytest.raises(InvalidInputError, match="Missing userId"):
        await RewardWalletService(db_session).add("  ", 5)


async def test_concurrent_first_adds_share_one_wallet(file_sessions):
    async def add(points):
        async with file_sessions() as session:
            balance = await RewardWalletService(session).add("citizen-7", points)
            await session.commit()
            return balance

    await asyncio.gather(*(add(p) for p in (1, 2, 3, 4, 5)))

    async with file_sessions() as session:
        assert await RewardWalletService(session).balance("citizen-7") == 15
        count = await session.execute(
            select(func.count(RewardWallet.id)).where(RewardWallet.user_id == "citizen-7")
        )
        assert count.scalar() == 1
