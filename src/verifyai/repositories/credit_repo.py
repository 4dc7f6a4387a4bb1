"""SQL implementation of CreditRepository."""

from sqlalchemy import select
from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession

from verifyai.models.credits import UserCredits


class SqlCreditRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_balance(self, user_id: str) -> int | None:
        result = await self._session.execute(
            select(UserCredits.credits).where(
                UserCredits.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def open_account(self, user_id: str, credits: int) -> int:
        """Create the account if missing; return the current balance."""
        existing = await self.get_balance(user_id)
        if existing is not None:
            return existing
        self._session.add(UserCredits(user_id=user_id, credits=credits))
        await self._session.flush()
        return credits

    async def adjust(self, user_id: str, delta: int) -> int:
        """Atomically add ``delta`` to the balance and return the result.

        Raises LookupError if the user has no credit account.
        """
        result = await self._session.execute(
            sa_update(UserCredits)
            .where(UserCredits.user_id == user_id)
            .values(credits=UserCredits.credits + delta)
        )
        await self._session.flush()
        rowcount: int = getattr(result, "rowcount", 0) or 0
        if rowcount == 0:
            raise LookupError(f"no credit account for user {user_id}")
        balance = await self.get_balance(user_id)
        return balance if balance is not None else 0
