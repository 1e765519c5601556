from typing import List
from fastapi import APIRouter, Depends

from gastos.core.auth import get_current_uid
from gastos.db.mongo import get_db
from gastos.repositories.balance_repo import BalanceRepository
from gastos.schemas.balance import BalanceResponse

router = APIRouter()

@router.get("", response_model=List[BalanceResponse])
async def list_my_balances(
    uid: str = Depends(get_current_uid),
    db = Depends(get_db)
):
    """Balances involving the caller, seen from the caller's side."""
    balances = await BalanceRepository(db).list_for_user(uid)
    return [BalanceResponse.for_user(balance, uid) for balance in balances]
