"""wb_account REST API — balance queries plus manual credit/debit/transfer for operators."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.wb_account.application.schemas import (
    AmountRequest,
    BalanceResponse,
    CreditResponse,
    DebitResponse,
    TopBalancesResponse,
    TransferRequest,
    TransferResponse,
)
from src.wb_account.application.service import LedgerService
from src.wb_common.response import ApiResponse, success_response

router = APIRouter(prefix="/accounts", tags=["accounts"])

_ledger = LedgerService()


def get_ledger_service() -> LedgerService:
    return _ledger


def _with_request_id(resp: ApiResponse, request: Request) -> ApiResponse:
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/top")
async def top_balances(
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
    limit: int = Query(5, ge=-1, description="Max accounts; -1 returns all"),
) -> ApiResponse:
    accounts = await ledger.top_balances(limit)
    data = TopBalancesResponse.from_domain(accounts)
    return _with_request_id(success_response(data.model_dump()), request)


@router.get("/{user_id}/balance")
async def get_balance(
    user_id: str,
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    account = await ledger.get_account(user_id, ledger.default_balance_credit)
    data = BalanceResponse.from_domain(account)
    return _with_request_id(success_response(data.model_dump()), request)


@router.post("/{user_id}/credit")
async def credit(
    user_id: str,
    body: AmountRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    result = await ledger.credit(body.amount, user_id)
    data = CreditResponse.from_result(result, body.amount)
    return _with_request_id(success_response(data.model_dump()), request)


@router.post("/{user_id}/debit")
async def debit(
    user_id: str,
    body: AmountRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    result = await ledger.debit(body.amount, user_id)
    data = DebitResponse.from_result(result, body.amount)
    return _with_request_id(success_response(data.model_dump()), request)


@router.post("/{user_id}/transfer")
async def transfer(
    user_id: str,
    body: TransferRequest,
    ledger: Annotated[LedgerService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    result = await ledger.transfer(body.amount, user_id, body.to_user_id)
    data = TransferResponse.from_result(result, body.amount)
    return _with_request_id(success_response(data.model_dump()), request)
