"""Transaction routes - order placement and order history for the current user."""
import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, status

from bookstore.core.security import get_current_user_id
from bookstore.dependencies import get_order_query_service, get_transaction_service
from bookstore.schemas.base import ApiResponse
from bookstore.schemas.transaction import (
    OrderDetailRead,
    OrderRead,
    TransactionCreate,
    TransactionCreated,
    TransactionStatistics,
)
from bookstore.services.order_query_service import OrderQueryService
from bookstore.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[TransactionCreated])
async def create_transaction(
    payload: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    service: TransactionService = Depends(get_transaction_service),
):
    """Place an order and decrement stock for every line, all or nothing."""
    result = await service.create_order(user_id, payload.items)
    return ApiResponse(
        message="Transaction created successfully and stock updated.",
        data=TransactionCreated(**asdict(result)),
    )


@router.get("", response_model=ApiResponse[List[OrderRead]])
async def list_transactions(
    user_id: str = Depends(get_current_user_id),
    service: OrderQueryService = Depends(get_order_query_service),
):
    orders = await service.list_orders(user_id)
    return ApiResponse(
        message="Your transactions history fetched successfully",
        data=orders,
    )


# Declared before /{transaction_id} so "statistics" is not taken as an id
@router.get("/statistics", response_model=ApiResponse[TransactionStatistics])
async def transaction_statistics(
    service: OrderQueryService = Depends(get_order_query_service),
):
    stats = await service.statistics()
    return ApiResponse(
        message="Get transactions statistics successfully",
        data=stats,
    )


@router.get("/{transaction_id}", response_model=ApiResponse[OrderDetailRead])
async def transaction_detail(
    transaction_id: str,
    user_id: str = Depends(get_current_user_id),
    service: OrderQueryService = Depends(get_order_query_service),
):
    order = await service.get_order_detail(user_id, transaction_id)
    return ApiResponse(
        message="Transaction detail fetched successfully",
        data=order,
    )
