import logging
from fastapi import APIRouter, Depends, status
from backoffice.api.deps import CurrentUser, require_manager
from backoffice.schemas.response import SuccessResponse
from backoffice.schemas.waste import WasteRequest, WasteResponse
from backoffice.services.waste_service import log_waste

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def log_waste_endpoint(request_data: WasteRequest, user: CurrentUser = Depends(require_manager)):
    """Logs discarded stock and deducts it from inventory in one transaction."""
    record = await log_waste(
        ingredient_id=request_data.inventory_item_id,
        quantity=request_data.quantity,
        reason=request_data.reason,
        logged_by=user.id,
    )
    data = WasteResponse(
        id=record.id,
        inventory_item_id=record.inventory_item_id,
        item_name=record.item_name,
        quantity=record.quantity,
        unit=record.unit.value,
        reason=record.reason,
        logged_by=record.logged_by,
        created_at=record.created_at,
    ).to_wire()
    return SuccessResponse(data=data)
