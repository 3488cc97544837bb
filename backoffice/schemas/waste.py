from datetime import datetime
from pydantic import Field
from typing import Optional
import uuid

from backoffice.models.inventory import WasteReason
from backoffice.schemas.response import CamelModel


class WasteRequest(CamelModel):
    inventory_item_id: uuid.UUID
    quantity: float = Field(..., gt=0, description="Amount discarded, in the item's stocking unit.")
    reason: WasteReason = Field(WasteReason.OTHER, description="Why the stock was discarded.")


class WasteResponse(CamelModel):
    id: uuid.UUID
    inventory_item_id: Optional[uuid.UUID]
    item_name: str
    quantity: float
    unit: str
    reason: WasteReason
    logged_by: str
    created_at: datetime
