from typing import Any, List, Optional
from fastapi import APIRouter, Depends, status

from ...deps import get_storage, get_invoice_service
from ....core.exceptions import NotFoundError
from ....models.invoice import InvoiceStatus
from ....services.storage import Storage
from ....services.invoice_service import InvoiceService
from ....schemas.invoice import (
    Invoice, InvoiceCreate, InvoiceUpdate, InvoiceWithClient, InvoiceCreated, GatewayReport
)

router = APIRouter()


@router.get("", response_model=List[InvoiceWithClient])
async def get_invoices(
    status: Optional[InvoiceStatus] = None,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.get_invoices(status=status.value if status else None)


@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(invoice_id: int, storage: Storage = Depends(get_storage)) -> Any:
    invoice = await storage.get_invoice(invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice", invoice_id)
    return invoice


@router.post("", response_model=InvoiceCreated, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_in: InvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service),
) -> Any:
    """Create an invoice locally and mirror it to Stripe when possible.

    A Stripe failure does not fail the request; it is reported in ``gateway``.
    """
    invoice, result = await service.create_invoice(invoice_in.model_dump())
    if result.ok:
        gateway = GatewayReport(ok=True)
    else:
        gateway = GatewayReport(ok=False, operation=result.operation, reason=result.reason)
    return InvoiceCreated(**Invoice.model_validate(invoice).model_dump(), gateway=gateway)


@router.put("/{invoice_id}", response_model=Invoice)
async def update_invoice(
    invoice_id: int,
    invoice_in: InvoiceUpdate,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.update_invoice(invoice_id, invoice_in.model_dump(exclude_unset=True))
