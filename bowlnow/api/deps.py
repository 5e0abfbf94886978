from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..services.storage import Storage
from ..services.stripe_service import StripeGateway, get_stripe_gateway
from ..services.invoice_service import InvoiceService


async def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    """Entity store bound to the request's session"""
    return Storage(db)


def get_gateway() -> StripeGateway:
    return get_stripe_gateway()


async def get_invoice_service(
    storage: Storage = Depends(get_storage),
    gateway: StripeGateway = Depends(get_gateway),
) -> InvoiceService:
    return InvoiceService(storage, gateway)
