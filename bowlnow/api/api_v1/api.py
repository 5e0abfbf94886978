from fastapi import APIRouter

from .endpoints import (
    clients, boost_clients, revenue, invoices, onboarding, contacts, export, dashboard, stripe
)

api_router = APIRouter()

api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(boost_clients.router, prefix="/boost-clients", tags=["boost-clients"])
api_router.include_router(revenue.router, prefix="/revenue", tags=["revenue"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(onboarding.router, prefix="/onboarding", tags=["onboarding"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
api_router.include_router(export.router, prefix="/export", tags=["export"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(stripe.router, prefix="/stripe", tags=["stripe"])
