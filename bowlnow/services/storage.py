"""
Entity store for clients and the records they own.

Every write that touches a client's status or service package goes through
the status pipeline validators, and every write to a progress-tracked record
recomputes its stored percentage.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, case, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..core.exceptions import NotFoundError, ValidationError
from ..models.client import Client, ClientStatus
from ..models.boost_client import BoostClient, MILESTONES
from ..models.invoice import Invoice
from ..models.onboarding_form import OnboardingForm
from ..models.contact import Contact
from ..models.revenue import Revenue
from .progress import boost_progress, onboarding_progress
from .revenue import ledger_revenue_metrics
from .status_pipeline import validate_status, validate_client_type, initial_status, apply_transition

logger = logging.getLogger(__name__)

CLIENT_CHILD_MODELS = (BoostClient, Invoice, Contact, Revenue, OnboardingForm)


class Storage:
    """Async CRUD over one database session; the caller owns commit/rollback"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------
    async def get_clients(self, status: Optional[str] = None) -> List[Client]:
        query = select(Client)
        if status:
            query = query.where(Client.status == status)
        query = query.order_by(Client.created_at.desc(), Client.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_client(self, client_id: int) -> Optional[Client]:
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def require_client(self, client_id: int) -> Client:
        client = await self.get_client(client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    async def get_clients_by_email(self, email: str) -> List[Client]:
        result = await self.db.execute(select(Client).where(Client.email == email).order_by(Client.id))
        return list(result.scalars().all())

    async def create_client(self, data: Dict[str, Any], default_status: Optional[str] = None) -> Client:
        data = dict(data)
        status = data.pop("status", None)
        client_status = validate_status(status) if status is not None else initial_status(default_status)
        client_type = validate_client_type(data.pop("client_type", None))

        client = Client(
            **data,
            status=client_status.value,
            client_type=client_type.value if client_type else None,
        )
        self.db.add(client)
        await self.db.flush()

        await self._ensure_boost_tracking(client)
        logger.info(f"Created client {client.id} ({client.business_name}) as {client.status}")
        return client

    async def update_client(self, client_id: int, data: Dict[str, Any]) -> Client:
        client = await self.require_client(client_id)
        data = dict(data)
        if "status" in data:
            data["status"] = validate_status(data["status"]).value
        if "client_type" in data:
            client_type = validate_client_type(data["client_type"])
            data["client_type"] = client_type.value if client_type else None
        for field in ("business_name", "contact_name", "email"):
            if field in data and not (data[field] or "").strip():
                raise ValidationError.for_field(field, "Required field cannot be empty")

        for field, value in data.items():
            setattr(client, field, value)
        await self.db.flush()

        await self._ensure_boost_tracking(client)
        return client

    async def update_client_status(self, client_id: int, status: Any) -> Client:
        validate_status(status)
        client = await self.require_client(client_id)
        previous = client.status
        apply_transition(client, status)
        await self.db.flush()
        logger.info(f"Client {client_id} moved {previous} -> {client.status}")
        return client

    async def delete_client(self, client_id: int, policy: Optional[str] = None) -> None:
        """Delete a client and apply the child-record policy.

        ``orphan`` keeps child rows and detaches them (client_id set to NULL);
        ``cascade`` deletes them together with the client.
        """
        policy = policy or settings.CLIENT_DELETE_POLICY
        if policy not in ("orphan", "cascade"):
            raise ValidationError.for_field("policy", "Delete policy must be 'orphan' or 'cascade'", value=policy)

        await self.require_client(client_id)
        for model in CLIENT_CHILD_MODELS:
            if policy == "cascade":
                await self.db.execute(delete(model).where(model.client_id == client_id))
            else:
                await self.db.execute(
                    update(model).where(model.client_id == client_id).values(client_id=None)
                )
        await self.db.execute(delete(Client).where(Client.id == client_id))
        await self.db.flush()
        logger.info(f"Deleted client {client_id} (children: {policy})")

    async def _ensure_boost_tracking(self, client: Client) -> None:
        """Full-service clients always have a boost progress record"""
        if not client.is_full_service:
            return
        existing = await self.get_boost_client(client.id)
        if existing is None:
            self.db.add(BoostClient(client_id=client.id, progress_percentage=0))
            await self.db.flush()
            logger.info(f"Started boost tracking for client {client.id}")

    # ------------------------------------------------------------------
    # Boost clients
    # ------------------------------------------------------------------
    async def get_boost_clients(self) -> List[BoostClient]:
        result = await self.db.execute(
            select(BoostClient)
            .join(Client, BoostClient.client_id == Client.id)
            .options(selectinload(BoostClient.client))
            .order_by(BoostClient.created_at.desc(), BoostClient.id.desc())
        )
        boost_clients = list(result.scalars().all())
        for boost_client in boost_clients:
            boost_client.progress_percentage = boost_progress(boost_client)
        return boost_clients

    async def get_boost_client(self, client_id: int) -> Optional[BoostClient]:
        result = await self.db.execute(select(BoostClient).where(BoostClient.client_id == client_id))
        boost_client = result.scalar_one_or_none()
        if boost_client is not None:
            boost_client.progress_percentage = boost_progress(boost_client)
        return boost_client

    async def create_boost_client(self, data: Dict[str, Any]) -> BoostClient:
        data = dict(data)
        client_id = data.get("client_id")
        await self.require_client(client_id)
        if await self.get_boost_client(client_id) is not None:
            raise ValidationError.for_field("clientId", "Client already has boost tracking", value=client_id)

        boost_client = BoostClient(**data)
        self._stamp_milestone_dates(boost_client, data)
        boost_client.progress_percentage = boost_progress(boost_client)
        self.db.add(boost_client)
        await self.db.flush()
        return boost_client

    async def update_boost_client(self, client_id: int, data: Dict[str, Any]) -> BoostClient:
        boost_client = await self.get_boost_client(client_id)
        if boost_client is None:
            raise NotFoundError("Boost client", client_id)

        for field, value in data.items():
            setattr(boost_client, field, value)
        self._stamp_milestone_dates(boost_client, data)
        boost_client.progress_percentage = boost_progress(boost_client)
        await self.db.flush()
        return boost_client

    @staticmethod
    def _stamp_milestone_dates(boost_client: BoostClient, data: Dict[str, Any]) -> None:
        now = datetime.utcnow()
        for flag, date_field in MILESTONES:
            if data.get(flag) and getattr(boost_client, date_field) is None:
                setattr(boost_client, date_field, now)

    # ------------------------------------------------------------------
    # Revenue ledger
    # ------------------------------------------------------------------
    async def get_revenue(self) -> List[Revenue]:
        result = await self.db.execute(
            select(Revenue)
            .join(Client, Revenue.client_id == Client.id)
            .options(selectinload(Revenue.client))
            .order_by(Revenue.created_at.desc(), Revenue.id.desc())
        )
        return list(result.scalars().all())

    async def get_revenue_by_client(self, client_id: int) -> List[Revenue]:
        result = await self.db.execute(
            select(Revenue).where(Revenue.client_id == client_id).order_by(Revenue.start_date.desc())
        )
        return list(result.scalars().all())

    async def create_revenue(self, data: Dict[str, Any]) -> Revenue:
        await self.require_client(data.get("client_id"))
        revenue = Revenue(**data)
        self.db.add(revenue)
        await self.db.flush()
        return revenue

    async def update_revenue(self, revenue_id: int, data: Dict[str, Any]) -> Revenue:
        result = await self.db.execute(select(Revenue).where(Revenue.id == revenue_id))
        revenue = result.scalar_one_or_none()
        if revenue is None:
            raise NotFoundError("Revenue entry", revenue_id)
        for field, value in data.items():
            setattr(revenue, field, value)
        await self.db.flush()
        return revenue

    async def get_revenue_metrics(self) -> Dict[str, float]:
        return await ledger_revenue_metrics(self.db)

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------
    async def get_invoices(self, status: Optional[str] = None) -> List[Invoice]:
        query = (
            select(Invoice)
            .join(Client, Invoice.client_id == Client.id)
            .options(selectinload(Invoice.client))
        )
        if status:
            query = query.where(Invoice.status == status)
        query = query.order_by(Invoice.created_at.desc(), Invoice.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_all_invoices(self) -> List[Invoice]:
        """Every invoice, including ones detached from a deleted client"""
        result = await self.db.execute(select(Invoice).order_by(Invoice.id))
        return list(result.scalars().all())

    async def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        result = await self.db.execute(select(Invoice).where(Invoice.id == invoice_id))
        return result.scalar_one_or_none()

    async def get_invoice_by_number(self, invoice_number: str) -> Optional[Invoice]:
        result = await self.db.execute(select(Invoice).where(Invoice.invoice_number == invoice_number))
        return result.scalar_one_or_none()

    async def get_invoice_by_stripe_id(self, stripe_invoice_id: str) -> Optional[Invoice]:
        result = await self.db.execute(select(Invoice).where(Invoice.stripe_invoice_id == stripe_invoice_id))
        return result.scalar_one_or_none()

    async def get_invoice_numbers(self, prefix: str) -> List[str]:
        result = await self.db.execute(
            select(Invoice.invoice_number).where(Invoice.invoice_number.like(f"{prefix}%"))
        )
        return [row[0] for row in result.all()]

    async def create_invoice(self, data: Dict[str, Any]) -> Invoice:
        invoice = Invoice(**data)
        self.db.add(invoice)
        await self.db.flush()
        return invoice

    async def update_invoice(self, invoice_id: int, data: Dict[str, Any]) -> Invoice:
        invoice = await self.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        data = dict(data)
        # Invoice numbers are immutable once issued
        data.pop("invoice_number", None)
        for field, value in data.items():
            setattr(invoice, field, value)
        await self.db.flush()
        return invoice

    # ------------------------------------------------------------------
    # Onboarding forms
    # ------------------------------------------------------------------
    async def get_onboarding_forms(self) -> List[OnboardingForm]:
        result = await self.db.execute(
            select(OnboardingForm)
            .outerjoin(Client, OnboardingForm.client_id == Client.id)
            .options(selectinload(OnboardingForm.client))
            .order_by(OnboardingForm.created_at.desc(), OnboardingForm.id.desc())
        )
        return list(result.scalars().all())

    async def get_onboarding_form(self, form_id: int) -> Optional[OnboardingForm]:
        result = await self.db.execute(select(OnboardingForm).where(OnboardingForm.id == form_id))
        return result.scalar_one_or_none()

    async def create_onboarding_form(self, data: Dict[str, Any]) -> OnboardingForm:
        data = dict(data)
        if data.get("client_id") is not None:
            await self.require_client(data["client_id"])
        form = OnboardingForm(**data)
        form.completion_progress = self._form_progress(form)
        self.db.add(form)
        await self.db.flush()
        return form

    async def update_onboarding_form(self, form_id: int, data: Dict[str, Any]) -> OnboardingForm:
        form = await self.get_onboarding_form(form_id)
        if form is None:
            raise NotFoundError("Onboarding form", form_id)
        data = dict(data)
        if data.get("client_id") is not None:
            await self.require_client(data["client_id"])
        for field, value in data.items():
            setattr(form, field, value)
        form.completion_progress = self._form_progress(form)
        await self.db.flush()
        return form

    @staticmethod
    def _form_progress(form: OnboardingForm) -> int:
        # Final submission marks the form complete regardless of optional fields
        if form.is_completed:
            return 100
        return onboarding_progress({c.name: getattr(form, c.name) for c in OnboardingForm.__table__.columns})

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------
    async def get_contacts(self, client_id: int) -> List[Contact]:
        result = await self.db.execute(
            select(Contact).where(Contact.client_id == client_id).order_by(Contact.is_primary.desc(), Contact.id)
        )
        return list(result.scalars().all())

    async def create_contact(self, data: Dict[str, Any]) -> Contact:
        await self.require_client(data.get("client_id"))
        contact = Contact(**data)
        self.db.add(contact)
        await self.db.flush()
        return contact

    async def update_contact(self, contact_id: int, data: Dict[str, Any]) -> Contact:
        result = await self.db.execute(select(Contact).where(Contact.id == contact_id))
        contact = result.scalar_one_or_none()
        if contact is None:
            raise NotFoundError("Contact", contact_id)
        for field, value in data.items():
            setattr(contact, field, value)
        await self.db.flush()
        return contact

    async def delete_contact(self, contact_id: int) -> None:
        result = await self.db.execute(delete(Contact).where(Contact.id == contact_id))
        if result.rowcount == 0:
            raise NotFoundError("Contact", contact_id)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------
    async def get_dashboard_metrics(self) -> Dict[str, Any]:
        result = await self.db.execute(
            select(
                func.count(Client.id).label("total_clients"),
                func.coalesce(func.sum(case((Client.status == ClientStatus.ACTIVE.value, 1), else_=0)), 0).label("active_clients"),
                func.coalesce(func.sum(case((Client.status == ClientStatus.PROSPECT.value, 1), else_=0)), 0).label("prospects"),
                func.coalesce(func.sum(case((Client.status == ClientStatus.PAST_DUE.value, 1), else_=0)), 0).label("overdue"),
            )
        )
        stats = result.first()
        ledger = await self.get_revenue_metrics()
        return {
            "total_clients": int(stats.total_clients or 0),
            "active_clients": int(stats.active_clients or 0),
            "prospects": int(stats.prospects or 0),
            "overdue": int(stats.overdue or 0),
            "total_mrr": ledger["total_mrr"],
        }
