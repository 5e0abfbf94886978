from .client import Client, ClientStatus, ClientType
from .boost_client import BoostClient
from .invoice import Invoice, InvoiceStatus, InvoiceFrequency
from .onboarding_form import OnboardingForm
from .contact import Contact
from .revenue import Revenue

__all__ = [
    "Client", "ClientStatus", "ClientType", "BoostClient", "Invoice", "InvoiceStatus",
    "InvoiceFrequency", "OnboardingForm", "Contact", "Revenue",
]
