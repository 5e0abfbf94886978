"""
Async HTTP client for the BowlNow API.

Responses are returned as the decoded camelCase JSON the server emits; a
non-2xx response raises ``ApiError`` carrying the server's message.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


class BowlNowClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the /api routes"""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "BowlNowClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self._client.request(method, f"/api{path}", **kwargs)
        if response.is_success:
            return response

        message = response.reason_phrase or "Request failed"
        errors = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or message
            errors = body.get("errors")
        logger.warning(f"{method} {path} failed with {response.status_code}: {message}")
        raise ApiError(response.status_code, message, errors)

    async def _json(self, method: str, path: str, **kwargs) -> Any:
        response = await self._request(method, path, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Clients
    async def list_clients(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else None
        return await self._json("GET", "/clients", params=params)

    async def get_client(self, client_id: int) -> Dict[str, Any]:
        return await self._json("GET", f"/clients/{client_id}")

    async def create_client(self, data: Dict[str, Any], default_status: Optional[str] = None) -> Dict[str, Any]:
        params = {"defaultStatus": default_status} if default_status else None
        return await self._json("POST", "/clients", json=data, params=params)

    async def update_client(self, client_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("PUT", f"/clients/{client_id}", json=data)

    async def update_client_status(self, client_id: int, status: str) -> Dict[str, Any]:
        return await self._json("PUT", f"/clients/{client_id}/status", json={"status": status})

    async def delete_client(self, client_id: int, policy: Optional[str] = None) -> None:
        params = {"policy": policy} if policy else None
        await self._json("DELETE", f"/clients/{client_id}", params=params)

    # Boost clients
    async def list_boost_clients(self) -> List[Dict[str, Any]]:
        return await self._json("GET", "/boost-clients")

    async def get_boost_client(self, client_id: int) -> Dict[str, Any]:
        return await self._json("GET", f"/boost-clients/{client_id}")

    async def create_boost_client(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("POST", "/boost-clients", json=data)

    async def update_boost_client(self, client_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("PUT", f"/boost-clients/{client_id}", json=data)

    # Revenue
    async def list_revenue(self) -> List[Dict[str, Any]]:
        return await self._json("GET", "/revenue")

    async def revenue_metrics(self, source: str = "ledger") -> Dict[str, Any]:
        return await self._json("GET", "/revenue/metrics", params={"source": source})

    async def create_revenue(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("POST", "/revenue", json=data)

    # Invoices
    async def list_invoices(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else None
        return await self._json("GET", "/invoices", params=params)

    async def create_invoice(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("POST", "/invoices", json=data)

    async def update_invoice(self, invoice_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("PUT", f"/invoices/{invoice_id}", json=data)

    async def sync_invoices(self) -> Dict[str, Any]:
        return await self._json("POST", "/stripe/sync-invoices")

    # Onboarding
    async def list_onboarding_forms(self) -> List[Dict[str, Any]]:
        return await self._json("GET", "/onboarding")

    async def create_onboarding_form(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("POST", "/onboarding", json=data)

    async def update_onboarding_form(self, form_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("PUT", f"/onboarding/{form_id}", json=data)

    # Contacts
    async def list_contacts(self, client_id: int) -> List[Dict[str, Any]]:
        return await self._json("GET", f"/contacts/{client_id}")

    async def create_contact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("POST", "/contacts", json=data)

    async def delete_contact(self, contact_id: int) -> None:
        await self._json("DELETE", f"/contacts/{contact_id}")

    # Dashboard and exports
    async def dashboard_metrics(self) -> Dict[str, Any]:
        return await self._json("GET", "/dashboard/metrics")

    async def export_csv(self, report: str) -> str:
        """``report`` is ``clients`` or ``revenue``"""
        response = await self._request("GET", f"/export/{report}")
        return response.text
