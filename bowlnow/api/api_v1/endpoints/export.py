from fastapi import APIRouter, Depends, Response

from ...deps import get_storage
from ....services.storage import Storage
from ....services.csv_export import clients_csv, revenue_csv

router = APIRouter()


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/revenue")
async def export_revenue(storage: Storage = Depends(get_storage)) -> Response:
    return _csv_response(revenue_csv(await storage.get_revenue()), "revenue-report.csv")


@router.get("/clients")
async def export_clients(storage: Storage = Depends(get_storage)) -> Response:
    return _csv_response(clients_csv(await storage.get_clients()), "clients-report.csv")
