from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query, Response, status

from ...deps import get_storage
from ....services.storage import Storage
from ....schemas.client import Client, ClientCreate, ClientUpdate, ClientStatusUpdate

router = APIRouter()


@router.get("", response_model=List[Client])
async def get_clients(
    status: Optional[str] = None,
    storage: Storage = Depends(get_storage),
) -> Any:
    """List clients, newest first, optionally filtered by pipeline status"""
    return await storage.get_clients(status=status)


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_in: ClientCreate,
    default_status: Optional[str] = Query(None, alias="defaultStatus"),
    storage: Storage = Depends(get_storage),
) -> Any:
    """Create a client; ``defaultStatus`` applies when the body names no status"""
    return await storage.create_client(client_in.model_dump(), default_status=default_status)


@router.get("/{client_id}", response_model=Client)
async def get_client(
    client_id: int,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.require_client(client_id)


@router.put("/{client_id}", response_model=Client)
async def update_client(
    client_id: int,
    client_in: ClientUpdate,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.update_client(client_id, client_in.model_dump(exclude_unset=True))


@router.put("/{client_id}/status", response_model=Client)
async def update_client_status(
    client_id: int,
    status_in: ClientStatusUpdate,
    storage: Storage = Depends(get_storage),
) -> Any:
    """Pipeline move (drag and drop on the status board)"""
    return await storage.update_client_status(client_id, status_in.status)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    policy: Optional[str] = Query(None, description="orphan or cascade; defaults to CLIENT_DELETE_POLICY"),
    storage: Storage = Depends(get_storage),
) -> Response:
    await storage.delete_client(client_id, policy=policy)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
