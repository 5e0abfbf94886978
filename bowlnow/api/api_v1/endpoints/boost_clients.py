from typing import Any, List
from fastapi import APIRouter, Depends, status

from ...deps import get_storage
from ....core.exceptions import NotFoundError
from ....services.storage import Storage
from ....schemas.boost_client import BoostClient, BoostClientCreate, BoostClientUpdate, BoostClientWithClient

router = APIRouter()


@router.get("", response_model=List[BoostClientWithClient])
async def get_boost_clients(storage: Storage = Depends(get_storage)) -> Any:
    return await storage.get_boost_clients()


@router.post("", response_model=BoostClient, status_code=status.HTTP_201_CREATED)
async def create_boost_client(
    boost_in: BoostClientCreate,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.create_boost_client(boost_in.model_dump(exclude_unset=True))


@router.get("/{client_id}", response_model=BoostClient)
async def get_boost_client(client_id: int, storage: Storage = Depends(get_storage)) -> Any:
    boost_client = await storage.get_boost_client(client_id)
    if boost_client is None:
        raise NotFoundError("Boost client", client_id)
    return boost_client


@router.put("/{client_id}", response_model=BoostClient)
async def update_boost_client(
    client_id: int,
    boost_in: BoostClientUpdate,
    storage: Storage = Depends(get_storage),
) -> Any:
    """Update milestones; progress is recomputed from the flags"""
    return await storage.update_boost_client(client_id, boost_in.model_dump(exclude_unset=True))
