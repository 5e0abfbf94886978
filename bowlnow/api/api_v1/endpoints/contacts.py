from typing import Any, List
from fastapi import APIRouter, Depends, Response, status

from ...deps import get_storage
from ....services.storage import Storage
from ....schemas.contact import Contact, ContactCreate, ContactUpdate

router = APIRouter()


@router.get("/{client_id}", response_model=List[Contact])
async def get_contacts(client_id: int, storage: Storage = Depends(get_storage)) -> Any:
    return await storage.get_contacts(client_id)


@router.post("", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def create_contact(contact_in: ContactCreate, storage: Storage = Depends(get_storage)) -> Any:
    return await storage.create_contact(contact_in.model_dump())


@router.put("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: int,
    contact_in: ContactUpdate,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.update_contact(contact_id, contact_in.model_dump(exclude_unset=True))


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(contact_id: int, storage: Storage = Depends(get_storage)) -> Response:
    await storage.delete_contact(contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
