from typing import Any, List
from fastapi import APIRouter, Depends, status

from ...deps import get_storage
from ....core.exceptions import NotFoundError
from ....services.storage import Storage
from ....schemas.onboarding import (
    OnboardingForm, OnboardingFormCreate, OnboardingFormUpdate, OnboardingFormWithClient
)

router = APIRouter()


def _form_data(form_in) -> dict:
    data = form_in.model_dump(exclude_unset=True)
    if data.get("additional_contacts") is not None:
        data["additional_contacts"] = [dict(c) for c in data["additional_contacts"]]
    return data


@router.get("", response_model=List[OnboardingFormWithClient])
async def get_onboarding_forms(storage: Storage = Depends(get_storage)) -> Any:
    return await storage.get_onboarding_forms()


@router.get("/{form_id}", response_model=OnboardingForm)
async def get_onboarding_form(form_id: int, storage: Storage = Depends(get_storage)) -> Any:
    form = await storage.get_onboarding_form(form_id)
    if form is None:
        raise NotFoundError("Onboarding form", form_id)
    return form


@router.post("", response_model=OnboardingForm, status_code=status.HTTP_201_CREATED)
async def create_onboarding_form(
    form_in: OnboardingFormCreate,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.create_onboarding_form(_form_data(form_in))


@router.put("/{form_id}", response_model=OnboardingForm)
async def update_onboarding_form(
    form_id: int,
    form_in: OnboardingFormUpdate,
    storage: Storage = Depends(get_storage),
) -> Any:
    """Auto-save and final submit both land here; ``isCompleted`` forces 100%"""
    return await storage.update_onboarding_form(form_id, _form_data(form_in))
