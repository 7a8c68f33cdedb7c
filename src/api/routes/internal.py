from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.users import InternalUser, LookupInternalUserUseCase
from src.depends import get_internal_service, get_unit_of_work
from src.domain.entities import InternalService

router = APIRouter(prefix="/internal/users", tags=["Internal"])

NOT_FOUND = {"RESOURCE_NOT_FOUND": status.HTTP_404_NOT_FOUND}


@router.get("/by-id/{user_id}", status_code=status.HTTP_200_OK, response_model=InternalUser)
async def get_internal_user_by_id(
    user_id: UUID,
    service: InternalService = Depends(get_internal_service),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Internal user lookup by ID (X-API-KEY required)

    Used by other platform services, e.g. to enrich courses with instructor data.
    """
    result = await LookupInternalUserUseCase(uow).by_id(user_id)

    if result.is_err():
        raise_for_error(result.error, NOT_FOUND)

    return result.value


@router.get("/by-username", status_code=status.HTTP_200_OK, response_model=InternalUser)
async def get_internal_user_by_username(
    username: str = Query(..., min_length=1),
    service: InternalService = Depends(get_internal_service),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Internal user lookup by username (X-API-KEY required)"""
    result = await LookupInternalUserUseCase(uow).by_username(username)

    if result.is_err():
        raise_for_error(result.error, NOT_FOUND)

    return result.value


@router.get("/by-email", status_code=status.HTTP_200_OK, response_model=InternalUser)
async def get_internal_user_by_email(
    email: str = Query(..., min_length=1),
    service: InternalService = Depends(get_internal_service),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Internal user lookup by email (X-API-KEY required)"""
    result = await LookupInternalUserUseCase(uow).by_email(email)

    if result.is_err():
        raise_for_error(result.error, NOT_FOUND)

    return result.value
