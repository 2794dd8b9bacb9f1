"""Category routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.routes.dependencies import get_authenticated_identity, get_category_service
from app.schemas.auth import Identity
from app.schemas.category import CategoryEnvelope, CategoryList, CategoryRequest
from app.schemas.error import ErrorResponse, MessageResponse
from app.services.categories import CategoryService

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.get("", response_model=CategoryList)
async def list_categories(
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[CategoryService, Depends(get_category_service)],
) -> CategoryList:
    return CategoryList(categories=await service.list_categories(owner_id=identity.id))


@router.get("/{category_id}", response_model=CategoryEnvelope, responses={404: {"model": ErrorResponse}})
async def get_category(
    category_id: str,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[CategoryService, Depends(get_category_service)],
) -> CategoryEnvelope:
    return CategoryEnvelope(category=await service.get_category(owner_id=identity.id, category_id=category_id))


@router.post(
    "",
    response_model=CategoryEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_category(
    payload: CategoryRequest,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[CategoryService, Depends(get_category_service)],
) -> CategoryEnvelope:
    return CategoryEnvelope(category=await service.create_category(owner_id=identity.id, name=payload.name))


@router.put(
    "/{category_id}",
    response_model=CategoryEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def rename_category(
    category_id: str,
    payload: CategoryRequest,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[CategoryService, Depends(get_category_service)],
) -> CategoryEnvelope:
    category = await service.rename_category(owner_id=identity.id, category_id=category_id, name=payload.name)
    return CategoryEnvelope(category=category)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: str,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[CategoryService, Depends(get_category_service)],
) -> MessageResponse:
    await service.delete_category(owner_id=identity.id, category_id=category_id)
    return MessageResponse(message="Category deleted successfully")
