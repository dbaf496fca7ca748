"""Endpoint Management — declare, list, update and delete dynamic endpoints.

Invariants:
    - POST answers 201 for a new endpoint, 200 when the id already existed
    - PUT / DELETE answer 404 for an unknown id
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.config import Settings, get_settings
from mockapi.core.domain_types import EndpointId
from mockapi.infrastructure.database import get_db
from mockapi.infrastructure.identifiers import IdGenerator, get_id_generator
from mockapi.schemas.endpoint import EndpointCreate, EndpointUpdate
from mockapi.services.endpoint_registry import EndpointRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix=f"{get_settings().api_prefix}/endpoints", tags=["endpoints"])


def _registry(
    db: AsyncSession = Depends(get_db),
    ids: IdGenerator = Depends(get_id_generator),
    settings: Settings = Depends(get_settings),
) -> EndpointRegistry:
    return EndpointRegistry(db, ids, settings.request_log_limit)


@router.get("")
async def list_endpoints(registry: EndpointRegistry = Depends(_registry)):
    """All endpoints with schema, records and recent request logs."""
    return await registry.list_endpoints()


@router.post("")
async def create_endpoint(
    body: EndpointCreate, registry: EndpointRegistry = Depends(_registry),
):
    """Declare an endpoint; idempotent on an existing id."""
    payload, created = await registry.create_endpoint(body)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=payload,
    )


@router.put("/{endpoint_id}")
async def update_endpoint(
    endpoint_id: str,
    body: EndpointUpdate,
    registry: EndpointRegistry = Depends(_registry),
):
    """Update name/path/method/fields and optionally the table link."""
    return await registry.update_endpoint(EndpointId(endpoint_id), body)


@router.delete("/{endpoint_id}")
async def delete_endpoint(
    endpoint_id: str, registry: EndpointRegistry = Depends(_registry),
):
    """Delete an endpoint with its records, logs and table links."""
    return await registry.delete_endpoint(EndpointId(endpoint_id))
