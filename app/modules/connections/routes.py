from fastapi import APIRouter, Depends, HTTPException, status
from app.core.dependencies import get_connection_service, get_current_user_id
from app.modules.auth.providers import PROVIDER_LABELS, ProviderName
from app.modules.connections.schemas import ConnectionListItem
from app.modules.connections.service import ConnectionService
from typing import List

router = APIRouter(prefix="/settings/profile/connections", tags=["connections"])


@router.get("", response_model=List[ConnectionListItem])
async def list_connections(
    user_id: str = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service),
):
    """List the current user's provider connections"""
    items = []
    for connection in service.list_for_user(user_id):
        try:
            label = PROVIDER_LABELS[ProviderName(connection.provider_name)]
        except ValueError:
            # Provider no longer supported; still show it so it can be removed
            label = connection.provider_name
        items.append(ConnectionListItem(
            id=connection.id,
            provider_name=connection.provider_name,
            provider_label=label,
            provider_id=connection.provider_id,
            created_at=connection.created_at,
        ))
    return items


@router.delete("/{connection_id}", status_code=204)
async def delete_connection(
    connection_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ConnectionService = Depends(get_connection_service),
):
    """Remove one of the current user's connections"""
    if not service.delete_for_user(connection_id, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Connection not found")
    return None
