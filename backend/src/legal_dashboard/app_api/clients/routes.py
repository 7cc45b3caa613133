"""Clients API routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from legal_dashboard.shared.auth import User, get_current_user

from .models import Client, CreateClientRequest, UpdateClientRequest
from .repository import ClientRepository, get_client_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_client(
    request: CreateClientRequest,
    current_user: User = Depends(get_current_user),
    repository: ClientRepository = Depends(get_client_repository),
):
    """
    Create a client owned by the current user.

    Raises:
        HTTPException: 400 if name or email is missing
    """
    logger.info(f"POST /clients - User: {current_user.user_id}")

    if not request.name or not request.email:
        raise HTTPException(status_code=400, detail="Name and email are required")

    try:
        client = Client.new(
            user_id=current_user.user_id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            address=request.address,
            status=request.status,
        )
        await repository.create(client)
        return client.to_dict()
    except Exception as e:
        logger.error(f"Error creating client: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create client")


@router.get("")
async def list_clients(
    current_user: User = Depends(get_current_user),
    repository: ClientRepository = Depends(get_client_repository),
):
    """List the current user's clients."""
    logger.info(f"GET /clients - User: {current_user.user_id}")

    try:
        clients = await repository.list_by_user(current_user.user_id)
        return [c.to_dict() for c in clients]
    except Exception as e:
        logger.error(f"Error listing clients: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve clients")


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    repository: ClientRepository = Depends(get_client_repository),
):
    logger.info(f"GET /clients/{client_id} - User: {current_user.user_id}")

    try:
        client = await repository.get_by_id(client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving client {client_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve client")


@router.put("/{client_id}")
async def update_client(
    client_id: str,
    request: UpdateClientRequest,
    current_user: User = Depends(get_current_user),
    repository: ClientRepository = Depends(get_client_repository),
):
    logger.info(f"PUT /clients/{client_id} - User: {current_user.user_id}")

    try:
        client = await repository.update(client_id, request.model_dump(exclude_unset=True))
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating client {client_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update client")


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    repository: ClientRepository = Depends(get_client_repository),
):
    logger.info(f"DELETE /clients/{client_id} - User: {current_user.user_id}")

    try:
        await repository.delete(client_id)
    except Exception as e:
        logger.error(f"Error deleting client {client_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete client")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
