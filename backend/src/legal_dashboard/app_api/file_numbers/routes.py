"""File numbers API routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from legal_dashboard.shared.auth import User, get_current_user

from .models import CreateFileNumberRequest, FileNumber, UpdateFileNumberRequest
from .repository import FileNumberRepository, get_file_number_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/file-numbers", tags=["file-numbers"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_file_number(
    request: CreateFileNumberRequest,
    current_user: User = Depends(get_current_user),
    repository: FileNumberRepository = Depends(get_file_number_repository),
):
    """
    Create a file number under a package or a client.

    Raises:
        HTTPException: 400 if fileNumber is missing or neither packageId nor clientId is given
    """
    logger.info(f"POST /file-numbers - User: {current_user.user_id}")

    if (not request.package_id and not request.client_id) or not request.file_number:
        raise HTTPException(
            status_code=400,
            detail="PackageId or clientId, and fileNumber are required"
        )

    try:
        file_number = FileNumber.new(
            file_number=request.file_number,
            package_id=request.package_id,
            client_id=request.client_id,
            description=request.description,
            status=request.status,
        )
        await repository.create(file_number)
        return file_number.to_dict()
    except Exception as e:
        logger.error(f"Error creating file number: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create file number")


@router.get("/client/{client_id}")
async def list_file_numbers_for_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    repository: FileNumberRepository = Depends(get_file_number_repository),
):
    logger.info(f"GET /file-numbers/client/{client_id} - User: {current_user.user_id}")

    try:
        file_numbers = await repository.list_by_client(client_id)
        return [f.to_dict() for f in file_numbers]
    except Exception as e:
        logger.error(f"Error listing file numbers for client {client_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve file numbers")


@router.get("/package/{package_id}")
async def list_file_numbers_for_package(
    package_id: str,
    current_user: User = Depends(get_current_user),
    repository: FileNumberRepository = Depends(get_file_number_repository),
):
    logger.info(f"GET /file-numbers/package/{package_id} - User: {current_user.user_id}")

    try:
        file_numbers = await repository.list_by_package(package_id)
        return [f.to_dict() for f in file_numbers]
    except Exception as e:
        logger.error(f"Error listing file numbers for package {package_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve file numbers")


@router.get("/{file_id}")
async def get_file_number(
    file_id: str,
    current_user: User = Depends(get_current_user),
    repository: FileNumberRepository = Depends(get_file_number_repository),
):
    logger.info(f"GET /file-numbers/{file_id} - User: {current_user.user_id}")

    try:
        file_number = await repository.get_by_id(file_id)
        if not file_number:
            raise HTTPException(status_code=404, detail="File number not found")
        return file_number.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving file number {file_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve file number")


@router.put("/{file_id}")
async def update_file_number(
    file_id: str,
    request: UpdateFileNumberRequest,
    current_user: User = Depends(get_current_user),
    repository: FileNumberRepository = Depends(get_file_number_repository),
):
    logger.info(f"PUT /file-numbers/{file_id} - User: {current_user.user_id}")

    try:
        updates = request.model_dump(by_alias=True, exclude_unset=True)
        file_number = await repository.update(file_id, updates)
        if not file_number:
            raise HTTPException(status_code=404, detail="File number not found")
        return file_number.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating file number {file_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update file number")


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file_number(
    file_id: str,
    current_user: User = Depends(get_current_user),
    repository: FileNumberRepository = Depends(get_file_number_repository),
):
    logger.info(f"DELETE /file-numbers/{file_id} - User: {current_user.user_id}")

    try:
        await repository.delete(file_id)
    except Exception as e:
        logger.error(f"Error deleting file number {file_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete file number")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
