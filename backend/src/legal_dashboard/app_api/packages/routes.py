"""Packages API routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from legal_dashboard.shared.auth import User, get_current_user

from .models import CreatePackageRequest, Package, UpdatePackageRequest
from .repository import PackageRepository, get_package_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/packages", tags=["packages"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_package(
    request: CreatePackageRequest,
    current_user: User = Depends(get_current_user),
    repository: PackageRepository = Depends(get_package_repository),
):
    """
    Create a package for a client.

    Raises:
        HTTPException: 400 if clientId or name is missing
    """
    logger.info(f"POST /packages - User: {current_user.user_id}")

    if not request.client_id or not request.name:
        raise HTTPException(status_code=400, detail="ClientId and name are required")

    try:
        package = Package.new(
            client_id=request.client_id,
            name=request.name,
            file_number_id=request.file_number_id,
            description=request.description,
            recipient=request.recipient,
            type=request.type,
            status=request.status,
            documents=request.documents,
        )
        await repository.create(package)
        return package.to_dict()
    except Exception as e:
        logger.error(f"Error creating package: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create package")


@router.get("/client/{client_id}")
async def list_packages_for_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    repository: PackageRepository = Depends(get_package_repository),
):
    logger.info(f"GET /packages/client/{client_id} - User: {current_user.user_id}")

    try:
        packages = await repository.list_by_client(client_id)
        return [p.to_dict() for p in packages]
    except Exception as e:
        logger.error(f"Error listing packages for client {client_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve packages")


@router.get("/file-number/{file_number_id}")
async def list_packages_for_file_number(
    file_number_id: str,
    current_user: User = Depends(get_current_user),
    repository: PackageRepository = Depends(get_package_repository),
):
    logger.info(f"GET /packages/file-number/{file_number_id} - User: {current_user.user_id}")

    try:
        packages = await repository.list_by_file_number(file_number_id)
        return [p.to_dict() for p in packages]
    except Exception as e:
        logger.error(f"Error listing packages for file number {file_number_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve packages")


@router.get("/{package_id}")
async def get_package(
    package_id: str,
    current_user: User = Depends(get_current_user),
    repository: PackageRepository = Depends(get_package_repository),
):
    logger.info(f"GET /packages/{package_id} - User: {current_user.user_id}")

    try:
        package = await repository.get_by_id(package_id)
        if not package:
            raise HTTPException(status_code=404, detail="Package not found")
        return package.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving package {package_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve package")


@router.put("/{package_id}")
async def update_package(
    package_id: str,
    request: UpdatePackageRequest,
    current_user: User = Depends(get_current_user),
    repository: PackageRepository = Depends(get_package_repository),
):
    logger.info(f"PUT /packages/{package_id} - User: {current_user.user_id}")

    try:
        updates = request.model_dump(by_alias=True, exclude_unset=True)
        package = await repository.update(package_id, updates)
        if not package:
            raise HTTPException(status_code=404, detail="Package not found")
        return package.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating package {package_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update package")


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(
    package_id: str,
    current_user: User = Depends(get_current_user),
    repository: PackageRepository = Depends(get_package_repository),
):
    logger.info(f"DELETE /packages/{package_id} - User: {current_user.user_id}")

    try:
        await repository.delete(package_id)
    except Exception as e:
        logger.error(f"Error deleting package {package_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete package")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
