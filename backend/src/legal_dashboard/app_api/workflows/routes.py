"""Workflows API routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from legal_dashboard.shared.auth import User, get_current_user

from .models import CreateWorkflowRequest, UpdateWorkflowRequest, Workflow
from .repository import WorkflowRepository, get_workflow_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_workflow(
    request: CreateWorkflowRequest,
    current_user: User = Depends(get_current_user),
    repository: WorkflowRepository = Depends(get_workflow_repository),
):
    """
    Create a workflow for a package.

    Raises:
        HTTPException: 400 if packageId or name is missing
    """
    logger.info(f"POST /workflows - User: {current_user.user_id}")

    if not request.package_id or not request.name:
        raise HTTPException(status_code=400, detail="PackageId and name are required")

    try:
        workflow = Workflow.new(
            package_id=request.package_id,
            name=request.name,
            description=request.description,
            status=request.status,
            steps=request.steps,
            current_step=request.current_step,
        )
        await repository.create(workflow)
        return workflow.to_dict()
    except Exception as e:
        logger.error(f"Error creating workflow: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create workflow")


@router.get("/package/{package_id}")
async def list_workflows_for_package(
    package_id: str,
    current_user: User = Depends(get_current_user),
    repository: WorkflowRepository = Depends(get_workflow_repository),
):
    logger.info(f"GET /workflows/package/{package_id} - User: {current_user.user_id}")

    try:
        workflows = await repository.list_by_package(package_id)
        return [w.to_dict() for w in workflows]
    except Exception as e:
        logger.error(f"Error listing workflows for package {package_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve workflows")


@router.get("/{workflow_id}")
async def get_workflow(
    workflow_id: str,
    current_user: User = Depends(get_current_user),
    repository: WorkflowRepository = Depends(get_workflow_repository),
):
    logger.info(f"GET /workflows/{workflow_id} - User: {current_user.user_id}")

    try:
        workflow = await repository.get_by_id(workflow_id)
        if not workflow:
            raise HTTPException(status_code=404, detail="Workflow not found")
        return workflow.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving workflow {workflow_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve workflow")


@router.put("/{workflow_id}")
async def update_workflow(
    workflow_id: str,
    request: UpdateWorkflowRequest,
    current_user: User = Depends(get_current_user),
    repository: WorkflowRepository = Depends(get_workflow_repository),
):
    logger.info(f"PUT /workflows/{workflow_id} - User: {current_user.user_id}")

    try:
        updates = request.model_dump(by_alias=True, exclude_unset=True)
        workflow = await repository.update(workflow_id, updates)
        if not workflow:
            raise HTTPException(status_code=404, detail="Workflow not found")
        return workflow.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating workflow {workflow_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update workflow")


@router.delete("/{workflow_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workflow(
    workflow_id: str,
    current_user: User = Depends(get_current_user),
    repository: WorkflowRepository = Depends(get_workflow_repository),
):
    logger.info(f"DELETE /workflows/{workflow_id} - User: {current_user.user_id}")

    try:
        await repository.delete(workflow_id)
    except Exception as e:
        logger.error(f"Error deleting workflow {workflow_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete workflow")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
