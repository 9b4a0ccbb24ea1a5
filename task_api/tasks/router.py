from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from task_api.auth.dependencies import get_current_user
from task_api.auth.exceptions import auth_error_responses
from task_api.auth.schemas import Claims
from task_api.cache.dependencies import build_cache_key
from task_api.common.exceptions import (
    ResourceType,
    resource_not_found_response,
    validation_failed_response,
)
from task_api.tasks.dependencies import TASKS_ROUTE_PREFIX, get_task_service
from task_api.tasks.schemas import (
    CreateTaskRequest,
    DeleteTaskResponse,
    TaskDetail,
    TaskListResponse,
    UpdateTaskRequest,
)
from task_api.tasks.service import TaskService


router = APIRouter(
    prefix=TASKS_ROUTE_PREFIX,
    tags=["Tasks"],
    dependencies=[Depends(get_current_user)],
    responses={**auth_error_responses},
)


@router.get(
    "",
    response_model=TaskListResponse,
    responses={**validation_failed_response("Invalid due_date_after")},
)
def list_tasks(
    request: Request,
    claims: Claims = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    payload = task_service.list_tasks(
        claims, build_cache_key(claims.sub, request), request.query_params
    )
    return JSONResponse(content=payload)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={**validation_failed_response("Title is required")},
)
def create_task(
    task_input: CreateTaskRequest,
    claims: Claims = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> TaskDetail:
    return task_service.create_task(claims, task_input)


@router.get(
    "/{task_id}",
    response_model=TaskDetail,
    responses={**resource_not_found_response(ResourceType.TASK)},
)
def get_task(
    task_id: str,
    request: Request,
    claims: Claims = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    payload = task_service.get_task(
        claims, build_cache_key(claims.sub, request), task_id
    )
    return JSONResponse(content=payload)


@router.put(
    "/{task_id}",
    responses={
        **resource_not_found_response(ResourceType.TASK),
        **validation_failed_response("Invalid status"),
    },
)
def update_task(
    task_id: str,
    task_input: UpdateTaskRequest,
    claims: Claims = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> TaskDetail:
    return task_service.update_task(claims, task_id, task_input)


@router.delete(
    "/{task_id}",
    responses={**resource_not_found_response(ResourceType.TASK)},
)
def delete_task(
    task_id: str,
    claims: Claims = Depends(get_current_user),
    task_service: TaskService = Depends(get_task_service),
) -> DeleteTaskResponse:
    return task_service.delete_task(claims, task_id)
