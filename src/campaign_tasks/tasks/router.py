"""
Task submission API router.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from pydantic import BaseModel, ValidationError

from campaign_tasks.shared.exceptions import UnknownTaskError
from campaign_tasks.shared.logging import get_logger
from campaign_tasks.tasks.dispatcher import TaskDispatcher
from campaign_tasks.tasks.schemas import Tasks, parse_payload

logger = get_logger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class TaskAcceptedResponse(BaseModel):
    task: str
    status: str = "accepted"


def get_task_dispatcher(request: Request) -> TaskDispatcher:
    """Dependency for the process-wide task dispatcher."""
    return request.app.state.task_dispatcher


@router.get("")
async def list_tasks() -> dict[str, list[str]]:
    return {"tasks": [task.value for task in Tasks]}


@router.post(
    "/{task_name}",
    response_model=TaskAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        404: {"description": "Unknown task"},
        422: {"description": "Payload does not match the task"},
    },
)
async def submit_task(
    task_name: str,
    dispatcher: Annotated[TaskDispatcher, Depends(get_task_dispatcher)],
    payload: Annotated[dict[str, Any], Body()],
) -> TaskAcceptedResponse:
    """Submit a task for background execution.

    The payload is validated against the task's schema before the task is
    scheduled; the response does not wait for the task to finish.
    """
    try:
        model = parse_payload(task_name, payload)
    except UnknownTaskError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "UNKNOWN_TASK", "message": str(e)},
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={
                "code": "VALIDATION_ERROR",
                "message": "Task payload validation failed",
                "errors": [
                    {
                        "field": ".".join(str(loc) for loc in error["loc"]),
                        "message": error["msg"],
                        "type": error["type"],
                    }
                    for error in e.errors()
                ],
            },
        )

    dispatcher.submit(task_name, model)
    logger.info("Task submitted", extra={"task_name": task_name})
    return TaskAcceptedResponse(task=task_name)
