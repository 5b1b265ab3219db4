from fastapi import Request

from tasks_api.services.task_service import TaskService


def get_task_service(request: Request) -> TaskService:
    """Service instance built by create_app() and kept on app.state."""
    return request.app.state.task_service
