"""FastAPI dependencies"""
from fastapi import Request

from counsy.services.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    """Service container created for this application at startup"""
    return request.app.state.container
