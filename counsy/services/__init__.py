"""
Service layer for counsy

Services hold the application's use cases and receive their collaborators
(database, completion client, other services) through ServiceContainer.
"""

from counsy.services.container import ServiceContainer, build_container

__all__ = [
    "ServiceContainer",
    "build_container",
]
