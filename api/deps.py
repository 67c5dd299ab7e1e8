"""
Dependency injection for FastAPI routes.
"""

from typing import Annotated

from fastapi import Depends, Request

from catalog.query import QueryService


def get_query_service(request: Request) -> QueryService:
    """Get the shared query service created at startup."""
    return request.app.state.query_service


# Type aliases for dependency injection
QueryServiceDep = Annotated[QueryService, Depends(get_query_service)]
