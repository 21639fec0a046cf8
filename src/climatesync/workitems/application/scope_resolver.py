"""
Scope Resolver - project scope first, collection scope as fallback.

Some resources (custom field definitions in particular) may be defined at the
project level or at the collection level. Both scopes are queried
concurrently and the resolver always waits for both; a successful project
response wins, otherwise the collection response is returned as-is.
"""

import asyncio
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from climatesync.shared.infrastructure.logging import get_logger
from climatesync.workitems.infrastructure.transport import HttpTransport, TransportResponse

logger = get_logger(__name__)

ScopeResult = Union[TransportResponse, BaseException]


@dataclass
class ScopeOutcome:
    """What each scope produced for one request: a response or the raised error."""

    project: ScopeResult
    collection: ScopeResult

    def __iter__(self) -> Iterator[ScopeResult]:
        yield self.project
        yield self.collection

    def first_success(self) -> Optional[TransportResponse]:
        for result in self:
            if isinstance(result, TransportResponse) and result.is_success:
                return result
        return None


class ScopeResolver:
    """Precedence-based resolution across the project and collection scopes."""

    def __init__(self, project: HttpTransport, collection: HttpTransport):
        self.project = project
        self.collection = collection

    async def get(self, path: str) -> TransportResponse:
        return await self.request("GET", path)

    async def outcome(self, method: str, path: str) -> ScopeOutcome:
        """Issue `method path` against both scopes and keep both results."""
        project_result, collection_result = await asyncio.gather(
            self.project.request(method, path),
            self.collection.request(method, path),
            return_exceptions=True,
        )
        return ScopeOutcome(project=project_result, collection=collection_result)

    async def request(self, method: str, path: str) -> TransportResponse:
        """
        Issue `method path` against both scopes and pick by precedence.

        Raises:
            TransportError: When the project scope did not succeed and the
                collection request failed without producing a response
        """
        outcome = await self.outcome(method, path)
        project_result, collection_result = outcome.project, outcome.collection

        if isinstance(project_result, TransportResponse) and project_result.is_success:
            logger.debug("scope_resolved", scope="project", path=path)
            return project_result

        if isinstance(project_result, BaseException):
            logger.debug(
                "project_scope_failed",
                path=path,
                error=str(project_result),
                error_type=type(project_result).__name__,
            )

        if isinstance(collection_result, BaseException):
            raise collection_result

        logger.debug(
            "scope_resolved",
            scope="collection",
            path=path,
            status_code=collection_result.status_code,
        )
        return collection_result
