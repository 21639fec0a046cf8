"""
Work Item Synchronizer.

WorkItemClient exposes create/update/get/query and field operations against
the work-tracking REST API. Every public operation runs inside a correlated
operation boundary that logs and swallows failures (returning None), so one
bad issue never aborts a batch. field_ensure is the exception: it must tell
"field does not exist" apart from "transport failed", so it propagates.
"""

import asyncio
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union
from urllib.parse import quote

import httpx

from climatesync.shared.domain.exceptions import FieldNotFoundError, TransportError
from climatesync.shared.infrastructure.config import Settings
from climatesync.shared.infrastructure.error_handler import operation_boundary
from climatesync.shared.infrastructure.logging import get_logger
from climatesync.workitems.application.markup import render_markup
from climatesync.workitems.application.patch_builder import build_create_patch
from climatesync.workitems.application.query import build_wiql, quote_literal
from climatesync.workitems.application.scope_resolver import ScopeResolver
from climatesync.workitems.domain.constants import (
    CURRENT_PROJECT,
    FIELDS_RESOURCE,
    FINGERPRINT_FIELD,
    ID_FIELD,
    TEAM_PROJECT_FIELD,
    WIQL_RESOURCE,
    WORK_ITEMS_BATCH_RESOURCE,
    WORK_ITEMS_RESOURCE,
)
from climatesync.workitems.domain.enums import WorkItemType
from climatesync.workitems.domain.models import (
    AnalysisIssue,
    PatchOperation,
    QueryCondition,
    WorkItem,
    WorkItemBatch,
    WorkItemField,
    WorkItemQueryResult,
)
from climatesync.workitems.infrastructure.transport import HttpTransport, create_http_client

logger = get_logger(__name__)

FieldFactory = Callable[[str], WorkItemField]

NOT_FOUND = 404
# HTTP status returned when a field with the same reference name already exists.
CONFLICT = 409


def _serialize_ops(ops: Iterable[Union[PatchOperation, dict]]) -> List[dict]:
    return [op.to_json() if isinstance(op, PatchOperation) else op for op in ops]


class WorkItemClient:
    """
    Client for work items and work item fields of one project.

    Args:
        collection_url: e.g. https://dev.azure.com/org
        project: Project name
        access_token: Bearer token, assumed valid for the client's lifetime
        api_version: REST API version sent with every request
        timeout: HTTP timeout in seconds
        http_client: Pre-built AsyncClient (the caller then owns closing it)
    """

    def __init__(
        self,
        collection_url: str,
        project: str,
        access_token: str,
        api_version: str = "6.0",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
        renderer: Callable[[str], str] = render_markup,
    ):
        self._owns_http = http_client is None
        self._http = http_client or create_http_client(access_token, api_version, timeout)
        self._renderer = renderer
        self._field_locks: dict[str, asyncio.Lock] = {}

        collection_url = collection_url.rstrip("/")
        self.project_transport = HttpTransport(self._http, f"{collection_url}/{quote(project)}/_apis/wit")
        self.collection_transport = HttpTransport(self._http, f"{collection_url}/_apis/wit")
        self.scopes = ScopeResolver(self.project_transport, self.collection_transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkItemClient":
        """Build a client from application settings (fails fast if incomplete)."""
        settings.require_connection()
        return cls(
            collection_url=settings.collection_url,
            project=settings.project,
            access_token=settings.access_token,
            api_version=settings.api_version,
            timeout=settings.request_timeout,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "WorkItemClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Work items
    # ------------------------------------------------------------------

    @operation_boundary("create", context_keys=["work_item_type", "component"])
    async def create(
        self,
        work_item_type: Union[WorkItemType, str],
        issue: AnalysisIssue,
        component: str,
        build_version: str,
    ) -> Optional[WorkItem]:
        """Create a work item for `issue`. Always creates; no de-duplication."""
        type_name = work_item_type.value if isinstance(work_item_type, WorkItemType) else str(work_item_type)
        ops = build_create_patch(issue, component, build_version, self._renderer)
        logger.debug("creating_work_item", fingerprint=issue.fingerprint, check_name=issue.check_name)

        path = f"{WORK_ITEMS_RESOURCE}/${quote(type_name.lower())}"
        response = await self.project_transport.patch(path, _serialize_ops(ops))
        response.raise_for_status()

        work_item = WorkItem.from_json(response.body)
        logger.info("work_item_created", work_item_id=work_item.id, fingerprint=issue.fingerprint)
        return work_item

    @operation_boundary("update", context_keys=["work_item_id"])
    async def update(self, work_item_id: int, *ops: Union[PatchOperation, dict]) -> Optional[WorkItem]:
        response = await self.project_transport.patch(f"{WORK_ITEMS_RESOURCE}/{work_item_id}", _serialize_ops(ops))
        response.raise_for_status()
        return WorkItem.from_json(response.body)

    @operation_boundary("get", context_keys=["ids"])
    async def get(self, fields: Sequence[str], *ids: int) -> Optional[WorkItemBatch]:
        """
        Fetch several work items in one batched request.

        No ids means an empty batch and no request at all.
        """
        if not ids:
            return WorkItemBatch(count=0, value=[])

        response = await self.project_transport.post(
            WORK_ITEMS_BATCH_RESOURCE,
            {"ids": list(ids), "fields": list(fields)},
        )
        response.raise_for_status()
        return WorkItemBatch.from_json(response.body)

    @operation_boundary("query")
    async def query(
        self,
        fields: Sequence[str],
        conditions: Sequence[QueryCondition],
    ) -> Optional[WorkItemQueryResult]:
        wiql = build_wiql(fields, conditions)
        logger.debug("running_query", query=wiql)

        response = await self.project_transport.post(WIQL_RESOURCE, {"query": wiql})
        response.raise_for_status()
        return WorkItemQueryResult.from_json(response.body)

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @operation_boundary("field_get", context_keys=["field_name"])
    async def field_get(self, field_name: str) -> Optional[WorkItemField]:
        return await self._lookup_field(field_name)

    @operation_boundary("field_create")
    async def field_create(self, field: WorkItemField) -> Optional[WorkItemField]:
        return await self._create_field(field)

    @operation_boundary("field_ensure", context_keys=["field_name"], reraise=True)
    async def field_ensure(
        self,
        field_name: str,
        factory: Optional[FieldFactory] = None,
    ) -> WorkItemField:
        """
        Return the field, creating it with `factory(field_name)` if missing.

        Calls for the same name are serialized, so at most one creation is
        issued per client.

        Raises:
            FieldNotFoundError: The field is missing and no factory was given
            TransportError: Lookup or creation failed for any other reason
        """
        lock = self._field_locks.setdefault(field_name, asyncio.Lock())
        async with lock:
            try:
                return await self._lookup_field(field_name)
            except FieldNotFoundError:
                if factory is None:
                    raise
                logger.info("field_missing", field_name=field_name)

            try:
                return await self._create_field(factory(field_name))
            except TransportError as e:
                if e.status_code != CONFLICT:
                    raise
                logger.info("field_already_exists", field_name=field_name)
                return await self._lookup_field(field_name)

    async def _lookup_field(self, field_name: str) -> WorkItemField:
        """
        Non-swallowing field lookup across both scopes.

        Not-found means both scopes answered 404. Any other failure, project
        scope first, is raised as-is.
        """
        outcome = await self.scopes.outcome("GET", f"{FIELDS_RESOURCE}/{quote(field_name, safe='')}")
        response = outcome.first_success()
        if response is not None:
            return WorkItemField.from_json(response.body)

        for result in outcome:
            if isinstance(result, BaseException):
                raise result
            if result.status_code != NOT_FOUND:
                result.raise_for_status()
        raise FieldNotFoundError(field_name, outcome.collection.body)

    async def _create_field(self, field: WorkItemField) -> WorkItemField:
        response = await self.project_transport.post(FIELDS_RESOURCE, field.to_json())
        response.raise_for_status()
        created = WorkItemField.from_json(response.body)
        logger.info("field_created", field_name=created.reference_name)
        return created

    # ------------------------------------------------------------------
    # Composition helpers
    # ------------------------------------------------------------------

    async def find_by_fingerprint(self, fingerprint: str) -> Optional[WorkItemQueryResult]:
        """
        Query this project's work items carrying `fingerprint`.

        Swallowing, like query. WIQL searches the whole collection unless the
        team project is constrained.
        """
        return await self.query(
            [ID_FIELD],
            [
                QueryCondition(TEAM_PROJECT_FIELD, "=", CURRENT_PROJECT),
                QueryCondition(FINGERPRINT_FIELD, "=", quote_literal(fingerprint)),
            ],
        )
