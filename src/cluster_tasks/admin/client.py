# src/cluster_tasks/admin/client.py

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..core.ports import AdminTransport, JSONDict
from ..errors import DecodeError, RemoteError
from .models import AdminRequest, AdminResponse, dig

logger = logging.getLogger(__name__)

TASK_STATUS_QUERY = """query task($id: String!) {
	task(input: {id: $id}) {
		status
	}
}"""


class AdminClient:
    """
    The cluster capability handed to TaskWaiter and the operations.

    Wraps an AdminTransport with the GraphQL envelope:
    encode -> post -> decode -> fail on errors -> return data.
    """

    def __init__(self, transport: AdminTransport) -> None:
        self.transport = transport

    def run_admin_query(self, request: AdminRequest) -> JSONDict:
        body = self.transport.post_admin(request.to_json())
        resp = AdminResponse.from_json(body)
        if not resp.ok:
            raise RemoteError(resp.errors)
        return resp.data or {}

    def submit_admin(self, operation: str, variables: Mapping[str, Any]) -> JSONDict:
        return self.run_admin_query(AdminRequest(query=operation, variables=dict(variables)))

    def query_status(self, task_id: str) -> str:
        data = self.submit_admin(TASK_STATUS_QUERY, {"id": task_id})
        status = dig(data, "task", "status")
        if not isinstance(status, str):
            raise DecodeError(f"error unmarshalling status response: status={status!r}")
        return status

    def alphas_health(self) -> list[str]:
        return self.transport.alphas_health()
