"""
Docker Nodes API
"""

from typing import Any, Dict, List, Optional

from .base import BaseClient
from .exceptions import InvalidParameter
from .validators import (
    require_bool,
    require_filter_enum,
    require_filters,
    require_id,
    require_int_range,
    require_mapping,
)

LIST_FILTERS = ('id', 'label', 'membership', 'name', 'node.label', 'role')
MEMBERSHIPS = ('accepted', 'pending')
ROLES = ('manager', 'worker')


class NodeClient(BaseClient):
    """Swarm node operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List nodes

        Args:
            filters: id, label, membership (accepted/pending), name,
                     node.label, role (manager/worker)
        """
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_enum(filters, 'membership', MEMBERSHIPS)
        require_filter_enum(filters, 'role', ROLES)

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.get(f'/nodes{query}')
        return self.get_json_response(response)

    def inspect(self, id: str) -> Dict[str, Any]:
        """Inspect a node"""
        require_id(id, 'id')

        response = self.http.get(f'/nodes/{id}')
        return self.get_json_response(response)

    def delete(self, id: str, force: bool = False):
        """Remove a node from the swarm"""
        require_id(id, 'id')
        require_bool(force, 'force')

        query = self.build_query({'force': force})
        self.http.delete(f'/nodes/{id}{query}')

    def update(self, id: str, version: int, spec: Dict[str, Any]):
        """
        Update a node

        Args:
            id: Node ID
            version: Current Version.Index of the node
            spec: New node Spec (Availability, Role, Labels, Name)
        """
        require_id(id, 'id')
        if version is None:
            raise InvalidParameter("Parameter 'version' is required")
        require_int_range(version, 'version', 0)
        require_mapping(spec, 'spec')

        query = self.build_query({'version': version})
        self.http.post(f'/nodes/{id}/update{query}', body=self.json_body(spec))
