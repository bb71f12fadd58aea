"""
Docker Configs API
"""

from typing import Any, Dict, List, Optional

from .base import BaseClient
from .exceptions import InvalidParameter
from .validators import (
    require_base64,
    require_filters,
    require_id,
    require_int_range,
    require_mapping,
    require_name,
    require_non_empty,
    require_string,
    require_string_map,
)

LIST_FILTERS = ('id', 'label', 'name', 'names')
TEMPLATING_ENGINES = ('golang',)


def validate_templating(templating: Dict[str, Any]):
    require_mapping(templating, 'Templating')
    if templating.get('Name') is None:
        raise InvalidParameter("Templating.Name is required")
    require_string(templating['Name'], 'Templating.Name')

    if templating['Name'] not in TEMPLATING_ENGINES:
        raise InvalidParameter(
            f"Unsupported templating engine. Supported engines: {', '.join(TEMPLATING_ENGINES)}"
        )

    if templating.get('Options') is not None:
        require_string_map(templating['Options'], 'Templating.Options')


class ConfigClient(BaseClient):
    """Swarm config operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List configs

        Args:
            filters: id, label, name, names
        """
        filters = require_filters(filters, LIST_FILTERS)

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.get(f'/configs{query}')
        return self.get_json_response(response)

    def create(self, spec: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a config

        Args:
            spec: Name, Data (base64 text), Labels, Templating

        Returns:
            {'ID': ...}
        """
        require_mapping(spec, 'spec')
        if spec.get('Name') is None:
            raise InvalidParameter("Config name is required")
        require_name(spec['Name'], 'Name', 'Config name')

        if spec.get('Data') is None:
            raise InvalidParameter("Config data is required")
        require_non_empty(spec['Data'], 'Config data')
        require_base64(spec['Data'], 'Config data')

        if spec.get('Labels') is not None:
            require_string_map(spec['Labels'], 'Labels')
        if spec.get('Templating') is not None:
            validate_templating(spec['Templating'])

        response = self.http.post('/configs/create', body=self.json_body(spec))
        return self.get_json_response(response)

    def inspect(self, id: str) -> Dict[str, Any]:
        """Inspect a config"""
        require_id(id, 'id')

        response = self.http.get(f'/configs/{id}')
        return self.get_json_response(response)

    def delete(self, id: str):
        """Delete a config"""
        require_id(id, 'id')
        self.http.delete(f'/configs/{id}')

    def update(self, id: str, version: int, spec: Dict[str, Any]):
        """
        Update a config

        Only Labels can change; Data is immutable and rejected here.

        Args:
            id: Config ID or name
            version: Current Version.Index of the config
            spec: Full config spec with the new Labels
        """
        require_id(id, 'id')
        if version is None:
            raise InvalidParameter("Parameter 'version' is required")
        require_int_range(version, 'version', 0)
        require_mapping(spec, 'spec')

        if spec.get('Labels') is not None:
            require_string_map(spec['Labels'], 'Labels')
        if spec.get('Templating') is not None:
            validate_templating(spec['Templating'])
        if 'Data' in spec:
            raise InvalidParameter("Config data cannot be updated")

        query = self.build_query({'version': version})
        self.http.post(f'/configs/{id}/update{query}', body=self.json_body(spec))
