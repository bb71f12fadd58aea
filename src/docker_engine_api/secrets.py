"""
Docker Secrets API
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


def validate_driver_config(driver: Dict[str, Any], field: str):
    """Driver/Templating block: Name required, Options a string map"""
    require_mapping(driver, field)
    if driver.get('Name') is None:
        raise InvalidParameter(f"{field}.Name is required")
    require_string(driver['Name'], f'{field}.Name')

    if driver.get('Options') is not None:
        require_string_map(driver['Options'], f'{field}.Options')


class SecretClient(BaseClient):
    """Swarm secret operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List secrets

        Args:
            filters: id, label, name, names
        """
        filters = require_filters(filters, LIST_FILTERS)

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.get(f'/secrets{query}')
        return self.get_json_response(response)

    def create(self, spec: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a secret

        Args:
            spec: Name, Data (base64 text), Labels, Driver, Templating.
                  Data may be left out when an external Driver supplies it.

        Returns:
            {'ID': ...}
        """
        require_mapping(spec, 'spec')
        if spec.get('Name') is None:
            raise InvalidParameter("Secret name is required")
        require_name(spec['Name'], 'Name', 'Secret name')

        if spec.get('Data') is not None:
            require_non_empty(spec['Data'], 'Secret data')
            require_base64(spec['Data'], 'Secret data')
        elif spec.get('Driver') is None:
            raise InvalidParameter("Secret data is required when not using external driver")

        if spec.get('Labels') is not None:
            require_string_map(spec['Labels'], 'Labels')
        if spec.get('Driver') is not None:
            validate_driver_config(spec['Driver'], 'Driver')
        if spec.get('Templating') is not None:
            validate_driver_config(spec['Templating'], 'Templating')

        response = self.http.post('/secrets/create', body=self.json_body(spec))
        return self.get_json_response(response)

    def inspect(self, id: str) -> Dict[str, Any]:
        """Inspect a secret (Data is never returned)"""
        require_id(id, 'id')

        response = self.http.get(f'/secrets/{id}')
        return self.get_json_response(response)

    def delete(self, id: str):
        """Delete a secret"""
        require_id(id, 'id')
        self.http.delete(f'/secrets/{id}')

    def update(self, id: str, version: int, spec: Dict[str, Any]):
        """
        Update a secret

        Only Labels can change; Data is immutable and rejected here.

        Args:
            id: Secret ID or name
            version: Current Version.Index of the secret
            spec: Full secret spec with the new Labels
        """
        require_id(id, 'id')
        if version is None:
            raise InvalidParameter("Parameter 'version' is required")
        require_int_range(version, 'version', 0)
        require_mapping(spec, 'spec')

        if spec.get('Labels') is not None:
            require_string_map(spec['Labels'], 'Labels')
        if spec.get('Driver') is not None:
            validate_driver_config(spec['Driver'], 'Driver')
        if 'Data' in spec:
            raise InvalidParameter("Secret data cannot be updated")

        query = self.build_query({'version': version})
        self.http.post(f'/secrets/{id}/update{query}', body=self.json_body(spec))
