"""
Docker Networks API
"""

from typing import Any, Dict, List, Optional

from .base import BaseClient
from .exceptions import InvalidParameter
from .validators import (
    require_array,
    require_bool,
    require_cidr,
    require_enum,
    require_filter_enum,
    require_filters,
    require_id,
    require_ip,
    require_mapping,
    require_name,
    require_string,
    require_string_map,
)

LIST_FILTERS = ('driver', 'id', 'label', 'name', 'scope', 'type')
PRUNE_FILTERS = ('until', 'label')
SCOPES = ('local', 'global', 'swarm')
TYPES = ('custom', 'builtin')
BOOLEAN_FIELDS = ('CheckDuplicate', 'Internal', 'Attachable', 'Ingress', 'EnableIPv6')


class NetworkClient(BaseClient):
    """Network operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List networks

        Args:
            filters: driver, id, label, name, scope (local/global/swarm),
                     type (custom/builtin)

        Returns:
            List of networks
        """
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_enum(filters, 'scope', SCOPES)
        require_filter_enum(filters, 'type', TYPES)

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.get(f'/networks{query}')
        return self.get_json_response(response)

    def inspect(self, id: str, verbose: bool = False, scope: str = 'local') -> Dict[str, Any]:
        """
        Inspect a network

        Args:
            id: Network ID or name
            verbose: Detailed output across the swarm
            scope: Network scope to look in
        """
        require_id(id, 'id')
        require_bool(verbose, 'verbose')
        require_enum(scope, SCOPES, 'scope')

        query = self.build_query({'verbose': verbose, 'scope': scope})
        response = self.http.get(f'/networks/{id}{query}')
        return self.get_json_response(response)

    def remove(self, id: str):
        """Remove a network"""
        require_id(id, 'id')
        self.http.delete(f'/networks/{id}')

    def create(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a network

        Args:
            config: Network config (Name, Driver, Internal, IPAM, Options, Labels, ...)

        Returns:
            {'Id': ..., 'Warning': ...}
        """
        require_mapping(config, 'config')
        if config.get('Name') is None:
            raise InvalidParameter("Network name is required")
        require_name(config['Name'], 'Name', 'Network name')

        if config.get('Driver') is not None:
            require_string(config['Driver'], 'Driver')

        for field in BOOLEAN_FIELDS:
            require_bool(config.get(field), field)

        ipam = config.get('IPAM')
        if ipam is not None:
            require_mapping(ipam, 'IPAM')
            if ipam.get('Config') is not None:
                require_array(ipam['Config'], 'IPAM.Config')
                for index, ipam_config in enumerate(ipam['Config']):
                    if not isinstance(ipam_config, dict):
                        raise InvalidParameter(f"IPAM.Config[{index}] must be an array")
                    if ipam_config.get('Subnet') is not None:
                        require_cidr(ipam_config['Subnet'], f'IPAM.Config[{index}].Subnet')

        if config.get('Options') is not None:
            require_string_map(config['Options'], 'Network options')
        if config.get('Labels') is not None:
            require_string_map(config['Labels'], 'Labels')

        response = self.http.post('/networks/create', body=self.json_body(config))
        return self.get_json_response(response)

    def connect(self, id: str, config: Dict[str, Any]):
        """
        Connect a container to a network

        Args:
            id: Network ID or name
            config: {'Container': ..., 'EndpointConfig': {...}}
        """
        require_id(id, 'id')
        self._require_container(config)

        endpoint = config.get('EndpointConfig')
        if endpoint is not None:
            require_mapping(endpoint, 'EndpointConfig')

            ipam = endpoint.get('IPAMConfig')
            if ipam is not None:
                require_mapping(ipam, 'EndpointConfig.IPAMConfig')
                if ipam.get('IPv4Address') is not None:
                    require_ip(ipam['IPv4Address'], 'EndpointConfig.IPAMConfig', 4)
                if ipam.get('IPv6Address') is not None:
                    require_ip(ipam['IPv6Address'], 'EndpointConfig.IPAMConfig', 6)

            aliases = endpoint.get('Aliases')
            if aliases is not None:
                require_array(aliases, 'EndpointConfig.Aliases')
                for alias in aliases:
                    if not isinstance(alias, str) or not alias:
                        raise InvalidParameter("Network aliases must be non-empty strings")

        self.http.post(f'/networks/{id}/connect', body=self.json_body(config))

    def disconnect(self, id: str, config: Dict[str, Any]):
        """
        Disconnect a container from a network

        Args:
            id: Network ID or name
            config: {'Container': ..., 'Force': bool}
        """
        require_id(id, 'id')
        self._require_container(config)
        require_bool(config.get('Force'), 'Force')

        self.http.post(f'/networks/{id}/disconnect', body=self.json_body(config))

    @staticmethod
    def _require_container(config: Dict[str, Any]):
        require_mapping(config, 'config')
        if config.get('Container') is None:
            raise InvalidParameter("Container ID or name is required")
        require_id(config['Container'], 'Container')

    def prune(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Delete unused networks

        Returns:
            {'NetworksDeleted': [...]}
        """
        filters = require_filters(filters, PRUNE_FILTERS)

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.post(f'/networks/prune{query}')
        return self.get_json_response(response)
