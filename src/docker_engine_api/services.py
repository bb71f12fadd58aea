"""
Docker Services API
"""

from typing import Any, Dict, List, Optional, Union

from .base import BaseClient
from .exceptions import InvalidParameter
from .http_client import DockerStream
from .tasks import log_query
from .validators import (
    require_bool,
    require_enum,
    require_env_list,
    require_filter_enum,
    require_filters,
    require_id,
    require_int_range,
    require_mapping,
    require_string,
    require_string_map,
)

LIST_FILTERS = ('id', 'label', 'mode', 'name')
MODES = ('replicated', 'global')
REGISTRY_AUTH_SOURCES = ('spec', 'previous-spec')
ROLLBACK_VALUES = ('', 'previous')


def validate_container_spec(container_spec: Dict[str, Any]):
    require_mapping(container_spec, 'ContainerSpec')
    if container_spec.get('Image') is None:
        raise InvalidParameter("ContainerSpec.Image is required")
    require_string(container_spec['Image'], 'ContainerSpec.Image')

    if container_spec.get('Env') is not None:
        require_env_list(container_spec['Env'], 'ContainerSpec.Env')


def validate_service_mode(mode: Dict[str, Any]):
    """Mode holds exactly one of Replicated or Global"""
    require_mapping(mode, 'Mode')
    has_replicated = mode.get('Replicated') is not None
    has_global = mode.get('Global') is not None

    if not has_replicated and not has_global:
        raise InvalidParameter("Mode must specify either 'Replicated' or 'Global'")
    if has_replicated and has_global:
        raise InvalidParameter("Mode cannot specify both 'Replicated' and 'Global'")

    if has_replicated:
        require_mapping(mode['Replicated'], 'Mode.Replicated')
        require_int_range(mode['Replicated'].get('Replicas'), 'Mode.Replicated.Replicas', 0)


class ServiceClient(BaseClient):
    """Swarm service operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None,
             status: bool = False) -> List[Dict[str, Any]]:
        """
        List services

        Args:
            filters: id, label, mode (replicated/global), name
            status: Include ServiceStatus (running/desired task counts)
        """
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_enum(filters, 'mode', MODES)
        require_bool(status, 'status')

        query = self.build_query({
            'filters': self.encode_filters(filters),
            'status': status,
        })
        response = self.http.get(f'/services{query}')
        return self.get_json_response(response)

    def create(self, config: Dict[str, Any], auth: Optional[Any] = None) -> Dict[str, Any]:
        """
        Create a service

        Args:
            config: Service spec; Name and TaskTemplate are required
            auth: Registry credentials for pulling the service image

        Returns:
            {'ID': ..., 'Warning': ...}
        """
        require_mapping(config, 'config')
        if config.get('Name') is None:
            raise InvalidParameter("Service name is required")
        require_string(config['Name'], 'Name')

        if config.get('TaskTemplate') is None:
            raise InvalidParameter("TaskTemplate is required")
        require_mapping(config['TaskTemplate'], 'TaskTemplate')
        if config['TaskTemplate'].get('ContainerSpec') is not None:
            validate_container_spec(config['TaskTemplate']['ContainerSpec'])

        if config.get('Labels') is not None:
            require_string_map(config['Labels'], 'Labels')
        if config.get('Mode') is not None:
            validate_service_mode(config['Mode'])

        response = self.http.post('/services/create', body=self.json_body(config),
                                  headers=self.registry_auth_headers(auth))
        return self.get_json_response(response)

    def inspect(self, id: str, insert_defaults: bool = False) -> Dict[str, Any]:
        """Inspect a service"""
        require_id(id, 'id')
        require_bool(insert_defaults, 'insert_defaults')

        query = self.build_query({'insertDefaults': insert_defaults})
        response = self.http.get(f'/services/{id}{query}')
        return self.get_json_response(response)

    def delete(self, id: str):
        """Delete a service"""
        require_id(id, 'id')
        self.http.delete(f'/services/{id}')

    def update(self, id: str, version: int, spec: Dict[str, Any], auth: Optional[Any] = None,
               registry_auth_from: Optional[str] = None, rollback: str = '') -> Dict[str, Any]:
        """
        Update a service

        Args:
            id: Service ID or name
            version: Current Version.Index of the service
            spec: Full new service spec
            auth: Registry credentials sent in X-Registry-Auth
            registry_auth_from: Where to take registry auth from when auth is
                                not given ('spec' or 'previous-spec')
            rollback: 'previous' to roll back to the previous spec

        Returns:
            {'Warnings': [...]}
        """
        require_id(id, 'id')
        if version is None:
            raise InvalidParameter("Parameter 'version' is required")
        require_int_range(version, 'version', 0)
        require_mapping(spec, 'spec')
        require_enum(registry_auth_from, REGISTRY_AUTH_SOURCES, 'registry_auth_from')
        if rollback not in ROLLBACK_VALUES:
            raise InvalidParameter("Rollback parameter must be empty or 'previous'")

        query = self.build_query({
            'version': version,
            'registryAuthFrom': registry_auth_from,
            'rollback': rollback,
        })
        response = self.http.post(f'/services/{id}/update{query}', body=self.json_body(spec),
                                  headers=self.registry_auth_headers(auth))
        return self.get_json_response(response)

    def logs(self, id: str, details: Optional[bool] = None, follow: Optional[bool] = None,
             stdout: bool = True, stderr: bool = True,
             since: Optional[Union[int, str]] = None, until: Optional[Union[int, str]] = None,
             timestamps: Optional[bool] = None, tail: Union[str, int] = 'all') -> DockerStream:
        """
        Stream logs of all tasks of a service

        Returns:
            Multiplexed log stream
        """
        require_id(id, 'id')
        query = self.build_query(log_query(details, follow, stdout, stderr, since, until,
                                           timestamps, tail))

        response = self.http.get(f'/services/{id}/logs{query}', stream=True)
        return self.get_stream_response(response)
