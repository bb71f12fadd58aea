"""
Docker Volumes API
"""

from typing import Any, Dict, Optional

from .base import BaseClient
from .validators import (
    require_bool,
    require_filter_bool,
    require_filters,
    require_id,
    require_mapping,
    require_name,
    require_string,
    require_string_map,
)

LIST_FILTERS = ('dangling', 'driver', 'label', 'name')
PRUNE_FILTERS = ('label', 'all')


class VolumeClient(BaseClient):
    """Volume operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        List volumes

        Args:
            filters: dangling (bool), driver, label, name

        Returns:
            {'Volumes': [...], 'Warnings': [...]}
        """
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_bool(filters, 'dangling')

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.get(f'/volumes{query}')
        return self.get_json_response(response)

    def create(self, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Create a volume

        Args:
            config: Name, Driver, DriverOpts, Labels (all optional)

        Returns:
            Volume details
        """
        config = {} if config is None else config
        require_mapping(config, 'config')

        if config.get('Name') is not None:
            require_name(config['Name'], 'Name', 'Volume name')
        if config.get('Driver') is not None:
            require_string(config['Driver'], 'Driver')
        if config.get('DriverOpts') is not None:
            require_string_map(config['DriverOpts'], 'Driver options')
        if config.get('Labels') is not None:
            require_string_map(config['Labels'], 'Labels')

        response = self.http.post('/volumes/create', body=self.json_body(config))
        return self.get_json_response(response)

    def inspect(self, name: str) -> Dict[str, Any]:
        """Inspect a volume"""
        require_id(name, 'name')

        response = self.http.get(f'/volumes/{name}')
        return self.get_json_response(response)

    def remove(self, name: str, force: bool = False):
        """Remove a volume"""
        require_id(name, 'name')
        require_bool(force, 'force')

        query = self.build_query({'force': force})
        self.http.delete(f'/volumes/{name}{query}')

    def prune(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Delete unused volumes

        Args:
            filters: label, all (bool; include named volumes)

        Returns:
            {'VolumesDeleted': [...], 'SpaceReclaimed': ...}
        """
        filters = require_filters(filters, PRUNE_FILTERS)
        require_filter_bool(filters, 'all')

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.post(f'/volumes/prune{query}')
        return self.get_json_response(response)
