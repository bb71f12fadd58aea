"""
Docker System API
Daemon-wide information, authentication and the event stream
"""

from typing import Any, Dict, Iterable, Optional, Union

from .base import BaseClient
from .http_client import DockerStream
from .validators import (
    require_enum,
    require_filter_enum,
    require_filters,
    require_int_range,
    require_mapping,
    require_string_list,
)

EVENT_FILTERS = (
    'config', 'container', 'daemon', 'event', 'image', 'label', 'network', 'node',
    'plugin', 'scope', 'secret', 'service', 'type', 'volume',
)
EVENT_TYPES = (
    'container', 'image', 'volume', 'network', 'daemon', 'plugin', 'node',
    'service', 'secret', 'config',
)
EVENT_SCOPES = ('local', 'swarm')
DF_TYPES = ('container', 'image', 'volume', 'build-cache')


class SystemClient(BaseClient):
    """System operations"""

    def auth(self, auth_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check registry credentials

        Args:
            auth_config: username, password, email, serveraddress

        Returns:
            {'Status': ..., 'IdentityToken': ...}
        """
        require_mapping(auth_config, 'auth_config', allow_empty=False)

        response = self.http.post('/auth', body=self.json_body(auth_config))
        return self.get_json_response(response)

    def info(self) -> Dict[str, Any]:
        """Get system information"""
        response = self.http.get('/info')
        return self.get_json_response(response)

    def version(self) -> Dict[str, Any]:
        """Get Docker version"""
        response = self.http.get('/version')
        return self.get_json_response(response)

    def ping(self) -> str:
        """Ping the daemon ('OK' when it is up)"""
        response = self.http.get('/_ping')
        return self.get_string_response(response)

    def ping_head(self) -> Dict[str, str]:
        """
        Ping with HEAD

        Returns:
            Response headers (API-Version, Docker-Experimental, OSType, ...)
        """
        response = self.http.head('/_ping')
        return dict(response.headers.items()) if response.headers is not None else {}

    def events(self, since: Optional[Union[int, str]] = None,
               until: Optional[Union[int, str]] = None,
               filters: Optional[Dict[str, Any]] = None) -> DockerStream:
        """
        Stream real-time events from the daemon

        Args:
            since: Show events created since this timestamp
            until: Stop streaming at this timestamp
            filters: container, event, image, label, type, scope, ...

        Returns:
            Stream of JSON event documents, one per line
        """
        if isinstance(since, int):
            require_int_range(since, 'since', 0)
        if isinstance(until, int):
            require_int_range(until, 'until', 0)
        filters = require_filters(filters, EVENT_FILTERS)
        require_filter_enum(filters, 'type', EVENT_TYPES)
        require_filter_enum(filters, 'scope', EVENT_SCOPES)

        query = self.build_query({
            'since': since,
            'until': until,
            'filters': self.encode_filters(filters),
        })
        response = self.http.get(f'/events{query}', stream=True)
        return self.get_stream_response(response)

    def df(self, types: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Get data usage information

        Args:
            types: Object types to report (container, image, volume, build-cache)
        """
        types = list(types) if types is not None else []
        require_string_list(types, 'types')
        for object_type in types:
            require_enum(object_type, DF_TYPES, 'types')

        query = self.build_query({'type': ','.join(types)})
        response = self.http.get(f'/system/df{query}')
        return self.get_json_response(response)
