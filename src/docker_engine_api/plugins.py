"""
Docker Plugins API
"""

from typing import Any, Dict, List, Optional, Union

from .base import BaseClient, path_param
from .exceptions import InvalidParameter
from .http_client import DockerStream
from .validators import (
    require_array,
    require_bool,
    require_filter_bool,
    require_filters,
    require_int_range,
    require_non_empty,
    require_string,
    require_string_list,
)

LIST_FILTERS = ('capability', 'enable')


def _require_privileges(privileges: Any):
    require_array(privileges, 'privileges')
    for index, privilege in enumerate(privileges):
        if not isinstance(privilege, dict):
            raise InvalidParameter(f"privileges[{index}] must be a mapping")


class PluginClient(BaseClient):
    """Plugin operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List installed plugins

        Args:
            filters: capability, enable (bool)
        """
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_bool(filters, 'enable')

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.get(f'/plugins{query}')
        return self.get_json_response(response)

    def get_privileges(self, remote: str) -> List[Dict[str, Any]]:
        """
        Privileges a plugin needs before it can be installed

        Returns:
            List of {'Name': ..., 'Description': ..., 'Value': [...]}
        """
        require_string(remote, 'remote')

        query = self.build_query({'remote': remote})
        response = self.http.get(f'/plugins/privileges{query}')
        return self.get_json_response(response) or []

    def pull(self, remote: str, name: Optional[str] = None,
             privileges: Optional[List[Dict[str, Any]]] = None,
             auth: Optional[Any] = None) -> DockerStream:
        """
        Install a plugin

        Args:
            remote: Remote reference of the plugin (e.g. 'vieux/sshfs:latest')
            name: Local name for the plugin
            privileges: Privileges to grant, as returned by get_privileges()
            auth: Registry credentials

        Returns:
            Stream of JSON progress messages
        """
        require_string(remote, 'remote')
        if name is not None:
            require_string(name, 'name')
        privileges = [] if privileges is None else privileges
        _require_privileges(privileges)

        query = self.build_query({'remote': remote, 'name': name})
        response = self.http.post(f'/plugins/pull{query}', body=self.json_body(privileges),
                                  headers=self.registry_auth_headers(auth), stream=True)
        return self.get_stream_response(response)

    def inspect(self, name: str) -> Dict[str, Any]:
        """Inspect a plugin"""
        require_string(name, 'name')

        response = self.http.get(f'/plugins/{path_param(name)}/json')
        return self.get_json_response(response)

    def remove(self, name: str, force: bool = False) -> Dict[str, Any]:
        """
        Remove a plugin

        Returns:
            The removed plugin
        """
        require_string(name, 'name')
        require_bool(force, 'force')

        query = self.build_query({'force': force})
        response = self.http.delete(f'/plugins/{path_param(name)}{query}')
        return self.get_json_response(response)

    def enable(self, name: str, timeout: int = 0):
        """Enable a plugin"""
        require_string(name, 'name')
        require_int_range(timeout, 'timeout', 0)

        query = self.build_query({'timeout': timeout})
        self.http.post(f'/plugins/{path_param(name)}/enable{query}')

    def disable(self, name: str, force: bool = False):
        """Disable a plugin"""
        require_string(name, 'name')
        require_bool(force, 'force')

        query = self.build_query({'force': force})
        self.http.post(f'/plugins/{path_param(name)}/disable{query}')

    def upgrade(self, name: str, remote: str,
                privileges: Optional[List[Dict[str, Any]]] = None,
                auth: Optional[Any] = None) -> DockerStream:
        """
        Upgrade a plugin (it must be disabled)

        Returns:
            Stream of JSON progress messages
        """
        require_string(name, 'name')
        require_string(remote, 'remote')
        privileges = [] if privileges is None else privileges
        _require_privileges(privileges)

        query = self.build_query({'remote': remote})
        response = self.http.post(f'/plugins/{path_param(name)}/upgrade{query}',
                                  body=self.json_body(privileges),
                                  headers=self.registry_auth_headers(auth), stream=True)
        return self.get_stream_response(response)

    def create(self, name: str, tar_context: bytes):
        """
        Create a plugin from a tar archive

        Args:
            name: Plugin name
            tar_context: Tar holding config.json and the rootfs directory
        """
        require_string(name, 'name')
        require_non_empty(tar_context, 'tar_context')

        query = self.build_query({'name': name})
        self.http.post(f'/plugins/create{query}',
                       body=self.binary_body(tar_context, 'application/x-tar'))

    def push(self, name: str, auth: Optional[Any] = None) -> DockerStream:
        """
        Push a plugin to its registry

        Returns:
            Stream of JSON progress messages
        """
        require_string(name, 'name')

        response = self.http.post(f'/plugins/{path_param(name)}/push',
                                  headers=self.registry_auth_headers(auth), stream=True)
        return self.get_stream_response(response)

    def configure(self, name: str, settings: Union[Dict[str, str], List[str]]):
        """
        Set plugin settings

        Args:
            name: Plugin name
            settings: 'KEY=value' strings, or a mapping turned into them
        """
        require_string(name, 'name')

        if isinstance(settings, dict):
            for key, value in settings.items():
                if not isinstance(key, str):
                    raise InvalidParameter("Configuration keys must be strings")
                if not isinstance(value, str):
                    raise InvalidParameter("Configuration values must be strings")
            settings = [f"{key}={value}" for key, value in settings.items()]

        require_string_list(settings, 'settings')
        for index, setting in enumerate(settings):
            if '=' not in setting:
                raise InvalidParameter(f"settings[{index}] must be in format 'KEY=value'")

        self.http.post(f'/plugins/{path_param(name)}/set', body=self.json_body(list(settings)))
