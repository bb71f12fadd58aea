"""
Docker Exec API
Run commands inside running containers
"""

from typing import Any, Dict, Optional

from .base import BaseClient
from .exceptions import InvalidParameter
from .http_client import DockerStream
from .validators import (
    require_bool,
    require_env_list,
    require_id,
    require_int_range,
    require_mapping,
    require_string_list,
)

BOOLEAN_FIELDS = ('AttachStdin', 'AttachStdout', 'AttachStderr', 'Tty', 'Privileged')
STRING_FIELDS = ('DetachKeys', 'User', 'WorkingDir')


class ExecClient(BaseClient):
    """Exec instance operations"""

    def create(self, container_id: str, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create an exec instance

        Args:
            container_id: Container ID or name
            config: Cmd (required), AttachStdout, AttachStderr, Tty, Env, User, ...

        Returns:
            {'Id': ...}
        """
        require_id(container_id, 'container_id')
        require_mapping(config, 'config')

        if config.get('Cmd') is None:
            raise InvalidParameter("Command (Cmd) is required")
        require_string_list(config['Cmd'], 'Cmd', allow_empty=False)

        for field in BOOLEAN_FIELDS:
            require_bool(config.get(field), field)

        for field in STRING_FIELDS:
            if config.get(field) is not None and not isinstance(config[field], str):
                raise InvalidParameter(f"Field '{field}' must be a string")

        if config.get('Env') is not None:
            require_env_list(config['Env'], 'Env')

        response = self.http.post(f'/containers/{container_id}/exec', body=self.json_body(config))
        return self.get_json_response(response)

    def start(self, exec_id: str, config: Optional[Dict[str, Any]] = None) -> DockerStream:
        """
        Start an exec instance

        Args:
            exec_id: Exec instance ID
            config: Detach, Tty

        Returns:
            Output stream (multiplexed unless Tty is set)
        """
        require_id(exec_id, 'exec_id')
        config = {} if config is None else config
        require_mapping(config, 'config')
        require_bool(config.get('Detach'), 'Detach')
        require_bool(config.get('Tty'), 'Tty')

        response = self.http.post(f'/exec/{exec_id}/start', body=self.json_body(config), stream=True)
        return self.get_stream_response(response)

    def resize(self, exec_id: str, height: int, width: int):
        """Resize the TTY of an exec instance"""
        require_id(exec_id, 'exec_id')
        require_int_range(height, 'height', 1, 1000)
        require_int_range(width, 'width', 1, 1000)

        query = self.build_query({'h': height, 'w': width})
        self.http.post(f'/exec/{exec_id}/resize{query}')

    def inspect(self, exec_id: str) -> Dict[str, Any]:
        """Inspect an exec instance"""
        require_id(exec_id, 'exec_id')

        response = self.http.get(f'/exec/{exec_id}/json')
        return self.get_json_response(response)
