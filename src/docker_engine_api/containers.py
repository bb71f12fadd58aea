"""
Docker Containers API
"""

import base64
import binascii
import json
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from . import frames
from .base import BaseClient
from .exceptions import InvalidParameter, TransportError
from .http_client import DockerStream
from .models.container import ContainerCreateRequest, ContainerUpdateRequest
from .validators import (
    require_bool,
    require_env_list,
    require_enum,
    require_filter_enum,
    require_filters,
    require_id,
    require_int_range,
    require_mapping,
    require_non_empty,
    require_port,
    require_signal,
    require_string,
    require_string_list,
    require_string_map,
    require_tail,
)

LIST_FILTERS = (
    'ancestor', 'before', 'expose', 'exited', 'health', 'id', 'isolation',
    'is-task', 'label', 'name', 'network', 'publish', 'since', 'status', 'volume',
)
PRUNE_FILTERS = ('until', 'label')
STATUSES = ('created', 'restarting', 'running', 'removing', 'paused', 'exited', 'dead')
HEALTH_STATES = ('starting', 'healthy', 'unhealthy', 'none')
WAIT_CONDITIONS = ('not-running', 'next-exit', 'removed')
CONTAINER_NAME_PATTERN = re.compile(r'/?[a-zA-Z0-9][a-zA-Z0-9_.-]+')
PATH_STAT_HEADER = 'X-Docker-Container-Path-Stat'


class ContainerClient(BaseClient):
    """Container operations"""

    def list(self, all: Optional[bool] = None, limit: Optional[int] = None,
             size: Optional[bool] = None, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List containers

        Args:
            all: Show all containers (including stopped)
            limit: Return this many most recently created containers
            size: Return SizeRw and SizeRootFs
            filters: Filters to apply (ancestor, status, label, ...)

        Returns:
            List of container summaries
        """
        require_bool(all, 'all')
        require_bool(size, 'size')
        require_int_range(limit, 'limit', 1)
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_enum(filters, 'status', STATUSES)
        require_filter_enum(filters, 'health', HEALTH_STATES)

        query = self.build_query({
            'all': all,
            'limit': limit,
            'size': size,
            'filters': self.encode_filters(filters),
        })
        response = self.http.get(f'/containers/json{query}')
        return self.get_json_response(response)

    def create(self, config: Union[ContainerCreateRequest, Dict[str, Any]],
               name: Optional[str] = None, platform: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a container

        Args:
            config: ContainerCreateRequest or the equivalent mapping
            name: Container name
            platform: Platform in os[/arch[/variant]] form

        Returns:
            {'Id': ..., 'Warnings': [...]}
        """
        body = config.to_dict() if isinstance(config, ContainerCreateRequest) else config
        self._validate_create_config(body)

        if name is not None:
            require_string(name, 'name')
            if not CONTAINER_NAME_PATTERN.fullmatch(name):
                raise InvalidParameter(
                    "Container name must match /?[a-zA-Z0-9][a-zA-Z0-9_.-]+"
                )

        query = self.build_query({'name': name, 'platform': platform})
        response = self.http.post(f'/containers/create{query}', body=self.json_body(body))
        return self.get_json_response(response)

    @staticmethod
    def _validate_create_config(body: Any):
        require_mapping(body, 'config')
        require_string(body.get('Image'), 'Image')

        if body.get('ExposedPorts') is not None:
            require_mapping(body['ExposedPorts'], 'ExposedPorts')
            for port in body['ExposedPorts']:
                require_port(port, 'ExposedPorts')

        if body.get('Env') is not None:
            require_env_list(body['Env'], 'Env')

        if body.get('Labels') is not None:
            require_string_map(body['Labels'], 'Labels')

        for field in ('Cmd', 'Entrypoint', 'Shell'):
            if isinstance(body.get(field), list):
                require_string_list(body[field], field)

        if body.get('StopSignal') is not None:
            require_signal(body['StopSignal'], 'StopSignal')

        require_int_range(body.get('StopTimeout'), 'StopTimeout', 0)

        for field in ('AttachStdin', 'AttachStdout', 'AttachStderr', 'Tty',
                      'OpenStdin', 'StdinOnce', 'NetworkDisabled'):
            require_bool(body.get(field), field)

    def inspect(self, id: str, size: bool = False) -> Dict[str, Any]:
        """
        Inspect a container

        Args:
            id: Container ID or name
            size: Return container size information
        """
        require_id(id, 'id')

        query = self.build_query({'size': size})
        response = self.http.get(f'/containers/{id}/json{query}')
        return self.get_json_response(response)

    def top(self, id: str, ps_args: str = '-ef') -> Dict[str, Any]:
        """List processes running inside a container"""
        require_id(id, 'id')

        query = self.build_query({'ps_args': ps_args})
        response = self.http.get(f'/containers/{id}/top{query}')
        return self.get_json_response(response)

    def logs(self, id: str, follow: Optional[bool] = None, stdout: bool = True,
             stderr: bool = True, since: Optional[int] = None, until: Optional[int] = None,
             timestamps: Optional[bool] = None, tail: Union[str, int] = 'all',
             demux: bool = False) -> Union[str, Tuple[str, str]]:
        """
        Get container logs

        Multiplexed output (containers without a TTY) is decoded, so the
        returned text holds no frame headers.

        Args:
            id: Container ID or name
            follow: Only False is accepted; use attach() to stream live output
            stdout: Return stdout
            stderr: Return stderr
            since: Unix timestamp to start from
            until: Unix timestamp to stop at
            timestamps: Prefix lines with timestamps
            tail: Number of lines from the end, or 'all'
            demux: Return (stdout, stderr) instead of one string

        Returns:
            Log text, or a (stdout, stderr) tuple when demux is True
        """
        require_id(id, 'id')
        for option, value in (('follow', follow), ('stdout', stdout), ('stderr', stderr),
                              ('timestamps', timestamps)):
            require_bool(value, option)
        if follow:
            raise InvalidParameter(
                "Option 'follow' is not supported by logs(); use attach() to stream live output"
            )
        require_int_range(since, 'since', 0)
        require_int_range(until, 'until', 0)
        require_tail(tail)

        query = self.build_query({
            'follow': follow,
            'stdout': stdout,
            'stderr': stderr,
            'since': since,
            'until': until,
            'timestamps': timestamps,
            'tail': tail,
        })
        response = self.http.get(f'/containers/{id}/logs{query}')
        content = response.content

        if demux:
            out, err = frames.demux(content)
            return out.decode('utf-8', errors='replace'), err.decode('utf-8', errors='replace')
        return frames.strip_headers(content).decode('utf-8', errors='replace')

    def changes(self, id: str) -> List[Dict[str, Any]]:
        """Changes on a container's filesystem"""
        require_id(id, 'id')

        response = self.http.get(f'/containers/{id}/changes')
        result = self.get_json_response(response)
        return result or []

    def export(self, id: str) -> DockerStream:
        """Export a container filesystem as a tar stream"""
        require_id(id, 'id')

        response = self.http.get(f'/containers/{id}/export', stream=True)
        return self.get_stream_response(response)

    def stats(self, id: str, stream: bool = False,
              one_shot: bool = False) -> Union[Dict[str, Any], DockerStream]:
        """
        Get container resource usage

        Args:
            id: Container ID or name
            stream: Stream stats continuously (one JSON document per line)
            one_shot: Single snapshot without waiting for a second sample

        Returns:
            Stats mapping, or a stream when stream is True
        """
        require_id(id, 'id')
        require_bool(stream, 'stream')
        require_bool(one_shot, 'one_shot')
        if one_shot and stream:
            raise InvalidParameter("Option 'one_shot' requires stream to be False")

        query = self.build_query({'stream': stream, 'one-shot': one_shot})
        response = self.http.get(f'/containers/{id}/stats{query}', stream=stream)

        if stream:
            return self.get_stream_response(response)
        return self.get_json_response(response)

    def resize(self, id: str, height: int, width: int):
        """Resize a container TTY"""
        require_id(id, 'id')
        require_int_range(height, 'height', 1)
        require_int_range(width, 'width', 1)

        query = self.build_query({'h': height, 'w': width})
        self.http.post(f'/containers/{id}/resize{query}')

    def start(self, id: str, detach_keys: Optional[str] = None):
        """Start a container"""
        require_id(id, 'id')

        query = self.build_query({'detachKeys': detach_keys})
        self.http.post(f'/containers/{id}/start{query}')

    def stop(self, id: str, timeout: Optional[int] = None, signal: Optional[str] = None):
        """
        Stop a container

        Args:
            id: Container ID or name
            timeout: Seconds to wait before killing
            signal: Signal to send instead of the container's StopSignal
        """
        require_id(id, 'id')
        require_int_range(timeout, 'timeout', 0)
        if signal is not None:
            require_signal(signal, 'signal')

        query = self.build_query({'signal': signal, 't': timeout})
        self.http.post(f'/containers/{id}/stop{query}')

    def restart(self, id: str, timeout: Optional[int] = None, signal: Optional[str] = None):
        """Restart a container"""
        require_id(id, 'id')
        require_int_range(timeout, 'timeout', 0)
        if signal is not None:
            require_signal(signal, 'signal')

        query = self.build_query({'signal': signal, 't': timeout})
        self.http.post(f'/containers/{id}/restart{query}')

    def kill(self, id: str, signal: str = 'SIGKILL'):
        """Kill a container"""
        require_id(id, 'id')
        require_signal(signal, 'signal')

        query = self.build_query({'signal': signal})
        self.http.post(f'/containers/{id}/kill{query}')

    def update(self, id: str, config: Union[ContainerUpdateRequest, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Change resource limits and restart policy of a container

        Args:
            id: Container ID or name
            config: ContainerUpdateRequest or the equivalent mapping

        Returns:
            {'Warnings': [...]}
        """
        require_id(id, 'id')
        body = config.to_dict() if isinstance(config, ContainerUpdateRequest) else config
        require_mapping(body, 'config', allow_empty=False)

        if isinstance(body.get('RestartPolicy'), dict):
            require_enum(body['RestartPolicy'].get('Name'),
                         ('', 'no', 'always', 'unless-stopped', 'on-failure'),
                         'RestartPolicy.Name')

        response = self.http.post(f'/containers/{id}/update', body=self.json_body(body))
        return self.get_json_response(response)

    def rename(self, id: str, name: str):
        """Rename a container"""
        require_id(id, 'id')
        require_string(name, 'name')
        if not CONTAINER_NAME_PATTERN.fullmatch(name):
            raise InvalidParameter("Container name must match /?[a-zA-Z0-9][a-zA-Z0-9_.-]+")

        query = self.build_query({'name': name})
        self.http.post(f'/containers/{id}/rename{query}')

    def pause(self, id: str):
        """Pause a container"""
        require_id(id, 'id')
        self.http.post(f'/containers/{id}/pause')

    def unpause(self, id: str):
        """Unpause a container"""
        require_id(id, 'id')
        self.http.post(f'/containers/{id}/unpause')

    def attach(self, id: str, detach_keys: Optional[str] = None, logs: Optional[bool] = None,
               stream: Optional[bool] = None, stdin: Optional[bool] = None,
               stdout: Optional[bool] = None, stderr: Optional[bool] = None) -> DockerStream:
        """
        Attach to a container

        Returns:
            Raw output stream; use frames.iter_frames() to split stdout/stderr
        """
        require_id(id, 'id')
        for option, value in (('logs', logs), ('stream', stream), ('stdin', stdin),
                              ('stdout', stdout), ('stderr', stderr)):
            require_bool(value, option)

        query = self.build_query({
            'detachKeys': detach_keys,
            'logs': logs,
            'stream': stream,
            'stdin': stdin,
            'stdout': stdout,
            'stderr': stderr,
        })
        response = self.http.post(f'/containers/{id}/attach{query}', stream=True)
        return self.get_stream_response(response)

    def wait(self, id: str, condition: str = 'not-running') -> Dict[str, Any]:
        """
        Block until a container stops

        Returns:
            {'StatusCode': ..., 'Error': ...}
        """
        require_id(id, 'id')
        require_enum(condition, WAIT_CONDITIONS, 'condition')

        query = self.build_query({'condition': condition})
        response = self.http.post(f'/containers/{id}/wait{query}')
        return self.get_json_response(response)

    def remove(self, id: str, v: bool = False, force: bool = False, link: bool = False):
        """
        Remove a container

        Args:
            id: Container ID or name
            v: Remove anonymous volumes
            force: Kill a running container first
            link: Remove the specified link instead of the container
        """
        require_id(id, 'id')

        query = self.build_query({'v': v, 'force': force, 'link': link})
        self.http.delete(f'/containers/{id}{query}')

    def get_archive_info(self, id: str, path: str) -> Dict[str, Any]:
        """
        Stat a path inside a container

        Returns:
            Decoded X-Docker-Container-Path-Stat header (name, size, mode, mtime, linkTarget)
        """
        require_id(id, 'id')
        require_string(path, 'path')

        query = self.build_query({'path': path})
        response = self.http.head(f'/containers/{id}/archive{query}')

        stat = response.header(PATH_STAT_HEADER)
        if not stat:
            return {}
        try:
            return json.loads(base64.b64decode(stat).decode('utf-8'))
        except (binascii.Error, ValueError) as e:
            raise TransportError(f"Invalid {PATH_STAT_HEADER} header: {e}") from e

    def get_archive(self, id: str, path: str) -> DockerStream:
        """Tar stream of a path inside a container"""
        require_id(id, 'id')
        require_string(path, 'path')

        query = self.build_query({'path': path})
        response = self.http.get(f'/containers/{id}/archive{query}', stream=True)
        return self.get_stream_response(response)

    def put_archive(self, id: str, path: str, archive: bytes,
                    no_overwrite_dir_non_dir: bool = False, copy_uid_gid: bool = False):
        """
        Extract a tar archive into a directory inside a container

        Args:
            id: Container ID or name
            path: Destination directory (must exist)
            archive: Tar archive bytes
            no_overwrite_dir_non_dir: Refuse to replace a directory with a file and vice versa
            copy_uid_gid: Copy UID/GID from the archive entries
        """
        require_id(id, 'id')
        require_string(path, 'path')
        require_non_empty(archive, 'archive')

        query = self.build_query({
            'path': path,
            'noOverwriteDirNonDir': no_overwrite_dir_non_dir,
            'copyUIDGID': copy_uid_gid,
        })
        self.http.put(f'/containers/{id}/archive{query}',
                      body=self.binary_body(archive, 'application/x-tar'))

    def prune(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Delete stopped containers

        Returns:
            {'ContainersDeleted': [...], 'SpaceReclaimed': ...}
        """
        filters = require_filters(filters, PRUNE_FILTERS)

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.post(f'/containers/prune{query}')
        return self.get_json_response(response)
