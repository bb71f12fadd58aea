"""
Docker Tasks API
"""

from typing import Any, Dict, List, Optional, Union

from .base import BaseClient
from .http_client import DockerStream
from .validators import (
    require_bool,
    require_filter_enum,
    require_filters,
    require_id,
    require_log_time,
    require_tail,
)

LIST_FILTERS = ('id', 'label', 'name', 'node', 'service', 'desired-state')
DESIRED_STATES = ('running', 'shutdown', 'accepted')


def log_query(details: Optional[bool], follow: Optional[bool], stdout: bool, stderr: bool,
              since: Optional[Union[int, str]], until: Optional[Union[int, str]],
              timestamps: Optional[bool], tail: Union[str, int]) -> Dict[str, Any]:
    """Validated query parameters shared by the task and service log endpoints"""
    for option, value in (('details', details), ('follow', follow), ('stdout', stdout),
                          ('stderr', stderr), ('timestamps', timestamps)):
        require_bool(value, option)
    require_log_time(since, 'since')
    require_log_time(until, 'until')
    require_tail(tail)

    return {
        'details': details,
        'follow': follow,
        'stdout': stdout,
        'stderr': stderr,
        'since': since,
        'until': until,
        'timestamps': timestamps,
        'tail': tail,
    }


class TaskClient(BaseClient):
    """Swarm task operations"""

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List tasks

        Args:
            filters: id, label, name, node, service,
                     desired-state (running/shutdown/accepted)
        """
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_enum(filters, 'desired-state', DESIRED_STATES)

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.get(f'/tasks{query}')
        return self.get_json_response(response)

    def inspect(self, id: str) -> Dict[str, Any]:
        """Inspect a task"""
        require_id(id, 'id')

        response = self.http.get(f'/tasks/{id}')
        return self.get_json_response(response)

    def logs(self, id: str, details: Optional[bool] = None, follow: Optional[bool] = None,
             stdout: bool = True, stderr: bool = True,
             since: Optional[Union[int, str]] = None, until: Optional[Union[int, str]] = None,
             timestamps: Optional[bool] = None, tail: Union[str, int] = 'all') -> DockerStream:
        """
        Stream task logs

        Args:
            id: Task ID
            details: Show extra details provided to logs
            follow: Keep the stream open
            stdout: Return stdout
            stderr: Return stderr
            since: Unix time, ISO 8601 timestamp or relative duration ('10m')
            until: Same formats as since
            timestamps: Prefix lines with timestamps
            tail: Number of lines from the end, or 'all'

        Returns:
            Multiplexed log stream
        """
        require_id(id, 'id')
        query = self.build_query(log_query(details, follow, stdout, stderr, since, until,
                                           timestamps, tail))

        response = self.http.get(f'/tasks/{id}/logs{query}', stream=True)
        return self.get_stream_response(response)
