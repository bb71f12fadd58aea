"""
Docker Swarm API
"""

import re
from typing import Any, Dict

from .base import BaseClient
from .exceptions import InvalidParameter
from .validators import (
    require_bool,
    require_cidr,
    require_int_range,
    require_keys,
    require_mapping,
    require_string,
    require_string_list,
    require_string_map,
)

JOIN_TOKEN_PATTERN = re.compile(r'SWMTKN-1-[a-zA-Z0-9-]+')
UNLOCK_KEY_PATTERN = re.compile(r'SWMKEY-1-[a-zA-Z0-9]+')
RAFT_INT_FIELDS = (
    'SnapshotInterval', 'KeepOldSnapshots', 'LogEntriesForSlowFollowers',
    'ElectionTick', 'HeartbeatTick',
)


def validate_swarm_spec(spec: Dict[str, Any]):
    """Check the fields of a swarm Spec that are known to the client"""
    require_mapping(spec, 'Spec')

    if spec.get('Name') is not None:
        require_string(spec['Name'], 'Spec.Name')
    if spec.get('Labels') is not None:
        require_string_map(spec['Labels'], 'Labels')

    orchestration = spec.get('Orchestration')
    if orchestration is not None:
        require_mapping(orchestration, 'Orchestration')
        require_int_range(orchestration.get('TaskHistoryRetentionLimit'),
                          'TaskHistoryRetentionLimit', 0)

    raft = spec.get('Raft')
    if raft is not None:
        require_mapping(raft, 'Raft')
        for field in RAFT_INT_FIELDS:
            require_int_range(raft.get(field), f'Raft.{field}', 1)

    dispatcher = spec.get('Dispatcher')
    if dispatcher is not None:
        require_mapping(dispatcher, 'Dispatcher')
        require_int_range(dispatcher.get('HeartbeatPeriod'), 'Dispatcher.HeartbeatPeriod', 1)


class SwarmClient(BaseClient):
    """Swarm operations"""

    def inspect(self) -> Dict[str, Any]:
        """Inspect the swarm"""
        response = self.http.get('/swarm')
        return self.get_json_response(response)

    def init(self, config: Dict[str, Any]) -> str:
        """
        Initialize a new swarm

        Args:
            config: ListenAddr, AdvertiseAddr, DataPathAddr, DataPathPort,
                    DefaultAddrPool, SubnetSize, ForceNewCluster, Spec

        Returns:
            ID of the node that created the swarm
        """
        require_mapping(config, 'config')

        for field in ('ListenAddr', 'AdvertiseAddr', 'DataPathAddr'):
            if config.get(field) is not None:
                require_string(config[field], field)

        require_int_range(config.get('DataPathPort'), 'DataPathPort', 1, 65535)
        require_int_range(config.get('SubnetSize'), 'SubnetSize', 1, 32)
        require_bool(config.get('ForceNewCluster'), 'ForceNewCluster')

        pools = config.get('DefaultAddrPool')
        if pools is not None:
            require_string_list(pools, 'DefaultAddrPool')
            for index, pool in enumerate(pools):
                require_cidr(pool, f'DefaultAddrPool[{index}]', ipv4_only=True)

        if config.get('Spec') is not None:
            validate_swarm_spec(config['Spec'])

        response = self.http.post('/swarm/init', body=self.json_body(config))
        node_id = self.get_json_response(response)
        return node_id if isinstance(node_id, str) else ''

    def join(self, config: Dict[str, Any]):
        """
        Join an existing swarm

        Args:
            config: ListenAddr, AdvertiseAddr, RemoteAddrs and JoinToken are required
        """
        require_mapping(config, 'config')
        require_keys(config, ('ListenAddr', 'AdvertiseAddr', 'RemoteAddrs', 'JoinToken'), 'config')

        for field in ('ListenAddr', 'AdvertiseAddr', 'JoinToken', 'DataPathAddr'):
            if config.get(field) is not None:
                require_string(config[field], field)

        require_string_list(config['RemoteAddrs'], 'RemoteAddrs', allow_empty=False)
        for index, addr in enumerate(config['RemoteAddrs']):
            require_string(addr, f'RemoteAddrs[{index}]')

        if not JOIN_TOKEN_PATTERN.fullmatch(config['JoinToken']):
            raise InvalidParameter("Invalid join token format")

        self.http.post('/swarm/join', body=self.json_body(config))

    def leave(self, force: bool = False):
        """Leave the swarm"""
        require_bool(force, 'force')

        query = self.build_query({'force': force})
        self.http.post(f'/swarm/leave{query}')

    def update(self, version: int, spec: Dict[str, Any], rotate_worker_token: bool = False,
               rotate_manager_token: bool = False, rotate_manager_unlock_key: bool = False):
        """
        Update the swarm

        Args:
            version: Current Version.Index of the swarm object
            spec: New swarm Spec
            rotate_worker_token: Rotate the worker join token
            rotate_manager_token: Rotate the manager join token
            rotate_manager_unlock_key: Rotate the manager unlock key
        """
        if version is None:
            raise InvalidParameter("Parameter 'version' is required")
        require_int_range(version, 'version', 0)
        require_mapping(spec, 'spec')
        if spec:
            validate_swarm_spec(spec)

        query = self.build_query({
            'version': version,
            'rotateWorkerToken': rotate_worker_token,
            'rotateManagerToken': rotate_manager_token,
            'rotateManagerUnlockKey': rotate_manager_unlock_key,
        })
        self.http.post(f'/swarm/update{query}', body=self.json_body(spec))

    def unlockkey(self) -> Dict[str, Any]:
        """
        Get the unlock key

        Returns:
            {'UnlockKey': ...}
        """
        response = self.http.get('/swarm/unlockkey')
        return self.get_json_response(response)

    def unlock(self, config: Dict[str, Any]):
        """
        Unlock a locked manager

        Args:
            config: {'UnlockKey': 'SWMKEY-1-...'}
        """
        require_mapping(config, 'config')
        if config.get('UnlockKey') is None:
            raise InvalidParameter("UnlockKey is required")
        require_string(config['UnlockKey'], 'UnlockKey')
        if not UNLOCK_KEY_PATTERN.fullmatch(config['UnlockKey']):
            raise InvalidParameter("Invalid unlock key format")

        self.http.post('/swarm/unlock', body=self.json_body(config))
