"""
Container create/update request models

Both requests are immutable: every setter returns a new request and leaves
the original untouched. `to_dict()` gives the body sent to the daemon.
"""

import copy
from typing import Any, Dict, Iterable, List, Optional, Union


def _with_field(request, key: str, value: Any):
    clone = request.__class__.__new__(request.__class__)
    clone._fields = copy.deepcopy(request._fields)
    clone._fields[key] = value
    return clone


def _env_entries(env: Union[Dict[str, Any], Iterable[str]]) -> List[str]:
    if isinstance(env, dict):
        return [f"{key}={value}" for key, value in env.items()]
    return list(env)


class ContainerCreateRequest:
    """Body of POST /containers/create"""

    def __init__(self, image: str):
        self._fields: Dict[str, Any] = {'Image': image}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContainerCreateRequest':
        """Rebuild a request from a mapping produced by to_dict()"""
        request = cls(data.get('Image'))
        request._fields = copy.deepcopy(dict(data))
        return request

    @property
    def image(self) -> str:
        return self._fields.get('Image')

    def set_hostname(self, hostname: str) -> 'ContainerCreateRequest':
        return _with_field(self, 'Hostname', hostname)

    def set_domainname(self, domainname: str) -> 'ContainerCreateRequest':
        return _with_field(self, 'Domainname', domainname)

    def set_user(self, user: str) -> 'ContainerCreateRequest':
        return _with_field(self, 'User', user)

    def set_attach_stdin(self, attach: bool) -> 'ContainerCreateRequest':
        return _with_field(self, 'AttachStdin', attach)

    def set_attach_stdout(self, attach: bool) -> 'ContainerCreateRequest':
        return _with_field(self, 'AttachStdout', attach)

    def set_attach_stderr(self, attach: bool) -> 'ContainerCreateRequest':
        return _with_field(self, 'AttachStderr', attach)

    def set_tty(self, tty: bool) -> 'ContainerCreateRequest':
        return _with_field(self, 'Tty', tty)

    def set_open_stdin(self, open_stdin: bool) -> 'ContainerCreateRequest':
        return _with_field(self, 'OpenStdin', open_stdin)

    def set_stdin_once(self, once: bool) -> 'ContainerCreateRequest':
        return _with_field(self, 'StdinOnce', once)

    def set_env(self, env: Union[Dict[str, Any], Iterable[str]]) -> 'ContainerCreateRequest':
        """
        Replace the environment

        Args:
            env: Mapping of variables or a list of 'KEY=value' strings
        """
        return _with_field(self, 'Env', _env_entries(env))

    def add_env(self, key: str, value: Any) -> 'ContainerCreateRequest':
        """Append one 'KEY=value' entry"""
        env = list(self._fields.get('Env', []))
        env.append(f"{key}={value}")
        return _with_field(self, 'Env', env)

    def set_cmd(self, cmd: Iterable[str]) -> 'ContainerCreateRequest':
        return _with_field(self, 'Cmd', list(cmd))

    def set_entrypoint(self, entrypoint: Iterable[str]) -> 'ContainerCreateRequest':
        return _with_field(self, 'Entrypoint', list(entrypoint))

    def set_working_dir(self, working_dir: str) -> 'ContainerCreateRequest':
        return _with_field(self, 'WorkingDir', working_dir)

    def set_labels(self, labels: Dict[str, str]) -> 'ContainerCreateRequest':
        return _with_field(self, 'Labels', dict(labels))

    def add_label(self, key: str, value: str) -> 'ContainerCreateRequest':
        labels = dict(self._fields.get('Labels', {}))
        labels[key] = value
        return _with_field(self, 'Labels', labels)

    def set_exposed_ports(self, ports: Iterable[str]) -> 'ContainerCreateRequest':
        """Ports as 'port/proto' strings, e.g. ['80/tcp', '53/udp']"""
        return _with_field(self, 'ExposedPorts', {port: {} for port in ports})

    def set_volumes(self, volumes: Iterable[str]) -> 'ContainerCreateRequest':
        return _with_field(self, 'Volumes', {volume: {} for volume in volumes})

    def set_network_disabled(self, disabled: bool) -> 'ContainerCreateRequest':
        return _with_field(self, 'NetworkDisabled', disabled)

    def set_mac_address(self, mac_address: str) -> 'ContainerCreateRequest':
        return _with_field(self, 'MacAddress', mac_address)

    def set_on_build(self, on_build: Iterable[str]) -> 'ContainerCreateRequest':
        return _with_field(self, 'OnBuild', list(on_build))

    def set_stop_signal(self, signal: str) -> 'ContainerCreateRequest':
        return _with_field(self, 'StopSignal', signal)

    def set_stop_timeout(self, timeout: int) -> 'ContainerCreateRequest':
        return _with_field(self, 'StopTimeout', timeout)

    def set_shell(self, shell: Iterable[str]) -> 'ContainerCreateRequest':
        return _with_field(self, 'Shell', list(shell))

    def set_healthcheck(self, healthcheck: Dict[str, Any]) -> 'ContainerCreateRequest':
        return _with_field(self, 'Healthcheck', dict(healthcheck))

    def set_host_config(self, host_config: Dict[str, Any]) -> 'ContainerCreateRequest':
        return _with_field(self, 'HostConfig', dict(host_config))

    def set_networking_config(self, networking_config: Dict[str, Any]) -> 'ContainerCreateRequest':
        return _with_field(self, 'NetworkingConfig', dict(networking_config))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._fields)

    def __eq__(self, other):
        if not isinstance(other, ContainerCreateRequest):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self):
        return f"<ContainerCreateRequest: {self.image}>"


class ContainerUpdateRequest:
    """Body of POST /containers/{id}/update"""

    def __init__(self):
        self._fields: Dict[str, Any] = {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContainerUpdateRequest':
        request = cls()
        request._fields = copy.deepcopy(dict(data))
        return request

    def set_cpu_shares(self, cpu_shares: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CpuShares', cpu_shares)

    def set_memory(self, memory: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'Memory', memory)

    def set_cgroup_parent(self, cgroup_parent: str) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CgroupParent', cgroup_parent)

    def set_blkio_weight(self, blkio_weight: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'BlkioWeight', blkio_weight)

    def set_cpu_period(self, cpu_period: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CpuPeriod', cpu_period)

    def set_cpu_quota(self, cpu_quota: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CpuQuota', cpu_quota)

    def set_cpu_realtime_period(self, period: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CpuRealtimePeriod', period)

    def set_cpu_realtime_runtime(self, runtime: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CpuRealtimeRuntime', runtime)

    def set_cpuset_cpus(self, cpuset_cpus: str) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CpusetCpus', cpuset_cpus)

    def set_cpuset_mems(self, cpuset_mems: str) -> 'ContainerUpdateRequest':
        return _with_field(self, 'CpusetMems', cpuset_mems)

    def set_memory_reservation(self, memory_reservation: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'MemoryReservation', memory_reservation)

    def set_memory_swap(self, memory_swap: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'MemorySwap', memory_swap)

    def set_memory_swappiness(self, memory_swappiness: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'MemorySwappiness', memory_swappiness)

    def set_nano_cpus(self, nano_cpus: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'NanoCpus', nano_cpus)

    def set_oom_kill_disable(self, disable: bool) -> 'ContainerUpdateRequest':
        return _with_field(self, 'OomKillDisable', disable)

    def set_init(self, init: bool) -> 'ContainerUpdateRequest':
        return _with_field(self, 'Init', init)

    def set_pids_limit(self, pids_limit: int) -> 'ContainerUpdateRequest':
        return _with_field(self, 'PidsLimit', pids_limit)

    def set_restart_policy(self, name: str,
                           maximum_retry_count: Optional[int] = None) -> 'ContainerUpdateRequest':
        """
        Args:
            name: '', 'no', 'always', 'unless-stopped' or 'on-failure'
            maximum_retry_count: Retries for 'on-failure'
        """
        policy: Dict[str, Any] = {'Name': name}
        if maximum_retry_count is not None:
            policy['MaximumRetryCount'] = maximum_retry_count
        return _with_field(self, 'RestartPolicy', policy)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._fields)

    def __eq__(self, other):
        if not isinstance(other, ContainerUpdateRequest):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self):
        return f"<ContainerUpdateRequest: {sorted(self._fields)}>"
