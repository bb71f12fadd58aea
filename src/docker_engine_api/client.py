"""
Docker Client - Main API entry point
"""

import logging
from typing import Any, Dict, Optional

from .config import ClientConfig
from .configs import ConfigClient
from .containers import ContainerClient
from .exceptions import DockerException
from .exec import ExecClient
from .http_client import DockerHTTPClient
from .images import ImageClient
from .networks import NetworkClient
from .nodes import NodeClient
from .plugins import PluginClient
from .secrets import SecretClient
from .services import ServiceClient
from .swarm import SwarmClient
from .system import SystemClient
from .tasks import TaskClient
from .volumes import VolumeClient


class DockerClient:
    """
    Docker Engine API client

    One resource client per API group, all sharing a single transport.
    """

    def __init__(self, base_url: Optional[str] = None, options: Optional[Dict[str, Any]] = None,
                 logger: Optional[logging.Logger] = None, config: Optional[ClientConfig] = None,
                 http: Optional[DockerHTTPClient] = None):
        """
        Initialize Docker client

        Args:
            base_url: unix:///path, tcp://host:port, http(s)://host:port (default: auto-detect)
            options: timeout, connect_timeout, headers, verify, cert, ssl_key
            logger: Logger for request/response tracing
            config: Pre-built ClientConfig (base_url and options are ignored)
            http: Pre-built transport (config, base_url and options are ignored)
        """
        if http is not None:
            self.config = http.config
            self.http = http
        else:
            self.config = config or ClientConfig(base_url, options)
            self.http = DockerHTTPClient(self.config, logger=logger)

        self.containers = ContainerClient(self.http)
        self.images = ImageClient(self.http)
        self.networks = NetworkClient(self.http)
        self.volumes = VolumeClient(self.http)
        self.system = SystemClient(self.http)
        self.exec = ExecClient(self.http)
        self.swarm = SwarmClient(self.http)
        self.nodes = NodeClient(self.http)
        self.services = ServiceClient(self.http)
        self.tasks = TaskClient(self.http)
        self.secrets = SecretClient(self.http)
        self.configs = ConfigClient(self.http)
        self.plugins = PluginClient(self.http)

    @classmethod
    def from_env(cls, options: Optional[Dict[str, Any]] = None,
                 logger: Optional[logging.Logger] = None) -> 'DockerClient':
        """Client configured from DOCKER_HOST, DOCKER_TLS_VERIFY and DOCKER_CERT_PATH"""
        return cls(logger=logger, config=ClientConfig.from_env(options=options))

    def version(self) -> Dict[str, Any]:
        """Get Docker version info"""
        return self.system.version()

    def info(self) -> Dict[str, Any]:
        """Get Docker system info"""
        return self.system.info()

    def ping(self) -> bool:
        """Whether the daemon answers /_ping"""
        try:
            return self.system.ping() == 'OK'
        except DockerException as e:
            self.http.logger.debug(f"Docker ping failed: {e}")
            return False

    def close(self):
        """Close client (connections are per request, nothing is held open)"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return f"<DockerClient: {self.config.base_url}>"
