"""
Docker Images API
"""

import os
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .base import BaseClient, encode_registry_auth, path_param
from .exceptions import InvalidParameter
from .http_client import DockerStream
from .tar_utils import load_build_context
from .validators import (
    require_bool,
    require_filter_bool,
    require_filters,
    require_int_range,
    require_mapping,
    require_non_empty,
    require_string,
    require_string_list,
    require_string_map,
)

LIST_FILTERS = ('before', 'dangling', 'label', 'reference', 'since', 'until')
BUILD_PRUNE_FILTERS = ('until', 'id', 'parent', 'type', 'description', 'inuse', 'shared', 'private')
SEARCH_FILTERS = ('is-automated', 'is-official', 'stars')
PRUNE_FILTERS = ('dangling', 'until', 'label')

# Build options sent as-is in the /build query string
BUILD_OPTIONS = (
    'dockerfile', 't', 'extrahosts', 'remote', 'q', 'nocache', 'cachefrom', 'pull',
    'rm', 'forcerm', 'memory', 'memswap', 'cpushares', 'cpusetcpus', 'cpuperiod',
    'cpuquota', 'buildargs', 'shmsize', 'squash', 'labels', 'networkmode',
    'platform', 'target', 'outputs',
)


def split_reference(image: str) -> Tuple[str, Optional[str]]:
    """
    Split 'name:tag' or 'name@digest' into (name, tag or digest)

    A ':' before the last '/' belongs to a registry port, not a tag.

    Returns:
        (name, None) when the reference carries neither
    """
    if '@' in image:
        name, digest = image.split('@', 1)
        return name, digest

    name, sep, tag = image.rpartition(':')
    if not sep or '/' in tag:
        return image, None
    return name, tag


class ImageClient(BaseClient):
    """Image operations"""

    def list(self, all: Optional[bool] = None, filters: Optional[Dict[str, Any]] = None,
             shared_size: Optional[bool] = None, digests: Optional[bool] = None) -> List[Dict[str, Any]]:
        """
        List images

        Args:
            all: Show intermediate images too
            filters: before, dangling, label, reference, since, until
            shared_size: Compute SharedSize
            digests: Include digest information

        Returns:
            List of image summaries
        """
        require_bool(all, 'all')
        require_bool(shared_size, 'shared_size')
        require_bool(digests, 'digests')
        filters = require_filters(filters, LIST_FILTERS)
        require_filter_bool(filters, 'dangling')

        query = self.build_query({
            'all': all,
            'filters': self.encode_filters(filters),
            'shared-size': shared_size,
            'digests': digests,
        })
        response = self.http.get(f'/images/json{query}')
        return self.get_json_response(response)

    def build(self, context: Union[bytes, str], auth: Optional[Dict[str, Any]] = None,
              **options) -> DockerStream:
        """
        Build an image

        Args:
            context: Tar bytes, a context directory, a tar file or a Dockerfile path
            auth: Registry configs keyed by registry host (X-Registry-Config)
            **options: dockerfile, t, nocache, pull, rm, buildargs, labels, ...

        Returns:
            Stream of JSON progress messages
        """
        unknown = [key for key in options if key not in BUILD_OPTIONS]
        if unknown:
            raise InvalidParameter(
                f"Unknown build option(s): {', '.join(sorted(unknown))}"
            )

        if isinstance(context, str) and not os.path.exists(context):
            raise InvalidParameter(f"Build context not found: {context}")
        if not isinstance(context, (bytes, bytearray, str)):
            raise InvalidParameter("Build context must be tar bytes or a path")

        for flag in ('q', 'nocache', 'pull', 'rm', 'forcerm', 'squash'):
            require_bool(options.get(flag), flag)
        for field in ('memory', 'memswap', 'cpushares', 'cpuperiod', 'cpuquota', 'shmsize'):
            require_int_range(options.get(field), field, -1 if field == 'memswap' else 0)
        if options.get('buildargs') is not None:
            require_string_map(options['buildargs'], 'buildargs')
        if options.get('labels') is not None:
            require_string_map(options['labels'], 'labels')
        if options.get('cachefrom') is not None:
            require_string_list(options['cachefrom'], 'cachefrom')

        params = {'dockerfile': 'Dockerfile', 'rm': True}
        params.update(options)
        ordered = {key: params.get(key) for key in BUILD_OPTIONS}

        headers = {'X-Registry-Config': encode_registry_auth(auth)} if auth else None
        body = self.binary_body(load_build_context(context), 'application/x-tar')
        response = self.http.post(f'/build{self.build_query(ordered)}', body=body,
                                  headers=headers, stream=True)
        return self.get_stream_response(response)

    def build_prune(self, keep_storage: Optional[int] = None, all: Optional[bool] = None,
                    filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Delete builder cache

        Returns:
            {'CachesDeleted': [...], 'SpaceReclaimed': ...}
        """
        require_int_range(keep_storage, 'keep_storage', 0)
        require_bool(all, 'all')
        filters = require_filters(filters, BUILD_PRUNE_FILTERS)

        query = self.build_query({
            'keep-storage': keep_storage,
            'all': all,
            'filters': self.encode_filters(filters),
        })
        response = self.http.post(f'/build/prune{query}')
        return self.get_json_response(response)

    def create(self, from_image: Optional[str] = None, from_src: Optional[str] = None,
               repo: Optional[str] = None, tag: Optional[str] = None,
               message: Optional[str] = None, changes: Optional[Iterable[str]] = None,
               platform: Optional[str] = None, auth: Optional[Dict[str, Any]] = None,
               image_data: Optional[bytes] = None) -> DockerStream:
        """
        Pull an image or import one from a source

        Args:
            from_image: Image to pull (e.g. 'nginx')
            from_src: Source to import ('-' means image_data)
            repo: Repository name for an import
            tag: Tag or digest
            message: Commit message for an import
            changes: Dockerfile instructions applied on import
            platform: os[/arch[/variant]]
            auth: Registry credentials
            image_data: Root filesystem tar when from_src is '-'

        Returns:
            Stream of JSON progress messages
        """
        if not from_image and not from_src:
            raise InvalidParameter("Either 'from_image' or 'from_src' is required")
        if from_src == '-' and not image_data:
            raise InvalidParameter("Parameter 'image_data' is required when from_src is '-'")
        if changes is not None:
            changes = list(changes)
            require_string_list(changes, 'changes')

        query = self.build_query({
            'fromImage': from_image,
            'fromSrc': from_src,
            'repo': repo,
            'tag': tag,
            'message': message,
            'changes': changes,
            'platform': platform,
        })
        body = self.binary_body(image_data, 'application/x-tar') if image_data else None
        response = self.http.post(f'/images/create{query}', body=body,
                                  headers=self.registry_auth_headers(auth), stream=True)
        return self.get_stream_response(response)

    def pull(self, image: str, tag: Optional[str] = None, platform: Optional[str] = None,
             auth: Optional[Dict[str, Any]] = None) -> DockerStream:
        """
        Pull an image (shorthand for create(from_image=...))

        Args:
            image: Image reference; may carry ':tag' or '@digest'
            tag: Tag to pull when the reference has none (default: 'latest')
            platform: os[/arch[/variant]]
            auth: Registry credentials

        Returns:
            Stream of JSON progress messages
        """
        require_string(image, 'image')

        name, ref_tag = split_reference(image)
        if ref_tag is not None:
            if tag is not None and tag != ref_tag:
                raise InvalidParameter(
                    f"Image reference '{image}' already names '{ref_tag}', got tag '{tag}'"
                )
            tag = ref_tag

        return self.create(from_image=name, tag=tag or 'latest', platform=platform, auth=auth)

    def inspect(self, name: str) -> Dict[str, Any]:
        """Inspect an image"""
        require_string(name, 'name')

        response = self.http.get(f'/images/{path_param(name)}/json')
        return self.get_json_response(response)

    def history(self, name: str) -> List[Dict[str, Any]]:
        """Parent layers of an image"""
        require_string(name, 'name')

        response = self.http.get(f'/images/{path_param(name)}/history')
        return self.get_json_response(response) or []

    def push(self, name: str, tag: Optional[str] = None,
             auth: Optional[Dict[str, Any]] = None) -> DockerStream:
        """
        Push an image to a registry

        Args:
            name: Image name without tag
            tag: Tag to push (all tags when omitted)
            auth: Registry credentials

        Returns:
            Stream of JSON progress messages
        """
        require_string(name, 'name')

        query = self.build_query({'tag': tag})
        headers = self.registry_auth_headers(auth or {})
        response = self.http.post(f'/images/{path_param(name)}/push{query}',
                                  headers=headers, stream=True)
        return self.get_stream_response(response)

    def tag(self, name: str, repo: str, tag: Optional[str] = None):
        """Tag an image into a repository"""
        require_string(name, 'name')
        require_string(repo, 'repo')

        query = self.build_query({'repo': repo, 'tag': tag})
        self.http.post(f'/images/{path_param(name)}/tag{query}')

    def remove(self, name: str, force: bool = False, noprune: bool = False) -> List[Dict[str, Any]]:
        """
        Remove an image

        Returns:
            List of {'Untagged': ...} / {'Deleted': ...} entries
        """
        require_string(name, 'name')

        query = self.build_query({'force': force, 'noprune': noprune})
        response = self.http.delete(f'/images/{path_param(name)}{query}')
        return self.get_json_response(response) or []

    def search(self, term: str, limit: Optional[int] = None,
               filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Search Docker Hub"""
        require_string(term, 'term')
        require_int_range(limit, 'limit', 1)
        filters = require_filters(filters, SEARCH_FILTERS)
        require_filter_bool(filters, 'is-automated')
        require_filter_bool(filters, 'is-official')

        query = self.build_query({
            'term': term,
            'limit': limit,
            'filters': self.encode_filters(filters),
        })
        response = self.http.get(f'/images/search{query}')
        return self.get_json_response(response) or []

    def prune(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Delete unused images

        Returns:
            {'ImagesDeleted': [...], 'SpaceReclaimed': ...}
        """
        filters = require_filters(filters, PRUNE_FILTERS)
        require_filter_bool(filters, 'dangling')

        query = self.build_query({'filters': self.encode_filters(filters)})
        response = self.http.post(f'/images/prune{query}')
        return self.get_json_response(response)

    def commit(self, container: str, repo: Optional[str] = None, tag: Optional[str] = None,
               comment: Optional[str] = None, author: Optional[str] = None,
               pause: bool = True, changes: Optional[str] = None,
               config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Create an image from a container

        Args:
            container: Container ID or name
            repo: Repository name
            tag: Tag name
            comment: Commit message
            author: Author, e.g. 'John Hannibal Smith <hannibal@a-team.com>'
            pause: Pause the container while committing
            changes: Dockerfile instructions to apply
            config: Container config for the new image

        Returns:
            {'Id': ...}
        """
        require_string(container, 'container')
        require_bool(pause, 'pause')
        if config is not None:
            require_mapping(config, 'config')

        query = self.build_query({
            'container': container,
            'repo': repo,
            'tag': tag,
            'comment': comment,
            'author': author,
            'pause': pause,
            'changes': changes,
        })
        response = self.http.post(f'/commit{query}', body=self.json_body(config or {}))
        return self.get_json_response(response)

    def export(self, name: str) -> DockerStream:
        """Tarball of an image with all its layers"""
        require_string(name, 'name')

        response = self.http.get(f'/images/{path_param(name)}/get', stream=True)
        return self.get_stream_response(response)

    def export_multiple(self, names: Iterable[str]) -> DockerStream:
        """Tarball of several images"""
        names = list(names)
        require_non_empty(names, 'names')
        require_string_list(names, 'names')

        query = self.build_query({'names': ','.join(names)})
        response = self.http.get(f'/images/get{query}', stream=True)
        return self.get_stream_response(response)

    def import_image(self, tarball: bytes, quiet: bool = False) -> DockerStream:
        """
        Load images from a tarball made by export()

        Returns:
            Stream of JSON progress messages
        """
        require_non_empty(tarball, 'tarball')

        query = self.build_query({'quiet': quiet})
        response = self.http.post(f'/images/load{query}',
                                  body=self.binary_body(tarball, 'application/x-tar'),
                                  stream=True)
        return self.get_stream_response(response)
