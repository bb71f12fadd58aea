import base64
import io
import json
import tarfile

import pytest

from docker_engine_api.exceptions import InvalidParameter


def decode_auth(value):
    return json.loads(base64.urlsafe_b64decode(value.encode('ascii')))


def test_list(docker, recorder):
    recorder.queue([{'Id': 'sha256:abc'}])

    assert docker.images.list(all=False, filters={'dangling': True}, shared_size=True) == [
        {'Id': 'sha256:abc'},
    ]
    assert recorder.last.query == {
        'all': 'false',
        'filters': '{"dangling": ["true"]}',
        'shared-size': 'true',
    }

    with pytest.raises(InvalidParameter):
        docker.images.list(filters={'dangling': 'yes'})
    with pytest.raises(InvalidParameter):
        docker.images.list(filters={'status': 'x'})


def test_build_from_directory(docker, recorder, tmp_path):
    (tmp_path / 'Dockerfile').write_text('FROM alpine\nCOPY app.sh /\n')
    (tmp_path / 'app.sh').write_text('echo hi\n')
    recorder.queue(b'{"stream": "Step 1/2 : FROM alpine"}\n')

    stream = docker.images.build(str(tmp_path), t='app:1', buildargs={'VERSION': '1'},
                                 nocache=True,
                                 auth={'registry.example.com': {'username': 'u', 'password': 'p'}})

    assert list(stream.iter_json()) == [{'stream': 'Step 1/2 : FROM alpine'}]
    request = recorder.last
    assert request.route == '/build'
    assert request.stream is True
    assert request.query == {
        'dockerfile': 'Dockerfile',
        't': 'app:1',
        'nocache': 'true',
        'rm': 'true',
        'buildargs': '{"VERSION": "1"}',
    }
    assert request.body.content_type == 'application/x-tar'
    with tarfile.open(fileobj=io.BytesIO(request.body.content)) as tar:
        assert sorted(tar.getnames()) == ['Dockerfile', 'app.sh']
    assert decode_auth(request.headers['X-Registry-Config']) == {
        'registry.example.com': {'username': 'u', 'password': 'p'},
    }


def test_build_validation(docker, recorder, tmp_path):
    with pytest.raises(InvalidParameter) as excinfo:
        docker.images.build(b'tar', tag='oops')
    assert 'tag' in str(excinfo.value)

    with pytest.raises(InvalidParameter):
        docker.images.build(str(tmp_path / 'missing'))
    with pytest.raises(InvalidParameter):
        docker.images.build(b'tar', nocache='yes')
    with pytest.raises(InvalidParameter):
        docker.images.build(b'tar', buildargs={'N': 1})
    with pytest.raises(InvalidParameter):
        docker.images.build(12)

    assert recorder.requests == []


def test_pull_sends_auth(docker, recorder):
    docker.images.pull('nginx', tag='1.27', auth={'username': 'u', 'password': 'p'}).close()

    assert recorder.last.route == '/images/create'
    assert recorder.last.query == {'fromImage': 'nginx', 'tag': '1.27'}
    assert decode_auth(recorder.last.headers['X-Registry-Auth']) == {'username': 'u', 'password': 'p'}


@pytest.mark.parametrize('image, expected', [
    ('nginx', {'fromImage': 'nginx', 'tag': 'latest'}),
    ('nginx:1.25', {'fromImage': 'nginx', 'tag': '1.25'}),
    ('registry.example.com:5000/app', {'fromImage': 'registry.example.com:5000/app', 'tag': 'latest'}),
    ('registry.example.com:5000/app:2', {'fromImage': 'registry.example.com:5000/app', 'tag': '2'}),
    ('nginx@sha256:' + 'a' * 64, {'fromImage': 'nginx', 'tag': 'sha256:' + 'a' * 64}),
])
def test_pull_keeps_reference_tag(docker, recorder, image, expected):
    docker.images.pull(image).close()

    assert recorder.last.query == expected


def test_pull_rejects_conflicting_tag(docker, recorder):
    docker.images.pull('nginx:1.25', tag='1.25').close()
    assert recorder.last.query == {'fromImage': 'nginx', 'tag': '1.25'}

    with pytest.raises(InvalidParameter):
        docker.images.pull('nginx:1.25', tag='1.27')
    assert len(recorder.requests) == 1


def test_create_import(docker, recorder):
    docker.images.create(from_src='-', repo='imported', changes=iter(['ENV A=b']),
                         image_data=b'rootfs').close()

    assert recorder.last.query == {
        'fromSrc': '-',
        'repo': 'imported',
        'changes': '["ENV A=b"]',
    }
    assert recorder.last.body.content == b'rootfs'

    with pytest.raises(InvalidParameter):
        docker.images.create()
    with pytest.raises(InvalidParameter):
        docker.images.create(from_src='-')


def test_push_always_sends_auth_header(docker, recorder):
    docker.images.push('registry.example.com/app', tag='v2').close()

    assert recorder.last.path == '/images/registry.example.com/app/push?tag=v2'
    assert decode_auth(recorder.last.headers['X-Registry-Auth']) == {}


def test_image_names_in_path(docker, recorder):
    recorder.queue({'Id': 'sha256:abc'})
    recorder.queue([{'Id': 'sha256:abc', 'CreatedBy': '/bin/sh'}])
    recorder.queue([{'Untagged': 'nginx:latest'}, {'Deleted': 'sha256:abc'}])

    docker.images.inspect('library/nginx:latest')
    docker.images.history('nginx')
    removed = docker.images.remove('nginx', force=True)
    docker.images.tag('nginx', 'registry.example.com/nginx', tag='mirror')

    assert removed == [{'Untagged': 'nginx:latest'}, {'Deleted': 'sha256:abc'}]
    assert [r.path for r in recorder.requests] == [
        '/images/library/nginx:latest/json',
        '/images/nginx/history',
        '/images/nginx?force=true&noprune=false',
        '/images/nginx/tag?repo=registry.example.com%2Fnginx&tag=mirror',
    ]


def test_search(docker, recorder):
    recorder.queue([{'name': 'alpine', 'star_count': 10000}])

    result = docker.images.search('alpine', limit=5, filters={'is-official': True})

    assert result[0]['name'] == 'alpine'
    assert recorder.last.query == {
        'term': 'alpine',
        'limit': '5',
        'filters': '{"is-official": ["true"]}',
    }


def test_commit(docker, recorder):
    recorder.queue({'Id': 'sha256:def'})

    result = docker.images.commit('web', repo='snapshots/web', tag='today',
                                  config={'Cmd': ['nginx']})

    assert result == {'Id': 'sha256:def'}
    assert recorder.last.route == '/commit'
    assert recorder.last.query == {
        'container': 'web',
        'repo': 'snapshots/web',
        'tag': 'today',
        'pause': 'true',
    }
    assert recorder.last.json == {'Cmd': ['nginx']}


def test_export_and_load(docker, recorder):
    recorder.queue(b'tar-bytes')

    assert docker.images.export('nginx').read() == b'tar-bytes'
    docker.images.export_multiple(['nginx', 'alpine']).close()
    assert recorder.last.path == '/images/get?names=nginx%2Calpine'

    docker.images.import_image(b'tar-bytes', quiet=True).close()
    assert recorder.last.path == '/images/load?quiet=true'
    assert recorder.last.body.content_type == 'application/x-tar'

    with pytest.raises(InvalidParameter):
        docker.images.export_multiple([])


def test_prune_and_build_prune(docker, recorder):
    recorder.queue({'ImagesDeleted': [], 'SpaceReclaimed': 0})
    recorder.queue({'CachesDeleted': [], 'SpaceReclaimed': 0})

    docker.images.prune(filters={'dangling': False})
    assert recorder.last.query == {'filters': '{"dangling": ["false"]}'}

    docker.images.build_prune(keep_storage=1024, all=True)
    assert recorder.last.path == '/build/prune?keep-storage=1024&all=true'
