import io
import tarfile

from docker_engine_api.tar_utils import (
    create_build_context,
    create_tar_from_file,
    load_build_context,
)


def names(data):
    with tarfile.open(fileobj=io.BytesIO(data)) as tar:
        return sorted(tar.getnames())


def test_create_tar_from_file(tmp_path):
    path = tmp_path / 'app.conf'
    path.write_text('listen 80;\n')

    assert names(create_tar_from_file(str(path))) == ['app.conf']
    assert names(create_tar_from_file(str(path), arcname='etc/app.conf')) == ['etc/app.conf']


def test_build_context_is_relative(tmp_path):
    (tmp_path / 'Dockerfile').write_text('FROM alpine\n')
    (tmp_path / 'src').mkdir()
    (tmp_path / 'src' / 'main.py').write_text('print(1)\n')

    assert names(create_build_context(str(tmp_path))) == ['Dockerfile', 'src/main.py']


def test_load_build_context(tmp_path):
    dockerfile = tmp_path / 'Custom.dockerfile'
    dockerfile.write_text('FROM alpine\n')

    assert names(load_build_context(str(dockerfile))) == ['Dockerfile']
    assert names(load_build_context(str(tmp_path))) == ['Custom.dockerfile']

    archive = tmp_path / 'context.tar'
    archive.write_bytes(create_tar_from_file(str(dockerfile), arcname='Dockerfile'))
    assert load_build_context(str(archive)) == archive.read_bytes()

    assert load_build_context(b'raw') == b'raw'
