import pytest

from docker_engine_api.exceptions import InvalidParameter

EXEC_ID = 'a1' * 32


def test_create(docker, recorder):
    recorder.queue({'Id': EXEC_ID}, status=201)
    config = {
        'Cmd': ['sh', '-c', 'echo $GREETING'],
        'AttachStdout': True,
        'AttachStderr': True,
        'Env': ['GREETING=hello'],
        'WorkingDir': '/srv',
    }

    assert docker.exec.create('web', config) == {'Id': EXEC_ID}
    assert recorder.last.path == '/containers/web/exec'
    assert recorder.last.json == config


def test_create_validation(docker, recorder):
    with pytest.raises(InvalidParameter) as excinfo:
        docker.exec.create('web', {'AttachStdout': True})
    assert str(excinfo.value) == 'Command (Cmd) is required'

    bad_configs = [
        {'Cmd': []},
        {'Cmd': 'ls -la'},
        {'Cmd': ['ls'], 'Tty': 'true'},
        {'Cmd': ['ls'], 'User': 1000},
        {'Cmd': ['ls'], 'Env': ['=broken']},
    ]
    for config in bad_configs:
        with pytest.raises(InvalidParameter):
            docker.exec.create('web', config)

    assert recorder.requests == []


def test_start_returns_stream(docker, recorder):
    recorder.queue(b'hello\n')

    with docker.exec.start(EXEC_ID, {'Detach': False, 'Tty': True}) as stream:
        assert list(stream.iter_lines()) == [b'hello']

    assert recorder.last.path == f'/exec/{EXEC_ID}/start'
    assert recorder.last.json == {'Detach': False, 'Tty': True}
    assert recorder.last.stream is True

    with pytest.raises(InvalidParameter):
        docker.exec.start(EXEC_ID, {'Detach': 'no'})


def test_resize_bounds(docker, recorder):
    docker.exec.resize(EXEC_ID, height=24, width=80)
    assert recorder.last.path == f'/exec/{EXEC_ID}/resize?h=24&w=80'

    for height, width in ((0, 80), (24, 1001)):
        with pytest.raises(InvalidParameter):
            docker.exec.resize(EXEC_ID, height=height, width=width)


def test_inspect(docker, recorder):
    recorder.queue({'ID': EXEC_ID, 'Running': False, 'ExitCode': 0})

    assert docker.exec.inspect(EXEC_ID)['ExitCode'] == 0
    assert recorder.last.path == f'/exec/{EXEC_ID}/json'
