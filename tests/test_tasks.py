import pytest

from docker_engine_api.exceptions import InvalidParameter
from docker_engine_api.tasks import log_query

TASK_ID = '0kzzo1i0y4jz6027t0k7aezc7'


def test_list(docker, recorder):
    recorder.queue([{'ID': TASK_ID, 'DesiredState': 'running'}])

    docker.tasks.list(filters={'desired-state': 'running', 'service': 'web'})

    assert recorder.last.query == {'filters': '{"desired-state": ["running"], "service": ["web"]}'}

    with pytest.raises(InvalidParameter):
        docker.tasks.list(filters={'desired-state': 'sleeping'})


def test_inspect(docker, recorder):
    recorder.queue({'ID': TASK_ID})

    assert docker.tasks.inspect(TASK_ID) == {'ID': TASK_ID}
    assert recorder.last.path == f'/tasks/{TASK_ID}'


def test_logs(docker, recorder):
    recorder.queue(b'log line\n')

    with docker.tasks.logs(TASK_ID, since='2024-05-01T10:00:00Z', until='5m',
                           timestamps=True, tail='100') as stream:
        assert stream.read() == b'log line\n'

    assert recorder.last.stream is True
    assert recorder.last.route == f'/tasks/{TASK_ID}/logs'
    assert recorder.last.query == {
        'stdout': 'true',
        'stderr': 'true',
        'since': '2024-05-01T10:00:00Z',
        'until': '5m',
        'timestamps': 'true',
        'tail': '100',
    }


def test_log_query_validation():
    defaults = dict(details=None, follow=None, stdout=True, stderr=True, since=None,
                    until=None, timestamps=None, tail='all')

    assert log_query(**dict(defaults, since=1714557600))['since'] == 1714557600

    bad = [
        {'since': 'yesterday'},
        {'until': '10 minutes'},
        {'since': 3.5},
        {'tail': 'ten'},
        {'tail': -3},
        {'follow': 'true'},
    ]
    for override in bad:
        with pytest.raises(InvalidParameter):
            log_query(**dict(defaults, **override))
