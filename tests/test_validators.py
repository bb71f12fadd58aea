import base64

import pytest

from docker_engine_api.exceptions import ErrorKind, InvalidParameter
from docker_engine_api import validators as v


def test_require_non_empty():
    v.require_non_empty('x', 'name')
    v.require_non_empty([1], 'name')

    for value in (None, '', [], {}, 0, False, b''):
        with pytest.raises(InvalidParameter):
            v.require_non_empty(value, 'name')


def test_require_string():
    v.require_string('abc', 'name')

    for value in (None, '', 5, ['a']):
        with pytest.raises(InvalidParameter) as excinfo:
            v.require_string(value, 'image')
        assert "'image'" in str(excinfo.value)


def test_require_array():
    v.require_array([], 'items')
    v.require_array({}, 'items')
    v.require_array(('a',), 'items')

    with pytest.raises(InvalidParameter):
        v.require_array('abc', 'items')

    with pytest.raises(InvalidParameter):
        v.require_array([], 'items', allow_empty=False)


def test_require_int_range():
    v.require_int_range(None, 'port', 1, 10)
    v.require_int_range(1, 'port', 1, 10)
    v.require_int_range(10, 'port', 1, 10)

    for value in (0, 11, '5', 1.5, True):
        with pytest.raises(InvalidParameter):
            v.require_int_range(value, 'port', 1, 10)


def test_require_enum_is_type_strict():
    v.require_enum(None, ['a'], 'mode')
    v.require_enum('a', ['a', 'b'], 'mode')
    v.require_enum(0, [0, 1], 'level')

    with pytest.raises(InvalidParameter) as excinfo:
        v.require_enum('c', ['a', 'b'], 'mode')
    assert 'a, b' in str(excinfo.value)

    with pytest.raises(InvalidParameter):
        v.require_enum('0', [0, 1], 'level')

    with pytest.raises(InvalidParameter):
        v.require_enum(True, [1, 0], 'level')


@pytest.mark.parametrize('value', [
    'my-container_1.0',
    'web',
    'a' * 12,
    '4f66ad9a0b2e',
    '4f66ad9a0b2e' + 'a' * 52,
    'deadbeef',
    '1234567890',
    'db1',
    'a1',
    'cafe42',
    'abc123',
    'bead2',
    'a1b2c3',
    'ab12cd34e',
])
def test_require_id_accepts(value):
    v.require_id(value, 'id')


@pytest.mark.parametrize('value', [
    '-bad',
    '.hidden',
    '4f66ad9a0b',
    'deadbeef01',
    '4f66ad9a0b2',
    '4f66ad9a0b2e' + 'a' * 53,
    'has space',
    'slash/name',
    '',
    None,
])
def test_require_id_rejects(value):
    with pytest.raises(InvalidParameter):
        v.require_id(value, 'id')


def test_require_name():
    v.require_name('net-1.internal_a', 'Name')

    with pytest.raises(InvalidParameter) as excinfo:
        v.require_name('_net', 'Name', 'Network name')
    assert str(excinfo.value).startswith('Network name must start')


def test_require_json():
    v.require_json('{"a": [1]}', 'filters')

    with pytest.raises(InvalidParameter):
        v.require_json('{not json', 'filters')

    with pytest.raises(InvalidParameter):
        v.require_json(None, 'filters')


def test_require_port():
    for port in ('80/tcp', '53/udp', '9000/sctp'):
        v.require_port(port, 'ExposedPorts')

    for port in ('80', 'tcp/80', '80/icmp', 80):
        with pytest.raises(InvalidParameter):
            v.require_port(port, 'ExposedPorts')


def test_require_signal():
    for signal in ('SIGTERM', 'SIGKILL', 'SIGXFSZ', '9', 15):
        v.require_signal(signal, 'signal')

    for signal in ('TERM', 'sigterm', 'SIGFOO', '-1', -1, None):
        with pytest.raises(InvalidParameter):
            v.require_signal(signal, 'signal')

    assert len(v.VALID_SIGNALS) == 33


def test_require_bool():
    v.require_bool(None, 'Tty')
    v.require_bool(False, 'Tty')

    with pytest.raises(InvalidParameter) as excinfo:
        v.require_bool('true', 'Tty')
    assert "'Tty'" in str(excinfo.value)


def test_require_string_map():
    v.require_string_map({'a': 'b'}, 'Labels')

    with pytest.raises(InvalidParameter):
        v.require_string_map({'a': 1}, 'Labels')

    with pytest.raises(InvalidParameter):
        v.require_string_map(['a=b'], 'Labels')


def test_require_env_list():
    v.require_env_list(['A=1', 'PATH=/usr/bin', 'EMPTY='], 'Env')

    for env in (['A'], ['1A=x'], [3], 'A=1'):
        with pytest.raises(InvalidParameter):
            v.require_env_list(env, 'Env')


def test_require_keys():
    v.require_keys({'a': 1, 'b': 2}, ('a', 'b'), 'config')

    with pytest.raises(InvalidParameter) as excinfo:
        v.require_keys({'a': 1, 'b': None}, ('a', 'b'), 'config')
    assert "'b'" in str(excinfo.value)


def test_require_base64():
    v.require_base64(base64.b64encode(b'hello').decode('ascii'), 'Data')
    v.require_base64('', 'Data')

    for data in ('not-base64!', 'aGVsbG8', b'aGVsbG8=', 'aGVs bG8='):
        with pytest.raises(InvalidParameter):
            v.require_base64(data, 'Data')


def test_require_cidr():
    v.require_cidr('10.0.0.0/24', 'Subnet')
    v.require_cidr('fd00::/64', 'Subnet')
    v.require_cidr('10.10.0.0/16', 'DefaultAddrPool', ipv4_only=True)

    with pytest.raises(InvalidParameter):
        v.require_cidr('10.0.0/24', 'Subnet')

    with pytest.raises(InvalidParameter):
        v.require_cidr('fd00::/64', 'DefaultAddrPool', ipv4_only=True)


def test_require_ip():
    v.require_ip('172.17.0.2', 'IPAMConfig', 4)
    v.require_ip('2001:db8::1', 'IPAMConfig', 6)

    with pytest.raises(InvalidParameter):
        v.require_ip('2001:db8::1', 'IPAMConfig', 4)

    with pytest.raises(InvalidParameter):
        v.require_ip('300.1.1.1', 'IPAMConfig', 4)


def test_require_filters():
    assert v.require_filters(None, ['a']) == {}
    assert v.require_filters('', ['a']) == {}
    assert v.require_filters({'a': ['x']}, ['a', 'b']) == {'a': ['x']}
    assert v.require_filters('{"b": ["y"]}', ['a', 'b']) == {'b': ['y']}

    with pytest.raises(InvalidParameter) as excinfo:
        v.require_filters({'c': 'z'}, ['a', 'b'])
    assert str(excinfo.value) == "Invalid filter key 'c'. Valid keys are: a, b"

    with pytest.raises(InvalidParameter):
        v.require_filters('[1, 2]', ['a'])


def test_filter_values_shapes():
    filters = {'scope': 'local', 'type': ['custom'], 'label': {'a=b': True}}

    assert v.filter_values(filters, 'scope') == ['local']
    assert v.filter_values(filters, 'type') == ['custom']
    assert v.filter_values(filters, 'label') == ['a=b']
    assert v.filter_values(filters, 'missing') == []


def test_require_filter_enum_and_bool():
    v.require_filter_enum({'scope': ['local', 'swarm']}, 'scope', ('local', 'global', 'swarm'))
    v.require_filter_bool({'dangling': True}, 'dangling')

    with pytest.raises(InvalidParameter):
        v.require_filter_enum({'scope': ['local', 'orbit']}, 'scope', ('local', 'global', 'swarm'))

    with pytest.raises(InvalidParameter):
        v.require_filter_bool({'dangling': 'true'}, 'dangling')


def test_require_log_time():
    for value in (None, 1700000000, '2024-01-02T03:04:05Z', '2024-01-02T03:04:05.123+01:00',
                  '10m', '2h', '1d', '30s'):
        v.require_log_time(value, 'since')

    for value in ('yesterday', '10w', '2024-01-02', 1.5, True):
        with pytest.raises(InvalidParameter):
            v.require_log_time(value, 'since')


def test_require_tail():
    for value in (None, 'all', '100', 0, 25):
        v.require_tail(value)

    for value in (-1, 'last', '-5', 1.0):
        with pytest.raises(InvalidParameter):
            v.require_tail(value)


def test_invalid_parameter_kind():
    with pytest.raises(InvalidParameter) as excinfo:
        v.require_string('', 'name')

    assert excinfo.value.kind is ErrorKind.INVALID_PARAMETER
    assert excinfo.value.status_code is None
