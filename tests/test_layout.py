import pytest

from layout import (
    ENDPOINTS,
    NetworkConfigError,
    build_layout,
    default_subnet_cidrs,
    endpoint_service_name,
)

SETTINGS = {
    'cidr': '10.0.0.0/16',
    'availability_zones': ['us-east-1a', 'us-east-1b'],
}


def test_defaults():
    layout = build_layout({'availability_zones': ['eu-west-1a', 'eu-west-1b']}, 'eu-west-1')
    assert layout.vpc_cidr == '10.0.0.0/16'
    assert layout.health_check_port == 8080
    assert layout.endpoint_port == 443
    assert [(s.index, s.availability_zone, s.cidr_block) for s in layout.subnets] == [
        (1, 'eu-west-1a', '10.0.1.0/24'),
        (2, 'eu-west-1b', '10.0.2.0/24'),
    ]


def test_same_settings_give_same_layout():
    assert build_layout(dict(SETTINGS), 'us-east-1') == build_layout(dict(SETTINGS), 'us-east-1')


def test_endpoint_catalog():
    assert [e.service for e in ENDPOINTS] == ['ecr.api', 'ecr.dkr', 'logs', 'bedrock-agentcore', 's3']
    assert [e.service for e in ENDPOINTS if e.endpoint_type == 'Interface' and e.private_dns_enabled] == [
        'ecr.api', 'ecr.dkr', 'logs', 'bedrock-agentcore']
    assert endpoint_service_name('us-west-2', 'ecr.dkr') == 'com.amazonaws.us-west-2.ecr.dkr'


def test_default_subnet_cidrs_follow_vpc_prefix():
    assert default_subnet_cidrs('172.31.0.0/16', 2) == ['172.31.1.0/24', '172.31.2.0/24']


def test_explicit_subnet_cidrs():
    layout = build_layout(dict(SETTINGS, subnet_cidrs=['10.0.128.0/20', '10.0.144.0/20']), 'us-east-1')
    assert [s.cidr_block for s in layout.subnets] == ['10.0.128.0/20', '10.0.144.0/20']


@pytest.mark.parametrize('overrides, message', [
    ({'cidr': '10.0.0.300/16'}, 'not a valid CIDR'),
    ({'cidr': '10.0.0.1/16'}, 'not a valid CIDR'),
    ({'availability_zones': ['us-east-1a']}, 'distinct availability_zones'),
    ({'availability_zones': ['us-east-1a', 'us-east-1a']}, 'distinct availability_zones'),
    ({'subnet_cidrs': ['10.0.1.0/24']}, 'subnet_cidrs given'),
    ({'subnet_cidrs': ['10.0.1.0/24', '10.1.2.0/24']}, 'not inside the VPC block'),
    ({'subnet_cidrs': ['10.0.0.0/23', '10.0.1.0/24']}, 'overlaps'),
    ({'subnet_cidrs': ['10.0.1.0/24', 'fd00::/64']}, 'not inside the VPC block'),
    ({'health_check_port': 0}, 'health_check_port'),
    ({'health_check_port': '8080'}, 'health_check_port'),
    ({'health_check_port': True}, 'health_check_port'),
])
def test_rejects_bad_settings(overrides, message):
    with pytest.raises(NetworkConfigError, match=message):
        build_layout(dict(SETTINGS, **overrides), 'us-east-1')


def test_requires_region():
    with pytest.raises(NetworkConfigError, match='aws:region'):
        build_layout(dict(SETTINGS), None)
