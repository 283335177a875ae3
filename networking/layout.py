"""Address plan and endpoint catalogue for the agent runtime network"""
import ipaddress
from collections import namedtuple

import pulumi

DEFAULT_VPC_CIDR = '10.0.0.0/16'
DEFAULT_HEALTH_CHECK_PORT = 8080
HTTPS_PORT = 443
SUBNET_COUNT = 2

EndpointSpec = namedtuple('EndpointSpec', ['service', 'endpoint_type', 'private_dns_enabled'])

# ECR image layers are pulled from S3, hence the gateway endpoint.
ENDPOINTS = (
    EndpointSpec('ecr.api', 'Interface', True),
    EndpointSpec('ecr.dkr', 'Interface', True),
    EndpointSpec('logs', 'Interface', True),
    EndpointSpec('bedrock-agentcore', 'Interface', True),
    EndpointSpec('s3', 'Gateway', False),
)

NetworkLayout = namedtuple('NetworkLayout', [
    'region',
    'vpc_cidr',
    'subnets',
    'health_check_port',
    'endpoint_port',
    'endpoints',
])

SubnetSpec = namedtuple('SubnetSpec', ['index', 'availability_zone', 'cidr_block'])


class NetworkConfigError(pulumi.RunError):
    """Raised for stack configuration that cannot describe an isolated network."""


def endpoint_service_name(region, service):
    return f'com.amazonaws.{region}.{service}'


def _network(cidr, what):
    try:
        return ipaddress.ip_network(cidr)
    except ValueError as e:
        raise NetworkConfigError(f'{what} {cidr!r} is not a valid CIDR block: {e}') from e


def _port(value, what):
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 65535:
        raise NetworkConfigError(f'{what} must be an integer between 1 and 65535, got {value!r}')
    return value


def default_subnet_cidrs(vpc_cidr, count):
    """Derive /24 blocks numbered from 1, keeping the first two octets of the VPC block."""
    octet_prefix = '.'.join(vpc_cidr.split('.')[:2])
    return [f'{octet_prefix}.{third_octet}.0/24' for third_octet in range(1, count + 1)]


def build_layout(settings, region):
    """Validate the ``agent_runtime`` config object and return a NetworkLayout.

    The result depends only on ``settings`` and ``region``, so two runs over
    an unchanged configuration declare the same resources.
    """
    if not region:
        raise NetworkConfigError('a target region is required (set aws:region)')

    vpc_cidr = settings.get('cidr', DEFAULT_VPC_CIDR)
    vpc_network = _network(vpc_cidr, 'VPC cidr')

    azs = list(settings.get('availability_zones') or [])
    if len(azs) != SUBNET_COUNT or len(set(azs)) != SUBNET_COUNT:
        raise NetworkConfigError(
            f'exactly {SUBNET_COUNT} distinct availability_zones are required, got {azs!r}')

    subnet_cidrs = list(settings.get('subnet_cidrs') or default_subnet_cidrs(vpc_cidr, len(azs)))
    if len(subnet_cidrs) != len(azs):
        raise NetworkConfigError(
            f'{len(subnet_cidrs)} subnet_cidrs given for {len(azs)} availability zones')

    subnet_networks = []
    for cidr in subnet_cidrs:
        network = _network(cidr, 'subnet cidr')
        if network.version != vpc_network.version or not network.subnet_of(vpc_network):
            raise NetworkConfigError(f'subnet {cidr} is not inside the VPC block {vpc_cidr}')
        for other in subnet_networks:
            if network.overlaps(other):
                raise NetworkConfigError(f'subnet {cidr} overlaps subnet {other}')
        subnet_networks.append(network)

    return NetworkLayout(
        region=region,
        vpc_cidr=str(vpc_network),
        subnets=tuple(
            SubnetSpec(i + 1, az, str(network))
            for i, (az, network) in enumerate(zip(azs, subnet_networks))
        ),
        health_check_port=_port(
            settings.get('health_check_port', DEFAULT_HEALTH_CHECK_PORT), 'health_check_port'),
        endpoint_port=HTTPS_PORT,
        endpoints=ENDPOINTS,
    )
