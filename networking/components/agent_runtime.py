from collections import namedtuple

import pulumi
from pulumi_aws import ec2

from layout import build_layout
from vpc import AwsVpc

ROOT_RESOURCE_NAME = 'agentcore'
ROOT_TAG_NAME = 'AgentCore Runtime'

config = pulumi.Config()
aws_config = pulumi.Config('aws')
environment = config.require('environment')

AgentRuntimeNetwork = namedtuple('AgentRuntimeNetwork', [
    'layout',
    'vpc',
    'subnets',
    'route_tables',
    'runtime_security_group',
    'endpoint_security_group',
    'endpoints',
    'flow_log',
])


def build_network(agent_runtime_config, root_resource_name=ROOT_RESOURCE_NAME):
    """Declare the isolated agent runtime network.

    There is no internet gateway, NAT gateway or default route anywhere in
    the graph, so runtime traffic either reaches one of the VPC endpoints or
    goes nowhere.
    """
    layout = build_layout(agent_runtime_config, aws_config.get('region'))
    protect_resources = bool(agent_runtime_config.get('protect_resources', False))

    if environment == 'prod' and not protect_resources:
        pulumi.log.warn('protect_resources is off for a prod stack; `pulumi destroy` will remove the network')

    agent_vpc = AwsVpc(
        environment=environment,
        region=layout.region,
        root_tag_name=ROOT_TAG_NAME,
        root_resource_name=root_resource_name,
        vpc_cidr=layout.vpc_cidr,
        protect_resources=protect_resources
    )

    subnets = []
    route_tables = []
    for spec in layout.subnets:
        subnet, route_table, _ = agent_vpc.create_subnet(spec.availability_zone, spec.cidr_block, spec.index)
        pulumi.log.info(f'isolated subnet {spec.index}: {spec.cidr_block} in {spec.availability_zone}')
        subnets.append(subnet)
        route_tables.append(route_table)

    runtime_sg = agent_vpc.create_security_group(
        'runtime',
        'AgentCore runtime - health checks from inside the VPC',
        ingress=[
            ec2.SecurityGroupIngressArgs(
                protocol='tcp',
                from_port=layout.health_check_port,
                to_port=layout.health_check_port,
                cidr_blocks=[layout.vpc_cidr],
                description='Health check from within the VPC',
            )
        ]
    )
    endpoint_sg = agent_vpc.create_security_group(
        'endpoint',
        'VPC endpoints - HTTPS from the AgentCore runtime',
        ingress=[
            ec2.SecurityGroupIngressArgs(
                protocol='tcp',
                from_port=layout.endpoint_port,
                to_port=layout.endpoint_port,
                security_groups=[runtime_sg.id],
                description='HTTPS from the AgentCore runtime',
            )
        ]
    )

    subnet_ids = [subnet.id for subnet in subnets]
    endpoints = {}
    for spec in layout.endpoints:
        if spec.endpoint_type == 'Gateway':
            endpoints[spec.service] = agent_vpc.create_gateway_endpoint(
                spec.service, [route_table.id for route_table in route_tables])
        else:
            endpoints[spec.service] = agent_vpc.create_interface_endpoint(
                spec.service, subnet_ids, [endpoint_sg.id], private_dns_enabled=spec.private_dns_enabled)
    pulumi.log.info(f'{len(endpoints)} VPC endpoints: {", ".join(endpoints)}')

    flow_log = None
    if agent_runtime_config.get('vpc_flow_logs'):
        flow_log = agent_vpc.create_vpc_flow_logs(agent_runtime_config.get('flow_log_retention_days', 60))

    return AgentRuntimeNetwork(
        layout=layout,
        vpc=agent_vpc,
        subnets=subnets,
        route_tables=route_tables,
        runtime_security_group=runtime_sg,
        endpoint_security_group=endpoint_sg,
        endpoints=endpoints,
        flow_log=flow_log,
    )


def stack_outputs(network):
    """Stack output name -> value, in catalogue order."""
    root_resource_name = network.vpc.root_resource_name
    subnet_ids = [subnet.id for subnet in network.subnets]

    outputs = {
        f'{root_resource_name}_vpc_id': network.vpc.vpc.id,
        f'{root_resource_name}_runtime_security_group_id': network.runtime_security_group.id,
        f'{root_resource_name}_endpoint_security_group_id': network.endpoint_security_group.id,
    }
    for i, subnet_id in enumerate(subnet_ids, start=1):
        outputs[f'{root_resource_name}_subnet_{i}_id'] = subnet_id
    outputs[f'{root_resource_name}_subnet_ids'] = pulumi.Output.all(*subnet_ids).apply(lambda ids: ','.join(ids))
    outputs[f'{root_resource_name}_vpc_endpoint_ids'] = {
        service: endpoint.id for service, endpoint in network.endpoints.items()
    }
    return outputs


def create_stack():
    network = build_network(config.require_object('agent_runtime'))
    root_resource_name = network.vpc.root_resource_name

    outputs = stack_outputs(network)
    for name, value in outputs.items():
        pulumi.export(name, value)

    return root_resource_name, [name[len(root_resource_name):] for name in outputs]
