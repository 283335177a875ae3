"""VPCs, isolated subnets, security groups and VPC endpoints"""
import json

import pulumi
from pulumi_aws import cloudwatch, iam, ec2

from layout import endpoint_service_name

ALL_TRAFFIC_EGRESS = ec2.SecurityGroupEgressArgs(
    protocol='-1',
    from_port=0,
    to_port=0,
    cidr_blocks=['0.0.0.0/0'],
    description='Allow all outbound traffic',
)


class AwsVpc(object):
    def __init__(self, **kwargs):
        self.environment = kwargs.get('environment')
        self.region = kwargs.get('region')
        self.root_tag_name = kwargs.get('root_tag_name')
        self.root_resource_name = kwargs.get('root_resource_name')
        self.vpc_cidr = kwargs.get('vpc_cidr')
        self.protect_resources = kwargs.get('protect_resources')
        # No internet gateway: subnets only ever get the implicit local route.
        self.vpc = ec2.Vpc(
            f'{self.root_resource_name}-vpc-{self.environment}',
            cidr_block=self.vpc_cidr,
            instance_tenancy='default',
            enable_dns_hostnames=True,
            enable_dns_support=True,
            opts=self._opts(),
            tags={
                'Name': f'{self.root_tag_name} VPC {self.environment}'
            }
        )

    def _opts(self):
        return pulumi.ResourceOptions(protect=self.protect_resources)

    def create_subnet(self, az, cidr_block, index):
        subnet = ec2.Subnet(
            f'{self.root_resource_name}-isolated-subnet-{index}-{self.environment}',
            vpc_id=self.vpc.id,
            availability_zone=az,
            map_public_ip_on_launch=False,
            cidr_block=cidr_block,
            opts=self._opts(),
            tags={
                'Name': f'{self.root_tag_name} Isolated Subnet {index} {az} {self.environment}'
            }
        )
        route_table = ec2.RouteTable(
            f'{self.root_resource_name}-isolated-route-table-{index}-{self.environment}',
            vpc_id=self.vpc.id,
            opts=self._opts(),
            tags={
                'Name': f'{self.root_tag_name} Isolated route table {index} {az} {self.environment}'
            },
        )
        subnet_assn = ec2.RouteTableAssociation(
            f'{self.root_resource_name}-isolated-subnet-association-{index}-{self.environment}',
            subnet_id=subnet.id,
            route_table_id=route_table.id,
            opts=self._opts()
        )
        return subnet, route_table, subnet_assn

    def create_security_group(self, purpose, description, ingress):
        return ec2.SecurityGroup(
            f'{self.root_resource_name}-{purpose}-sg-{self.environment}',
            vpc_id=self.vpc.id,
            description=description,
            ingress=ingress,
            egress=[ALL_TRAFFIC_EGRESS],
            opts=self._opts(),
            tags={
                'Name': f'{self.root_tag_name} {purpose} security group {self.environment}'
            }
        )

    def endpoint_resource_name(self, service):
        return f'{self.root_resource_name}-{service.replace(".", "-")}-endpoint-{self.environment}'

    def create_interface_endpoint(self, service, subnet_ids, security_group_ids, private_dns_enabled=True):
        return ec2.VpcEndpoint(
            self.endpoint_resource_name(service),
            service_name=endpoint_service_name(self.region, service),
            vpc_endpoint_type='Interface',
            vpc_id=self.vpc.id,
            subnet_ids=subnet_ids,
            security_group_ids=security_group_ids,
            private_dns_enabled=private_dns_enabled,
            opts=self._opts(),
            tags={
                'Name': f'{self.root_tag_name} {service} endpoint {self.environment}'
            }
        )

    def create_gateway_endpoint(self, service, route_table_ids):
        return ec2.VpcEndpoint(
            self.endpoint_resource_name(service),
            service_name=endpoint_service_name(self.region, service),
            vpc_endpoint_type='Gateway',
            vpc_id=self.vpc.id,
            route_table_ids=route_table_ids,
            opts=self._opts(),
            tags={
                'Name': f'{self.root_tag_name} {service} endpoint {self.environment}'
            }
        )

    def create_vpc_flow_logs(self, retention_in_days=60):
        log_group = cloudwatch.LogGroup(
            f'{self.root_resource_name}-log-group-{self.environment}',
            name=f'/aws/flowlogs/{self.root_resource_name}-{self.environment}',
            retention_in_days=retention_in_days,
            tags={
                'Name': f'{self.root_tag_name} Flow Logs Group {self.environment}'
            },
            opts=self._opts()
        )
        flow_log_role = iam.Role(
            f'{self.root_resource_name}-log-role-{self.environment}',
            assume_role_policy=json.dumps({
                'Version': '2012-10-17',
                'Statement': [
                    {
                        'Effect': 'Allow',
                        'Principal': {'Service': 'vpc-flow-logs.amazonaws.com'},
                        'Action': 'sts:AssumeRole',
                    }
                ],
            }),
            tags={
                'Name': f'{self.root_tag_name} Flow Logs Role {self.environment}'
            },
            opts=self._opts()
        )
        iam.RolePolicy(
            f'{self.root_resource_name}-log-role-policy-{self.environment}',
            role=flow_log_role.id,
            policy=log_group.arn.apply(lambda arn: json.dumps({
                'Version': '2012-10-17',
                'Statement': [
                    {
                        'Action': [
                            'logs:CreateLogStream',
                            'logs:PutLogEvents',
                            'logs:DescribeLogGroups',
                            'logs:DescribeLogStreams',
                        ],
                        'Effect': 'Allow',
                        'Resource': [arn, f'{arn}:*'],
                    }
                ],
            })),
            opts=self._opts()
        )
        return ec2.FlowLog(
            f'{self.root_resource_name}-flow-log-{self.environment}',
            iam_role_arn=flow_log_role.arn,
            log_destination=log_group.arn,
            traffic_type='ALL',
            vpc_id=self.vpc.id,
            tags={
                'Name': f'{self.root_tag_name} Flow Log {self.environment}'
            },
            opts=self._opts()
        )
