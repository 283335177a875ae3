def is_taggable(t):
    return t in taggable_resource_types


# Resource types declared by this project that accept a `tags` map.
taggable_resource_types = [
    'aws:cloudwatch/logGroup:LogGroup',
    'aws:ec2/flowLog:FlowLog',
    'aws:ec2/routeTable:RouteTable',
    'aws:ec2/securityGroup:SecurityGroup',
    'aws:ec2/subnet:Subnet',
    'aws:ec2/vpc:Vpc',
    'aws:ec2/vpcEndpoint:VpcEndpoint',
    'aws:iam/role:Role',
]
