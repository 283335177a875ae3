"""Isolated VPC networking for the AgentCore runtime"""
import pulumi
import components.agent_runtime as agent_runtime

from utils.autotag import register_auto_tags
# Automatically inject tags.
config = pulumi.Config()
register_auto_tags({
    'source': 'pulumi',
    'pulumi:Project': pulumi.get_project(),
    'pulumi:Stack': pulumi.get_stack(),
    'environment': config.require('environment'),
})


stack_catalog = dict()
stack_root, fields = agent_runtime.create_stack()
stack_catalog[stack_root] = fields

pulumi.export('stack_catalog', stack_catalog)
