"""Cluster VPC deployed as a CloudFormation stack"""
import boto3
import pulumi
from pulumi_aws import cloudformation

from cluster_network.config import load_network_spec
from cluster_network.resource_set import ResourceSet
from cluster_network.utils.autotag import register_auto_tags
from cluster_network.vpc import ClusterVpc

config = pulumi.Config()
environment = config.get('environment') or pulumi.get_stack()
root_resource_name = config.get('root_resource_name') or 'cluster'
protect_resources = config.get_bool('protect_resources') or False

# Automatically inject tags.
register_auto_tags({
    'source': 'pulumi',
    'pulumi:Project': pulumi.get_project(),
    'pulumi:Stack': pulumi.get_stack(),
    'environment': environment,
})

network_spec = load_network_spec(config)
ec2_api = boto3.client('ec2', region_name=pulumi.Config('aws').require('region'))

cluster_vpc = ClusterVpc(
    ResourceSet(description=f'{root_resource_name} VPC {environment}'),
    network_spec,
    ec2_api,
)
cluster_vpc.create_template()

if network_spec.id:
    # an imported VPC has nothing to deploy
    pulumi.export('network', network_spec.model_dump(mode='json'))
else:
    stack = cloudformation.Stack(
        f'{root_resource_name}-vpc-{environment}',
        template_body=cluster_vpc.render_json(),
        opts=pulumi.ResourceOptions(protect=protect_resources),
    )
    pulumi.export('vpc_stack_id', stack.id)
    # collectors call EC2 and only run once the stack outputs are known, i.e. on `pulumi up`
    pulumi.export('network', stack.outputs.apply(
        lambda values: cluster_vpc.collect_outputs(values).model_dump(mode='json')
    ))
