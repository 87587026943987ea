"""Builders shared by the cluster network tests."""

from unittest.mock import MagicMock

from cluster_network.config import NetworkSpec

ZONES = ['us-east-1a', 'us-east-1b', 'us-east-1c']


def make_network_spec(zones=None, public=True, **kwargs):
    """A network spec with one private (and public) /24 per zone, keyed by zone."""
    zones = ZONES if zones is None else zones
    subnets = {'private': {}, 'public': {}}
    for i, az in enumerate(zones):
        subnets['private'][az] = {'az': az, 'cidr': f'10.0.{100 + i}.0/24'}
        if public:
            subnets['public'][az] = {'az': az, 'cidr': f'10.0.{i}.0/24'}
    data = {
        'cidr': '10.0.0.0/16',
        'availability_zones': list(zones),
        'subnets': subnets,
    }
    data.update(kwargs)
    return NetworkSpec.model_validate(data)


def resources_of_type(rs, resource_type):
    return {
        name: resource
        for name, resource in rs.resources.items()
        if resource['Type'] == resource_type
    }


def paginated_ec2(*pages):
    """An EC2 client whose describe_route_tables paginator yields ``pages``."""
    ec2_api = MagicMock()
    ec2_api.get_paginator.return_value.paginate.return_value = iter(pages)
    return ec2_api
