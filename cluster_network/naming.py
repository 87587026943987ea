"""Logical resource names shared by the subnet and NAT resources.

Redeploys rely on these names staying stable.
"""
import re

from cluster_network.config import SubnetTopology


def format_alias(name):
    """us-east-1a -> USEAST1A"""
    return re.sub(r'[^A-Za-z0-9]', '', name).upper()


def subnet_name(topology, alias):
    return f'Subnet{SubnetTopology(topology).value}{alias}'


def route_table_association_name(topology, alias):
    return f'RouteTableAssociation{SubnetTopology(topology).value}{alias}'


def private_route_table_name(alias):
    return f'PrivateRouteTable{alias}'
