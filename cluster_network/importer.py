"""Subnets and route tables of an existing VPC"""
import pulumi
from botocore.exceptions import BotoCoreError, ClientError

from cluster_network.config import AZSubnetSpec
from cluster_network.errors import (
    MainRouteTableError,
    RouteTableLookupError,
    RouteTableNotFoundError,
    VpcImportError,
)
from cluster_network.subnets import SubnetResource


def make_subnet_resources(subnets, subnet_routes=None):
    """
    Wrap existing subnets as subnet resources.

    When ``subnet_routes`` is given every subnet must be associated with an
    explicit route table, and that route table id is recorded.
    """
    subnet_resources = []
    for name in sorted(subnets):
        network = subnets[name]
        route_table = None
        if subnet_routes is not None:
            route_table = subnet_routes.get(network.id)
            if route_table is None:
                raise RouteTableNotFoundError(network.id)
        subnet_resources.append(SubnetResource(
            subnet=network.id,
            route_table=route_table,
            availability_zone=network.az,
        ))
    return subnet_resources


def import_route_tables(ec2_api, subnets):
    """Map each subnet id to the id of the route table it is explicitly associated with."""
    subnet_ids = [subnets[name].id for name in sorted(subnets)]

    route_tables = []
    try:
        paginator = ec2_api.get_paginator('describe_route_tables')
        for page in paginator.paginate(Filters=[{
            'Name': 'association.subnet-id',
            'Values': subnet_ids,
        }]):
            route_tables.extend(page.get('RouteTables', []))
    except (BotoCoreError, ClientError) as e:
        raise RouteTableLookupError(f'error describing route tables: {e}') from e

    subnet_routes = {}
    for route_table in route_tables:
        route_table_id = route_table['RouteTableId']
        associations = route_table.get('Associations', [])
        associated_subnets = [rta['SubnetId'] for rta in associations if rta.get('SubnetId')]
        if any(rta.get('Main') for rta in associations):
            offending = [subnet_id for subnet_id in associated_subnets if subnet_id in subnet_ids]
            raise MainRouteTableError(route_table_id, ', '.join(offending) or None)
        for subnet_id in associated_subnets:
            subnet_routes[subnet_id] = route_table_id

    pulumi.log.debug(f'found explicit route tables for {len(subnet_routes)} of {len(subnet_ids)} subnets')
    return subnet_routes


def import_subnets_from_id_list(ec2_api, network_spec, topology, subnet_ids):
    """Record the subnets with the given ids in the network spec, keyed by availability zone."""
    subnet_ids = [subnet_id for subnet_id in subnet_ids if subnet_id]
    if not subnet_ids:
        return

    try:
        output = ec2_api.describe_subnets(SubnetIds=subnet_ids)
    except (BotoCoreError, ClientError) as e:
        raise VpcImportError(f'error describing subnets {", ".join(subnet_ids)}: {e}') from e

    subnets = network_spec.subnets.for_topology(topology)
    for subnet in output['Subnets']:
        az = subnet['AvailabilityZone']
        name = next(
            (name for name, existing in subnets.items()
             if existing.id == subnet['SubnetId'] or (existing.id is None and existing.az == az)),
            az,
        )
        subnets[name] = AZSubnetSpec(az=az, cidr=subnet['CidrBlock'], id=subnet['SubnetId'])

    pulumi.log.info(f'imported {len(output["Subnets"])} {topology.value.lower()} subnets')
