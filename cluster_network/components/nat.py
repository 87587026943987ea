"""NAT gateways and private route tables"""
import pulumi

from cluster_network.config import NatMode, SubnetTopology
from cluster_network.errors import InvalidNatModeError
from cluster_network.naming import format_alias, private_route_table_name, route_table_association_name, subnet_name
from cluster_network.resource_set import INTERNET_CIDR, make_get_att, make_ref


class NatStrategy(object):
    """
    Builds the private side of the VPC: one route table per availability
    zone, associated with the private subnet of that zone.

    Public subnets and private subnets are referenced by their logical names,
    so they may be declared before or after the strategy runs.
    """

    mode = None

    def build(self, rs, vpc_id, availability_zones):
        raise NotImplementedError

    def public_zones(self, availability_zones):
        """Zones whose public subnet hosts a NAT gateway."""
        return []

    @staticmethod
    def add_nat_gateway(rs, suffix, public_subnet_alias):
        # Allocate an EIP
        eip_name = 'NATIP' + suffix
        rs.new_resource(eip_name, 'AWS::EC2::EIP', {'Domain': 'vpc'})
        # Allocate a NAT gateway in the public subnet
        return rs.new_resource('NATGateway' + suffix, 'AWS::EC2::NatGateway', {
            'AllocationId': make_get_att(eip_name, 'AllocationId'),
            'SubnetId': make_ref(subnet_name(SubnetTopology.PUBLIC, public_subnet_alias)),
        })

    @staticmethod
    def add_private_route_table(rs, vpc_id, alias, nat_gateway=None):
        ref_rt = rs.new_resource(private_route_table_name(alias), 'AWS::EC2::RouteTable', {
            'VpcId': vpc_id,
        })
        if nat_gateway is not None:
            # Send Internet traffic through the NAT gateway
            rs.new_resource('NATPrivateSubnetRoute' + alias, 'AWS::EC2::Route', {
                'RouteTableId': ref_rt,
                'DestinationCidrBlock': INTERNET_CIDR,
                'NatGatewayId': nat_gateway,
            })
        rs.new_resource(
            route_table_association_name(SubnetTopology.PRIVATE, alias),
            'AWS::EC2::SubnetRouteTableAssociation',
            {
                'SubnetId': make_ref(subnet_name(SubnetTopology.PRIVATE, alias)),
                'RouteTableId': ref_rt,
            },
        )
        return ref_rt


class HighlyAvailableNAT(NatStrategy):
    """A NAT gateway in every availability zone."""

    mode = NatMode.HIGHLY_AVAILABLE

    def public_zones(self, availability_zones):
        return list(availability_zones)

    def build(self, rs, vpc_id, availability_zones):
        route_tables = {}
        for az in availability_zones:
            alias = format_alias(az)
            nat_gateway = self.add_nat_gateway(rs, alias, alias)
            route_tables[az] = self.add_private_route_table(rs, vpc_id, alias, nat_gateway)
        return route_tables


class SingleNAT(NatStrategy):
    """One NAT gateway, in the first availability zone, shared by every private route table."""

    mode = NatMode.SINGLE

    def public_zones(self, availability_zones):
        return list(availability_zones[:1])

    def build(self, rs, vpc_id, availability_zones):
        nat_gateway = self.add_nat_gateway(rs, '', format_alias(availability_zones[0]))
        return {
            az: self.add_private_route_table(rs, vpc_id, format_alias(az), nat_gateway)
            for az in availability_zones
        }


class DisableNAT(NatStrategy):
    mode = NatMode.DISABLE

    def build(self, rs, vpc_id, availability_zones):
        return {
            az: self.add_private_route_table(rs, vpc_id, format_alias(az))
            for az in availability_zones
        }


NAT_STRATEGIES = {
    NatMode.HIGHLY_AVAILABLE: HighlyAvailableNAT,
    NatMode.SINGLE: SingleNAT,
    NatMode.DISABLE: DisableNAT,
}


def nat_strategy_for(mode):
    try:
        nat_mode = NatMode(mode)
    except ValueError:
        raise InvalidNatModeError(mode) from None
    strategy = NAT_STRATEGIES[nat_mode]()
    pulumi.log.debug(f'using {strategy.mode.value} NAT gateway mode')
    return strategy
