"""VPC, subnets and route tables of the cluster template"""
import pulumi

from cluster_network import outputs
from cluster_network.components.nat import DisableNAT, nat_strategy_for
from cluster_network.config import SubnetTopology
from cluster_network.errors import NetworkSpecError
from cluster_network.importer import import_route_tables, import_subnets_from_id_list, make_subnet_resources
from cluster_network.naming import format_alias, private_route_table_name, route_table_association_name, subnet_name
from cluster_network.resource_set import (
    INTERNET_CIDR,
    make_cidr,
    make_get_att,
    make_ref,
    make_select,
    make_tags,
)
from cluster_network.subnets import SubnetDetails, SubnetResource

IPV6_SUBNET_CIDR_BITS = 64


def subnet_ipv6_cidr_blocks(count):
    return make_cidr(
        make_select(0, make_get_att('VPC', 'Ipv6CidrBlocks')),
        count,
        IPV6_SUBNET_CIDR_BITS,
    )


class ClusterVpc(object):
    """
    Declares the resources of the cluster VPC, or imports an existing one.

    ``create_template`` returns the VPC reference and the subnet details;
    ``collect_outputs`` writes the deployed values back into the network spec.
    """

    def __init__(self, rs, network_spec, ec2_api=None):
        self.rs = rs
        self.network_spec = network_spec
        self.ec2_api = ec2_api
        self.vpc_id = None
        self.subnet_details = SubnetDetails()

    @property
    def fully_private(self):
        return self.network_spec.fully_private

    def create_template(self):
        self.add_resources()
        self.add_outputs()
        return self.vpc_id, self.subnet_details

    def render_json(self):
        return self.rs.render_json()

    def collect_outputs(self, values):
        self.rs.collect_outputs(values)
        return self.network_spec

    def add_resources(self):
        vpc = self.network_spec
        if vpc.id:
            self.vpc_id = vpc.id
            self.import_resources()
            return

        # resolved before declaring anything so an invalid mode leaves the template empty
        nat_strategy = DisableNAT() if self.fully_private else nat_strategy_for(vpc.nat.gateway)
        self.check_subnet_zones(nat_strategy)

        self.vpc_id = self.rs.new_resource('VPC', 'AWS::EC2::VPC', {
            'CidrBlock': str(vpc.cidr),
            'EnableDnsSupport': True,
            'EnableDnsHostnames': True,
        })

        if vpc.auto_allocate_ipv6:
            self.rs.new_resource('AutoAllocatedCIDRv6', 'AWS::EC2::VPCCidrBlock', {
                'VpcId': self.vpc_id,
                'AmazonProvidedIpv6CidrBlock': True,
            })

        if self.fully_private:
            pulumi.log.info('creating a fully-private VPC without internet or NAT gateways')
            nat_strategy.build(self.rs, self.vpc_id, vpc.availability_zones)
            self.subnet_details.private = self.add_subnets(None, SubnetTopology.PRIVATE, vpc.subnets.private)
            return

        ref_ig = self.rs.new_resource('InternetGateway', 'AWS::EC2::InternetGateway')
        vpc_ga = 'VPCGatewayAttachment'
        self.rs.new_resource(vpc_ga, 'AWS::EC2::VPCGatewayAttachment', {
            'InternetGatewayId': ref_ig,
            'VpcId': self.vpc_id,
        })

        ref_public_rt = self.rs.new_resource('PublicRouteTable', 'AWS::EC2::RouteTable', {
            'VpcId': self.vpc_id,
        })
        self.rs.new_resource('PublicSubnetRoute', 'AWS::EC2::Route', {
            'RouteTableId': ref_public_rt,
            'DestinationCidrBlock': INTERNET_CIDR,
            'GatewayId': ref_ig,
        }, depends_on=[vpc_ga])

        self.subnet_details.public = self.add_subnets(ref_public_rt, SubnetTopology.PUBLIC, vpc.subnets.public)

        nat_strategy.build(self.rs, self.vpc_id, vpc.availability_zones)

        self.subnet_details.private = self.add_subnets(None, SubnetTopology.PRIVATE, vpc.subnets.private)

    def check_subnet_zones(self, nat_strategy):
        """
        NAT gateways and private route table associations refer to subnets as
        Subnet<Topology><Zone>, so every subnet must be named after its zone
        and the subnets those resources point at must exist.
        """
        vpc = self.network_spec
        required_zones = {
            SubnetTopology.PRIVATE: list(vpc.availability_zones),
            SubnetTopology.PUBLIC: nat_strategy.public_zones(vpc.availability_zones),
        }
        for topology, zones in required_zones.items():
            if topology == SubnetTopology.PUBLIC and self.fully_private:
                continue
            subnets = vpc.subnets.for_topology(topology)
            for name, spec in subnets.items():
                if format_alias(name) != format_alias(spec.az):
                    raise NetworkSpecError(f'subnet {name!r} must be named after its availability zone {spec.az}')
                if spec.az not in vpc.availability_zones:
                    raise NetworkSpecError(f'subnet {name!r} is in {spec.az} which is not one of the VPC zones')
            subnet_zones = {spec.az for spec in subnets.values()}
            missing = [az for az in zones if az not in subnet_zones]
            if missing:
                raise NetworkSpecError(
                    f'no {topology.value.lower()} subnet for availability zones: {", ".join(missing)}'
                )

    def add_subnets(self, ref_rt, topology, subnets):
        """
        Declare a subnet and its route table association for every entry of
        ``subnets``.

        Private subnets use the private route table of their zone, referenced
        by name; ``ref_rt`` is used for public subnets. Subnets are processed
        in name order so IPv6 block indexes are the same on every build.
        """
        zone_count = len(self.network_spec.availability_zones)
        auto_allocate_ipv6 = self.network_spec.auto_allocate_ipv6
        ipv6_index = 0
        if auto_allocate_ipv6 and topology == SubnetTopology.PRIVATE:
            # public subnets take the first zone_count blocks
            ipv6_index = zone_count

        subnet_resources = []
        for name in sorted(subnets):
            spec = subnets[name]
            alias = format_alias(name)
            subnet = {
                'AvailabilityZone': spec.az,
                'CidrBlock': str(spec.cidr),
                'VpcId': self.vpc_id,
            }

            if topology == SubnetTopology.PRIVATE:
                route_table = make_ref(private_route_table_name(alias))
                subnet['Tags'] = make_tags({'kubernetes.io/role/internal-elb': '1'})
            else:
                route_table = ref_rt
                subnet['Tags'] = make_tags({'kubernetes.io/role/elb': '1'})
                subnet['MapPublicIpOnLaunch'] = True

            ref_subnet = self.rs.new_resource(subnet_name(topology, alias), 'AWS::EC2::Subnet', subnet)
            self.rs.new_resource(
                route_table_association_name(topology, alias),
                'AWS::EC2::SubnetRouteTableAssociation',
                {
                    'SubnetId': ref_subnet,
                    'RouteTableId': route_table,
                },
            )

            if auto_allocate_ipv6:
                self.rs.new_resource(f'{topology.value}{alias}CIDRv6', 'AWS::EC2::SubnetCidrBlock', {
                    'SubnetId': ref_subnet,
                    'Ipv6CidrBlock': make_select(ipv6_index, subnet_ipv6_cidr_blocks(zone_count * 2 + 2)),
                }, depends_on=['AutoAllocatedCIDRv6'])
                ipv6_index += 1

            subnet_resources.append(SubnetResource(
                subnet=ref_subnet,
                route_table=route_table,
                availability_zone=spec.az,
            ))
        return subnet_resources

    def import_resources(self):
        subnets = self.network_spec.subnets
        if subnets.private:
            subnet_routes = None
            if self.fully_private:
                subnet_routes = import_route_tables(self.ec2_api, subnets.private)
            self.subnet_details.private = make_subnet_resources(subnets.private, subnet_routes)

        if subnets.public:
            self.subnet_details.public = make_subnet_resources(subnets.public)

        pulumi.log.info(
            f'imported VPC {self.network_spec.id} with {len(self.subnet_details.private)} private '
            f'and {len(self.subnet_details.public)} public subnets'
        )

    def add_outputs(self):
        def collect_vpc_id(value):
            self.network_spec.id = value

        self.rs.define_output(outputs.CLUSTER_VPC, self.vpc_id, True, collect_vpc_id)
        if not self.fully_private:
            self.rs.define_output(outputs.CLUSTER_FEATURE_NAT_MODE, self.network_spec.nat.gateway, False)

        def add_subnet_output(subnet_refs, topology, output_name):
            self.rs.define_joined_output(output_name, subnet_refs, True, lambda value: import_subnets_from_id_list(
                self.ec2_api, self.network_spec, topology, value.split(','),
            ))

        private_refs = self.subnet_details.private_subnet_refs()
        if private_refs:
            add_subnet_output(private_refs, SubnetTopology.PRIVATE, outputs.CLUSTER_SUBNETS_PRIVATE)

        public_refs = self.subnet_details.public_subnet_refs()
        if public_refs:
            add_subnet_output(public_refs, SubnetTopology.PUBLIC, outputs.CLUSTER_SUBNETS_PUBLIC)

        if self.fully_private:
            self.rs.define_output(outputs.CLUSTER_FULLY_PRIVATE, True, True)
