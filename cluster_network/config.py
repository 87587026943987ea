"""Network spec read from the stack configuration"""
from enum import Enum
from ipaddress import IPv4Network
from typing import Dict, List, Optional

import pulumi
from pydantic import BaseModel, Field, model_validator

DEFAULT_CIDR = '192.168.0.0/16'


class SubnetTopology(str, Enum):
    """Role of a subnet, also used as part of its logical resource name."""

    PRIVATE = 'Private'
    PUBLIC = 'Public'


class NatMode(str, Enum):
    HIGHLY_AVAILABLE = 'HighlyAvailable'
    SINGLE = 'Single'
    DISABLE = 'Disable'


class AZSubnetSpec(BaseModel):
    az: str
    cidr: Optional[IPv4Network] = None
    # only set for subnets that already exist
    id: Optional[str] = None


class ClusterSubnets(BaseModel):
    private: Dict[str, AZSubnetSpec] = Field(default_factory=dict)
    public: Dict[str, AZSubnetSpec] = Field(default_factory=dict)

    def for_topology(self, topology):
        if topology == SubnetTopology.PRIVATE:
            return self.private
        return self.public


class ClusterNAT(BaseModel):
    # kept as a plain string so an unknown mode is reported by the template build
    gateway: str = NatMode.SINGLE.value


class NetworkSpec(BaseModel):
    """
    Declarative description of the cluster VPC.

    When ``id`` is set the VPC already exists and its subnets are imported,
    otherwise every resource is created from ``cidr`` and the per-AZ subnets.
    """

    id: Optional[str] = None
    cidr: IPv4Network = IPv4Network(DEFAULT_CIDR)
    subnets: ClusterSubnets = Field(default_factory=ClusterSubnets)
    nat: ClusterNAT = Field(default_factory=ClusterNAT)
    fully_private: bool = False
    auto_allocate_ipv6: bool = False
    availability_zones: List[str] = Field(default_factory=list)

    def all_subnets(self):
        # private and public subnets are usually both named after their zone
        for topology in SubnetTopology:
            for name, subnet in self.subnets.for_topology(topology).items():
                yield topology, name, subnet

    @model_validator(mode='after')
    def check_subnets(self):
        if self.id:
            for topology, name, subnet in self.all_subnets():
                if not subnet.id:
                    raise ValueError(
                        f'{topology.value.lower()} subnet {name!r} must have an id when importing VPC {self.id}'
                    )
            return self

        if not self.availability_zones:
            raise ValueError('at least one availability zone is required to create a VPC')
        for topology, name, subnet in self.all_subnets():
            role = topology.value.lower()
            if subnet.cidr is None:
                raise ValueError(f'{role} subnet {name!r} must have a CIDR block')
            if not subnet.cidr.subnet_of(self.cidr):
                raise ValueError(f'{role} subnet {name!r} ({subnet.cidr}) is not within the VPC CIDR {self.cidr}')
        return self


def load_network_spec(config, key='network'):
    network_spec = NetworkSpec.model_validate(config.require_object(key))
    pulumi.log.debug(f'loaded network spec for {len(network_spec.availability_zones)} availability zones')
    return network_spec
