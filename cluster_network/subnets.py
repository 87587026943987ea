"""Subnets produced by the VPC build"""
from typing import Any, List, NamedTuple, Optional


class SubnetResource(NamedTuple):
    subnet: Any
    route_table: Optional[Any]
    availability_zone: str


class SubnetDetails(object):
    def __init__(self, private=None, public=None):
        self.private: List[SubnetResource] = list(private or [])
        self.public: List[SubnetResource] = list(public or [])

    def private_subnet_refs(self):
        return [subnet.subnet for subnet in self.private]

    def public_subnet_refs(self):
        return [subnet.subnet for subnet in self.public]
