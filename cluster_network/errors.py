"""Errors raised while building or importing the cluster network"""


class NetworkError(Exception):
    """Base class for all cluster network errors."""


class NetworkSpecError(NetworkError):
    """The network spec cannot be turned into a template."""


class InvalidNatModeError(NetworkSpecError):
    def __init__(self, mode):
        super().__init__(f'{mode} is not a valid NAT gateway mode')
        self.mode = mode


class ResourceSetError(NetworkError):
    pass


class VpcImportError(NetworkError):
    """An existing VPC could not be imported."""


class RouteTableLookupError(VpcImportError):
    pass


class RouteTableNotFoundError(VpcImportError):
    def __init__(self, subnet_id):
        super().__init__(
            f'failed to find an explicit route table associated with subnet {subnet_id!r}; '
            'the main route table is never modified, associate the subnet with an explicit route table'
        )
        self.subnet_id = subnet_id


class MainRouteTableError(VpcImportError):
    def __init__(self, route_table_id, subnet_id=None):
        super().__init__(
            f'subnets must be associated with a non-main route table; {route_table_id} is the main route table'
            + (f' (associated with subnet {subnet_id!r})' if subnet_id else '')
        )
        self.route_table_id = route_table_id
        self.subnet_id = subnet_id
