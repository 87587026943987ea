"""Names of the outputs the VPC template defines"""

CLUSTER_VPC = 'VPC'
CLUSTER_FEATURE_NAT_MODE = 'FeatureNATMode'
CLUSTER_SUBNETS_PRIVATE = 'SubnetsPrivate'
CLUSTER_SUBNETS_PUBLIC = 'SubnetsPublic'
CLUSTER_FULLY_PRIVATE = 'ClusterFullyPrivate'
