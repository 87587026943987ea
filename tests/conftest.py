"""Shared fixtures for the cluster network tests."""

import pytest

from cluster_network.resource_set import ResourceSet


@pytest.fixture
def rs():
    return ResourceSet(description='test VPC')
