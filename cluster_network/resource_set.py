"""CloudFormation resource graph and template rendering"""
import json

import pulumi

from cluster_network.errors import ResourceSetError

TEMPLATE_FORMAT_VERSION = '2010-09-09'
INTERNET_CIDR = '0.0.0.0/0'


def make_ref(name):
    return {'Ref': name}


def make_get_att(name, attribute):
    return {'Fn::GetAtt': [name, attribute]}


def make_select(index, values):
    return {'Fn::Select': [index, values]}


def make_cidr(ip_block, count, cidr_bits):
    return {'Fn::Cidr': [ip_block, count, cidr_bits]}


def make_join(delimiter, values):
    return {'Fn::Join': [delimiter, list(values)]}


def make_sub(template):
    return {'Fn::Sub': template}


def make_tags(tags):
    return [{'Key': key, 'Value': value} for key, value in tags.items()]


class ResourceSet(object):
    """
    Named CloudFormation resources and outputs of a single template.

    Resources are declared by logical name and referenced with the value
    returned from ``new_resource``. Outputs may carry a collector, a callable
    that receives the resolved output value once the stack has been deployed.
    """

    def __init__(self, description=None):
        self.description = description
        self.resources = {}
        self.outputs = {}
        self.collectors = {}

    def new_resource(self, name, resource_type, properties=None, depends_on=None):
        resource = {
            'Type': resource_type,
            'Properties': properties or {},
        }
        if depends_on:
            resource['DependsOn'] = list(depends_on)

        existing = self.resources.get(name)
        if existing is not None and existing != resource:
            raise ResourceSetError(f'resource {name} is already declared with a different definition')
        self.resources[name] = resource
        return make_ref(name)

    def define_output(self, name, value, export, collector=None):
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        output = {'Value': value}
        if export:
            output['Export'] = {'Name': make_sub(f'${{AWS::StackName}}::{name}')}
        self.outputs[name] = output
        if collector is not None:
            self.collectors[name] = collector

    def define_joined_output(self, name, values, export, collector=None):
        self.define_output(name, make_join(',', values), export, collector)

    def template(self):
        template = {'AWSTemplateFormatVersion': TEMPLATE_FORMAT_VERSION}
        if self.description:
            template['Description'] = self.description
        template['Resources'] = self.resources
        if self.outputs:
            template['Outputs'] = self.outputs
        return template

    def render_json(self):
        return json.dumps(self.template(), indent=2)

    def collect_outputs(self, values):
        """Run every collector with its resolved value from ``values``."""
        missing = [name for name in self.collectors if name not in values]
        if missing:
            raise ResourceSetError(f'outputs missing from the stack: {", ".join(missing)}')
        for name, collector in self.collectors.items():
            pulumi.log.debug(f'collecting output {name}')
            collector(values[name])
