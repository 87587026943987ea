"""Cluster VPC CloudFormation template built from a declarative network spec"""
