"""Automatic tags for taggable AWS resources"""
import pulumi

TAGGABLE_RESOURCE_TYPES = frozenset([
    'aws:cloudformation/stack:Stack',
])


def is_taggable(resource_type):
    return resource_type in TAGGABLE_RESOURCE_TYPES


def register_auto_tags(auto_tags):
    """Add ``auto_tags`` to every taggable resource created by the stack."""
    pulumi.runtime.register_stack_transformation(lambda args: auto_tag(args, auto_tags))


def auto_tag(args, auto_tags):
    if is_taggable(args.type_):
        # tags set on the resource win over the automatic ones
        args.props['tags'] = {**auto_tags, **(args.props.get('tags') or {})}
        return pulumi.ResourceTransformationResult(args.props, args.opts)
