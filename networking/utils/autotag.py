import pulumi
from utils.taggable import is_taggable


def register_auto_tags(auto_tags):
    """Merge ``auto_tags`` into every taggable AWS resource declared by this stack."""
    pulumi.runtime.register_stack_transformation(lambda args: auto_tag(args, auto_tags))


def auto_tag(args, auto_tags):
    if is_taggable(args.type_):
        # Tags set on the resource itself win over the stack-wide ones.
        args.props['tags'] = {**auto_tags, **(args.props.get('tags') or {})}
        return pulumi.ResourceTransformationResult(args.props, args.opts)
