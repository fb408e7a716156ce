"""Application layer - Constructor parameter synthesis."""

from wireplan.domain import (
    Component,
    ConstructorParameter,
    ConstructorPlan,
    DependencyOrigin,
    MergeResult,
)


class ConstructorSynthesizer:
    """Turns a merged dependency list into a constructor parameter plan.

    The inherited prefix of the flattened list is forwarded to the base
    constructor by name. The remainder becomes the component's own parameters.
    Each own parameter with a member is assigned locally, followed by the
    members this level binds from configuration.
    """

    def synthesize(self, component: Component, merge_result: MergeResult) -> ConstructorPlan:
        """Build the constructor plan for ``component``.

        Args:
            component: The component being planned.
            merge_result: Its successful merge result.

        Returns:
            Forwarded names, own parameters and locally assigned names.

        Raises:
            ValueError: If the merge result failed or belongs to another component.

        Example:
            >>> plan = ConstructorSynthesizer().synthesize(leaf, resolver.merge(leaf))
            >>> plan.forwarded_parameter_names
            ('_a', '_b', '_c')
            >>> [param.name for param in plan.own_parameters]
            ['_d']
        """
        if merge_result.component != component.identity:
            raise ValueError(
                f"Merge result for {merge_result.component} cannot plan {component.identity}"
            )
        if not merge_result.succeeded:
            raise ValueError(f"Cannot synthesize a constructor for {component.identity}: merge failed")

        forwarded = tuple(dep.name for dep in merge_result.inherited)
        own = tuple(
            ConstructorParameter(
                name=dep.name,
                type_ref=dep.type_ref,
                member_name=dep.member_name,
                # Field declarations and pre-existing members are already declared.
                declares_member=(
                    dep.origin == DependencyOrigin.BULK_DECLARED and dep.member_name not in component.existing_members
                ),
            )
            for dep in merge_result.own
        )
        assigned = tuple(param.member_name for param in own if param.member_name is not None)
        return ConstructorPlan(
            component=component.identity,
            forwarded_parameter_names=forwarded,
            own_parameters=own,
            locally_assigned_names=assigned + tuple(binding.member_name for binding in merge_result.bindings),
            configuration_bindings=merge_result.bindings,
            configuration_parameter=merge_result.configuration_parameter,
        )
