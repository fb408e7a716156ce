"""Unit tests for ConstructorSynthesizer."""

import pytest

from wireplan.application.constructor_synthesizer import ConstructorSynthesizer
from wireplan.application.merge_resolver import InheritanceMergeResolver
from wireplan.config import AnalysisSettings
from wireplan.domain import TypeRef
from wireplan.infrastructure.testing import CatalogBuilder


def _merge(builder, identity):
    catalog = builder.build()
    resolver = InheritanceMergeResolver(catalog, AnalysisSettings())
    component = catalog.get(identity)
    return component, resolver.merge(component)


class TestConstructorSynthesizer:
    """Test cases for ConstructorSynthesizer."""

    def test_root_component_forwards_nothing(self):
        """Test that a component without a base owns every parameter."""
        builder = CatalogBuilder()
        builder.component("app.Service").depends_on("app.IA", "app.IB")
        component, merge_result = _merge(builder, "app.Service")

        plan = ConstructorSynthesizer().synthesize(component, merge_result)

        assert plan.forwarded_parameter_names == ()
        assert [param.name for param in plan.own_parameters] == ["_a", "_b"]
        assert plan.locally_assigned_names == ("_a", "_b")

    def test_leaf_forwards_inherited_names_in_order(self):
        """Test the three-level scenario: three forwarded names and one own parameter."""
        builder = CatalogBuilder()
        builder.component("app.Root", is_abstract=True).depends_on("app.IA", "app.IB")
        builder.component("app.Middle", base="app.Root", is_abstract=True).inject("app.IC")
        builder.component("app.Leaf", base="app.Middle").depends_on("app.IA").inject("app.ID")
        component, merge_result = _merge(builder, "app.Leaf")

        plan = ConstructorSynthesizer().synthesize(component, merge_result)

        assert plan.forwarded_parameter_names == ("_a", "_b", "_c")
        assert [(param.name, param.type_ref) for param in plan.own_parameters] == [("_d", TypeRef.parse("app.ID"))]
        assert plan.locally_assigned_names == ("_d",)
        assert plan.parameter_names == ("_a", "_b", "_c", "_d")

    def test_existing_member_is_reused(self):
        """Test that a bulk dependency matching an existing member does not declare a new one."""
        builder = CatalogBuilder()
        builder.component("app.Service", existing_members=frozenset({"_clock"})).depends_on(
            "app.IClock", "app.ILogger"
        )
        component, merge_result = _merge(builder, "app.Service")

        plan = ConstructorSynthesizer().synthesize(component, merge_result)

        assert [(param.name, param.declares_member) for param in plan.own_parameters] == [
            ("_clock", False),
            ("_logger", True),
        ]
        assert plan.locally_assigned_names == ("_clock", "_logger")

    def test_field_declared_parameters_never_declare_members(self):
        """Test that field-declared dependencies already are members."""
        builder = CatalogBuilder()
        builder.component("app.Service").inject("app.IClock")
        component, merge_result = _merge(builder, "app.Service")

        plan = ConstructorSynthesizer().synthesize(component, merge_result)

        assert plan.own_parameters[0].declares_member is False

    def test_suffixed_field_assigns_its_real_member(self):
        """Test that a field whose parameter name was suffixed is assigned to its declared member."""
        builder = CatalogBuilder()
        builder.component("app.Root").depends_on("app.IRepository")
        builder.component("app.Leaf", base="app.Root").inject("other.Repository", member_name="_repository")
        component, merge_result = _merge(builder, "app.Leaf")

        plan = ConstructorSynthesizer().synthesize(component, merge_result)

        (param,) = plan.own_parameters
        assert (param.name, param.member_name, param.declares_member) == ("_repository2", "_repository", False)
        assert plan.forwarded_parameter_names == ("_repository",)
        assert plan.locally_assigned_names == ("_repository",)

    def test_configuration_bindings_are_assigned_locally(self):
        """Test that bound members follow the stored parameters and the source parameter is not stored."""
        builder = CatalogBuilder()
        builder.component("app.Mailer").depends_on("app.IClock").bind_config(
            "_host", "str", key="Smtp:Host"
        ).bind_config("_smtp", "app.SmtpSettings")
        component, merge_result = _merge(builder, "app.Mailer")

        plan = ConstructorSynthesizer().synthesize(component, merge_result)

        assert plan.parameter_names == ("_clock", "_configuration")
        assert [(param.member_name, param.declares_member) for param in plan.own_parameters] == [
            ("_clock", True),
            (None, False),
        ]
        assert plan.locally_assigned_names == ("_clock", "_host", "_smtp")
        assert plan.configuration_parameter == "_configuration"
        assert [binding.key for binding in plan.configuration_bindings] == ["Smtp:Host", "Smtp"]

    def test_descendant_forwards_configuration_source(self):
        """Test that a descendant with its own bindings reads from the forwarded source parameter."""
        builder = CatalogBuilder()
        builder.component("app.HttpClientBase", is_abstract=True).bind_config("_timeout", "int", key="Http:Timeout")
        builder.component("app.ApiClient", base="app.HttpClientBase").bind_config(
            "_retries", "int", key="Http:Retries"
        )
        component, merge_result = _merge(builder, "app.ApiClient")

        plan = ConstructorSynthesizer().synthesize(component, merge_result)

        assert plan.forwarded_parameter_names == ("_configuration",)
        assert plan.own_parameters == ()
        assert plan.locally_assigned_names == ("_retries",)
        assert plan.configuration_parameter == "_configuration"

    def test_failed_merge_raises(self):
        """Test that a failed merge cannot be synthesized."""
        builder = CatalogBuilder()
        builder.component("app.Loop", base="app.Loop")
        component, merge_result = _merge(builder, "app.Loop")

        with pytest.raises(ValueError, match="merge failed"):
            ConstructorSynthesizer().synthesize(component, merge_result)

    def test_mismatched_merge_result_raises(self):
        """Test that a merge result for another component is rejected."""
        builder = CatalogBuilder()
        builder.component("app.A").depends_on("app.IA")
        builder.component("app.B").depends_on("app.IB")
        catalog = builder.build()
        resolver = InheritanceMergeResolver(catalog, AnalysisSettings())

        with pytest.raises(ValueError, match="cannot plan app.B"):
            ConstructorSynthesizer().synthesize(catalog.get("app.B"), resolver.merge(catalog.get("app.A")))
