"""Unit tests for RegistrationPlanner."""

from wireplan.application.registration_planner import RegistrationPlanner
from wireplan.domain import (
    Component,
    ExposureMode,
    FindingCode,
    FindingKind,
    InstanceSharing,
    Lifetime,
    TypeRef,
)
from wireplan.domain.predicates import EnvEquals


def _services(result):
    return [str(entry.service) for entry in result.entries]


def _clock(**fields):
    fields.setdefault("lifetime", Lifetime.SINGLETON)
    fields.setdefault("contracts", ["app.IClock", "app.ITimeSource"])
    return Component(identity="app.SystemClock", **fields)


class TestSharingModes:
    """Test cases for instance-sharing expansion."""

    def test_shared_mode_forwards_every_contract(self):
        """Test that Shared yields one concrete entry plus one forwarding entry per contract."""
        result = RegistrationPlanner().plan(_clock(sharing=InstanceSharing.SHARED))

        assert _services(result) == ["app.SystemClock", "app.IClock", "app.ITimeSource"]
        concrete, *forwarding = result.entries
        assert concrete.forwards_to is None
        assert all(entry.forwards_to == "app.SystemClock" for entry in forwarding)
        assert {entry.component for entry in result.entries} == {"app.SystemClock"}
        assert all(entry.sharing == InstanceSharing.SHARED for entry in result.entries)

    def test_separate_mode_constructs_independently(self):
        """Test that Separate yields k+1 independent entries."""
        result = RegistrationPlanner().plan(_clock())

        assert _services(result) == ["app.SystemClock", "app.IClock", "app.ITimeSource"]
        assert not any(entry.is_forwarding for entry in result.entries)
        assert all(entry.lifetime == Lifetime.SINGLETON for entry in result.entries)

    def test_generic_component_registers_open_type(self):
        """Test that a generic component is registered under its open type."""
        component = Component(
            identity="app.Repository",
            type_parameters=("T",),
            lifetime=Lifetime.SCOPED,
            contracts=["app.IRepository[T]"],
        )

        assert _services(RegistrationPlanner().plan(component)) == ["app.Repository[T]", "app.IRepository[T]"]

    def test_predicate_is_attached_to_every_entry(self):
        """Test that each entry carries the compiled predicate unmodified."""
        predicate = EnvEquals(name="Development")

        result = RegistrationPlanner().plan(_clock(sharing=InstanceSharing.SHARED), predicate)

        assert all(entry.predicate is predicate for entry in result.entries)


class TestExposure:
    """Test cases for exposure modes and exclusions."""

    def test_self_only(self):
        """Test that SelfOnly registers only the concrete type."""
        result = RegistrationPlanner().plan(_clock(exposure=ExposureMode.SELF_ONLY))
        assert _services(result) == ["app.SystemClock"]

    def test_explicit_list(self):
        """Test that ExplicitList exposes only the named contracts."""
        result = RegistrationPlanner().plan(
            _clock(exposure=ExposureMode.EXPLICIT_LIST, explicit_contracts=["app.ITimeSource"])
        )
        assert _services(result) == ["app.SystemClock", "app.ITimeSource"]

    def test_explicit_duplicate_contract(self):
        """Test that a repeated explicit contract collapses with a redundancy warning."""
        result = RegistrationPlanner().plan(
            _clock(exposure=ExposureMode.EXPLICIT_LIST, explicit_contracts=["app.IClock", "app.IClock"])
        )

        assert _services(result) == ["app.SystemClock", "app.IClock"]
        assert [finding.code for finding in result.findings] == [FindingCode.DUPLICATE_CONTRACT]
        assert result.findings[0].kind == FindingKind.REDUNDANCY_WARNING

    def test_explicit_unimplemented_contract_blocks_registration(self):
        """Test that an explicit contract the component does not implement is fatal."""
        result = RegistrationPlanner().plan(
            _clock(exposure=ExposureMode.EXPLICIT_LIST, explicit_contracts=["app.IClock", "app.IScheduler"])
        )

        assert result.entries == ()
        assert [finding.code for finding in result.findings] == [FindingCode.UNIMPLEMENTED_CONTRACT]
        assert result.findings[0].fatal
        assert result.findings[0].subject == "app.IScheduler"

    def test_exclusion_removes_contract(self):
        """Test that an excluded contract is not exposed."""
        result = RegistrationPlanner().plan(_clock(excluded_contracts=["app.ITimeSource"]))

        assert _services(result) == ["app.SystemClock", "app.IClock"]
        assert result.findings == ()

    def test_unnecessary_exclusion(self):
        """Test that excluding an unimplemented contract is reported and ignored."""
        result = RegistrationPlanner().plan(_clock(excluded_contracts=["app.IDisposable"]))

        assert _services(result) == ["app.SystemClock", "app.IClock", "app.ITimeSource"]
        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.kind == FindingKind.UNNECESSARY_EXCLUSION
        assert not finding.fatal
        assert finding.subject == "app.IDisposable"

    def test_exclusion_under_self_only_is_unnecessary(self):
        """Test that excluding an implemented contract is reported when the component exposes no contracts."""
        result = RegistrationPlanner().plan(
            _clock(exposure=ExposureMode.SELF_ONLY, excluded_contracts=["app.IClock", "app.IDisposable"])
        )

        assert _services(result) == ["app.SystemClock"]
        assert [(finding.code, finding.subject) for finding in result.findings] == [
            (FindingCode.UNNECESSARY_EXCLUSION, "app.IClock"),
            (FindingCode.UNNECESSARY_EXCLUSION, "app.IDisposable"),
        ]
        assert not any(finding.fatal for finding in result.findings)

    def test_exclusion_outside_explicit_list_is_unnecessary(self):
        """Test that excluding an implemented contract missing from the explicit list is reported."""
        result = RegistrationPlanner().plan(
            _clock(
                exposure=ExposureMode.EXPLICIT_LIST,
                explicit_contracts=["app.IClock"],
                excluded_contracts=["app.ITimeSource"],
            )
        )

        assert _services(result) == ["app.SystemClock", "app.IClock"]
        assert [(finding.code, finding.subject) for finding in result.findings] == [
            (FindingCode.UNNECESSARY_EXCLUSION, "app.ITimeSource")
        ]

    def test_exclusion_inside_explicit_list_takes_effect(self):
        """Test that an exclusion of an explicitly listed contract removes it silently."""
        result = RegistrationPlanner().plan(
            _clock(
                exposure=ExposureMode.EXPLICIT_LIST,
                explicit_contracts=["app.IClock", "app.ITimeSource"],
                excluded_contracts=["app.ITimeSource"],
            )
        )

        assert _services(result) == ["app.SystemClock", "app.IClock"]
        assert result.findings == ()


class TestRegistrability:
    """Test cases for components that are never registered."""

    def test_non_registrable_components_produce_nothing(self):
        """Test abstract, static, non-concrete and unresolved components."""
        planner = RegistrationPlanner()

        for component in (
            _clock(is_abstract=True),
            _clock(is_static=True),
            _clock(is_concrete=False),
            _clock(lifetime=Lifetime.UNRESOLVED, excluded_contracts=["app.IDisposable"]),
        ):
            result = planner.plan(component)
            assert result.entries == ()
            assert result.findings == ()

    def test_host_managed_component_is_registered(self):
        """Test that host-managed components keep their lifetime."""
        result = RegistrationPlanner().plan(_clock(lifetime=Lifetime.HOST_MANAGED, exposure=ExposureMode.SELF_ONLY))
        assert [entry.lifetime for entry in result.entries] == [Lifetime.HOST_MANAGED]


class TestPlanAll:
    """Test cases for plan_all."""

    def test_plans_in_identity_order_and_skips_blocked(self):
        """Test ordering, blocking and predicate lookup."""
        components = [
            Component(identity="app.Zeta", lifetime=Lifetime.TRANSIENT),
            Component(identity="app.Alpha", lifetime=Lifetime.SCOPED, contracts=["app.IAlpha"]),
            Component(identity="app.Blocked", lifetime=Lifetime.SCOPED),
        ]
        predicate = EnvEquals(name="Testing")

        result = RegistrationPlanner().plan_all(components, {"app.Zeta": predicate}, blocked={"app.Blocked"})

        assert [(entry.component, entry.service) for entry in result.entries] == [
            ("app.Alpha", TypeRef.parse("app.Alpha")),
            ("app.Alpha", TypeRef.parse("app.IAlpha")),
            ("app.Zeta", TypeRef.parse("app.Zeta")),
        ]
        assert result.entries[0].predicate is None
        assert result.entries[2].predicate == predicate
