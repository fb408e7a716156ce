from enum import Enum


class Lifetime(str, Enum):
    """Defines the lifetime a component is registered with.

    Attributes:
        TRANSIENT: New instance created on each resolution.
        SCOPED: Single instance per scope (e.g., per HTTP request).
        SINGLETON: Single instance shared across entire application.
        HOST_MANAGED: Lifetime owned by an external process host, exempt from durability checks.
        UNRESOLVED: No lifetime could be determined; never registered.
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"
    HOST_MANAGED = "host_managed"
    UNRESOLVED = "unresolved"

    def __str__(self) -> str:
        return self.value

    @property
    def is_exempt(self) -> bool:
        """Whether this lifetime takes no part in durability comparisons."""
        return self in (Lifetime.HOST_MANAGED, Lifetime.UNRESOLVED)

    def outlives(self, other: "Lifetime") -> bool:
        """Return True if instances of this lifetime live strictly longer than ``other``.

        Exempt lifetimes never outlive anything and are never outlived.
        """
        if self.is_exempt or other.is_exempt:
            return False
        return _DURABILITY[self] > _DURABILITY[other]


_DURABILITY = {
    Lifetime.TRANSIENT: 0,
    Lifetime.SCOPED: 1,
    Lifetime.SINGLETON: 2,
}


class DependencyOrigin(str, Enum):
    """Where a dependency declaration came from."""

    FIELD_DECLARED = "field_declared"
    BULK_DECLARED = "bulk_declared"
    CONFIG_BOUND = "config_bound"

    def __str__(self) -> str:
        return self.value


class ConfigBindingMode(str, Enum):
    """How a configuration-bound member receives its value.

    Attributes:
        DIRECT_VALUE: A scalar read from a single configuration key.
        SECTION: An object bound from a configuration section.
        OPTIONS: An options wrapper injected as an ordinary constructor parameter.
    """

    DIRECT_VALUE = "direct_value"
    SECTION = "section"
    OPTIONS = "options"

    def __str__(self) -> str:
        return self.value


class ExposureMode(str, Enum):
    """Which contracts a component is registered under besides its own type."""

    SELF_ONLY = "self_only"
    ALL_CONTRACTS = "all_contracts"
    EXPLICIT_LIST = "explicit_list"

    def __str__(self) -> str:
        return self.value


class InstanceSharing(str, Enum):
    """Whether exposed contracts share one instance or are constructed independently."""

    SEPARATE = "separate"
    SHARED = "shared"

    def __str__(self) -> str:
        return self.value


class NamingConvention(str, Enum):
    """Casing applied to derived parameter names."""

    CAMEL_CASE = "camel_case"
    PASCAL_CASE = "pascal_case"
    SNAKE_CASE = "snake_case"

    def __str__(self) -> str:
        return self.value


class Severity(str, Enum):
    """Severity a finding is reported with."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


class FindingKind(str, Enum):
    """Closed taxonomy of analysis findings."""

    STRUCTURAL_ERROR = "structural_error"
    REDUNDANCY_WARNING = "redundancy_warning"
    CONFLICT_WARNING = "conflict_warning"
    LIFETIME_VIOLATION = "lifetime_violation"
    CONDITION_CONTRADICTION = "condition_contradiction"
    UNNECESSARY_EXCLUSION = "unnecessary_exclusion"
    CYCLE_WARNING = "cycle_warning"

    def __str__(self) -> str:
        return self.value


class FindingCode(str, Enum):
    """Concrete reason behind a finding.

    Each code belongs to exactly one ``FindingKind`` (see ``FINDING_CODE_KINDS``).
    """

    # Structural
    INHERITANCE_CYCLE = "inheritance_cycle"
    UNRESOLVABLE_GENERIC = "unresolvable_generic"
    UNIMPLEMENTED_CONTRACT = "unimplemented_contract"
    # Redundancy
    DUPLICATE_WITHIN_GROUP = "duplicate_within_group"
    DUPLICATE_ACROSS_GROUPS = "duplicate_across_groups"
    DUPLICATE_FIELD = "duplicate_field"
    REDUNDANT_WITH_ANCESTOR = "redundant_with_ancestor"
    DUPLICATE_CONTRACT = "duplicate_contract"
    # Conflict
    FIELD_OVERRIDES_BULK = "field_overrides_bulk"
    # Lifetime
    SINGLETON_CAPTURES_SHORTER_LIVED = "singleton_captures_shorter_lived"
    INHERITED_LIFETIME_MISMATCH = "inherited_lifetime_mismatch"
    # Conditions
    ENVIRONMENT_CONFLICT = "environment_conflict"
    CONFIG_VALUE_CONFLICT = "config_value_conflict"
    COMPARATOR_WITHOUT_KEY = "comparator_without_key"
    KEY_WITHOUT_COMPARATOR = "key_without_comparator"
    EMPTY_CONFIG_KEY = "empty_config_key"
    EMPTY_CONDITION = "empty_condition"
    AMBIGUOUS_CONDITIONS = "ambiguous_conditions"
    # Planning
    UNNECESSARY_EXCLUSION = "unnecessary_exclusion"
    # Cycles
    DEPENDENCY_CYCLE = "dependency_cycle"

    def __str__(self) -> str:
        return self.value

    @property
    def kind(self) -> FindingKind:
        return FINDING_CODE_KINDS[self]


FINDING_CODE_KINDS = {
    FindingCode.INHERITANCE_CYCLE: FindingKind.STRUCTURAL_ERROR,
    FindingCode.UNRESOLVABLE_GENERIC: FindingKind.STRUCTURAL_ERROR,
    FindingCode.UNIMPLEMENTED_CONTRACT: FindingKind.STRUCTURAL_ERROR,
    FindingCode.DUPLICATE_WITHIN_GROUP: FindingKind.REDUNDANCY_WARNING,
    FindingCode.DUPLICATE_ACROSS_GROUPS: FindingKind.REDUNDANCY_WARNING,
    FindingCode.DUPLICATE_FIELD: FindingKind.REDUNDANCY_WARNING,
    FindingCode.REDUNDANT_WITH_ANCESTOR: FindingKind.REDUNDANCY_WARNING,
    FindingCode.DUPLICATE_CONTRACT: FindingKind.REDUNDANCY_WARNING,
    FindingCode.FIELD_OVERRIDES_BULK: FindingKind.CONFLICT_WARNING,
    FindingCode.SINGLETON_CAPTURES_SHORTER_LIVED: FindingKind.LIFETIME_VIOLATION,
    FindingCode.INHERITED_LIFETIME_MISMATCH: FindingKind.LIFETIME_VIOLATION,
    FindingCode.ENVIRONMENT_CONFLICT: FindingKind.CONDITION_CONTRADICTION,
    FindingCode.CONFIG_VALUE_CONFLICT: FindingKind.CONDITION_CONTRADICTION,
    FindingCode.COMPARATOR_WITHOUT_KEY: FindingKind.CONDITION_CONTRADICTION,
    FindingCode.KEY_WITHOUT_COMPARATOR: FindingKind.CONDITION_CONTRADICTION,
    FindingCode.EMPTY_CONFIG_KEY: FindingKind.CONDITION_CONTRADICTION,
    FindingCode.EMPTY_CONDITION: FindingKind.CONDITION_CONTRADICTION,
    FindingCode.AMBIGUOUS_CONDITIONS: FindingKind.CONDITION_CONTRADICTION,
    FindingCode.UNNECESSARY_EXCLUSION: FindingKind.UNNECESSARY_EXCLUSION,
    FindingCode.DEPENDENCY_CYCLE: FindingKind.CYCLE_WARNING,
}
