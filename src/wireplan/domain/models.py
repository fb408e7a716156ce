from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from wireplan.domain.enums import (
    ConfigBindingMode,
    DependencyOrigin,
    ExposureMode,
    FindingCode,
    FindingKind,
    InstanceSharing,
    Lifetime,
    NamingConvention,
    Severity,
)
from wireplan.domain.exceptions import TypeRefSyntaxError
from wireplan.domain.predicates import PredicateNode

_DELIMITERS = "[], "


class TypeRef(BaseModel):
    """Value object naming a (possibly generic) type.

    Attributes:
        name: Qualified type name, e.g. ``app.data.IRepository``.
        args: Ordered generic arguments.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Qualified type name.")
    args: Tuple["TypeRef", ...] = Field(default=(), description="Generic type arguments.")

    @property
    def simple_name(self) -> str:
        """The last dotted segment of the name."""
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_generic(self) -> bool:
        return bool(self.args)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}[{', '.join(str(arg) for arg in self.args)}]"

    def mentioned_names(self) -> FrozenSet[str]:
        """All names appearing anywhere in this reference, arguments included."""
        names = {self.name}
        for arg in self.args:
            names |= arg.mentioned_names()
        return frozenset(names)

    @classmethod
    def parse(cls, text: str) -> "TypeRef":
        """Parse ``Name`` or ``Name[Arg, Other[Inner]]`` into a TypeRef.

        Raises:
            TypeRefSyntaxError: If the text is not a well-formed reference.
        """
        ref, position = _parse_ref(text, 0)
        position = _skip_spaces(text, position)
        if position != len(text):
            raise TypeRefSyntaxError(text, position)
        return ref

    @classmethod
    def coerce(cls, value: Any) -> Any:
        """Accept text wherever a TypeRef is expected."""
        if isinstance(value, str):
            return cls.parse(value)
        return value


def _skip_spaces(text: str, position: int) -> int:
    while position < len(text) and text[position] == " ":
        position += 1
    return position


def _parse_ref(text: str, position: int) -> Tuple[TypeRef, int]:
    position = _skip_spaces(text, position)
    start = position
    while position < len(text) and text[position] not in _DELIMITERS:
        position += 1
    if position == start:
        raise TypeRefSyntaxError(text, position)
    name = text[start:position]
    position = _skip_spaces(text, position)
    if position >= len(text) or text[position] != "[":
        return TypeRef(name=name), position

    args: List[TypeRef] = []
    position += 1
    while True:
        arg, position = _parse_ref(text, position)
        args.append(arg)
        position = _skip_spaces(text, position)
        if position >= len(text):
            raise TypeRefSyntaxError(text, position)
        if text[position] == ",":
            position += 1
            continue
        if text[position] == "]":
            return TypeRef(name=name, args=tuple(args)), position + 1
        raise TypeRefSyntaxError(text, position)


def _coerce_refs(value: Any) -> Any:
    """Accept a single reference or text wherever a tuple of TypeRefs is expected."""
    if value is None:
        return ()
    if isinstance(value, (str, TypeRef)):
        value = (value,)
    return tuple(TypeRef.coerce(item) for item in value)


def _split_list(value: Any) -> Any:
    """Accept comma-separated text for list-valued condition fields."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(item.strip() for item in value if item and item.strip())


class NamingOptions(BaseModel):
    """Per-declaration naming options; unset fields fall back to settings.

    Attributes:
        convention: Casing convention applied to the derived name.
        prefix: Text prepended to the derived name.
        strip_interface_marker: Whether to strip a leading ``I`` interface marker.
    """

    model_config = ConfigDict(frozen=True)

    convention: Optional[NamingConvention] = None
    prefix: Optional[str] = None
    strip_interface_marker: Optional[bool] = None


class ConfigurationSource(BaseModel):
    """Where a configuration-bound member reads its value from.

    Attributes:
        key: Configuration key or section name. When unset, the section name is
            inferred from the member's type (``DatabaseSettings`` -> ``Database``).
        required: Whether a missing value is an error at construction time.
        default: Fallback value text used when the key is missing.
        mode: Binding mode. When unset it is inferred from the member's type.
    """

    model_config = ConfigDict(frozen=True)

    key: Optional[str] = Field(default=None)
    required: bool = Field(default=True)
    default: Optional[str] = Field(default=None)
    mode: Optional[ConfigBindingMode] = Field(default=None)


class DependencySpec(BaseModel):
    """A raw dependency declaration as supplied by the type catalog.

    Attributes:
        origin: Whether the declaration is a field marker, a bulk type-level
            declaration or a configuration-bound field.
        type_ref: Declared type, possibly mentioning the component's own generic parameters.
        group: Index of the declaration group (one bulk declaration, or one field).
        order: Declaration order index within the component.
        external: Not a lifetime-managed target; excluded from lifetime and cycle checks.
        naming: Naming options for the derived parameter name.
        member_name: Explicit member name of a field declaration, when known.
        configuration: Configuration source of a configuration-bound field.
    """

    model_config = ConfigDict(frozen=True)

    origin: DependencyOrigin = Field(..., description="Declaration source.")
    type_ref: TypeRef = Field(..., description="Declared dependency type.")
    group: int = Field(default=0, ge=0)
    order: int = Field(default=0, ge=0)
    external: bool = Field(default=False)
    naming: NamingOptions = Field(default_factory=NamingOptions)
    member_name: Optional[str] = Field(default=None)
    configuration: Optional[ConfigurationSource] = Field(default=None)

    @field_validator("type_ref", mode="before")
    @classmethod
    def parse_type_ref(cls, value: Any) -> Any:
        return TypeRef.coerce(value)

    @model_validator(mode="after")
    def check_configuration(self) -> "DependencySpec":
        """Require a member name and a source on configuration-bound fields, and no source elsewhere."""
        if self.origin == DependencyOrigin.CONFIG_BOUND:
            if not self.member_name:
                raise ValueError("A configuration-bound dependency requires a member name")
            if self.configuration is None:
                raise ValueError("A configuration-bound dependency requires a configuration source")
        elif self.configuration is not None:
            raise ValueError(f"A {self.origin} dependency cannot carry a configuration source")
        return self


class ResolvedDependency(BaseModel):
    """One entry of a component's flattened dependency list.

    Attributes:
        origin: Declaration source of the surviving declaration.
        type_ref: Resolved type with generic parameters substituted.
        name: Constructor parameter name, unique within the flattened list.
        member_name: Member the value is stored in, or None when it is not stored.
        order: Declaration order index at the declaring level.
        group: Declaration group at the declaring level.
        external: Not a lifetime-managed target.
        declared_by: Identity of the component whose level contributed this entry.
    """

    model_config = ConfigDict(frozen=True)

    origin: DependencyOrigin
    type_ref: TypeRef
    name: str
    member_name: Optional[str] = None
    order: int = 0
    group: int = 0
    external: bool = False
    declared_by: str


class ConfigurationBinding(BaseModel):
    """A member assigned from configuration inside the constructor body.

    Attributes:
        member_name: Member receiving the value.
        type_ref: Member type, with generic parameters substituted.
        key: Configuration key or section name read.
        mode: ``DIRECT_VALUE`` or ``SECTION``.
        required: Whether a missing value is an error.
        default: Fallback value text.
        declared_by: Identity of the component declaring the member.
    """

    model_config = ConfigDict(frozen=True)

    member_name: str
    type_ref: TypeRef
    key: str
    mode: ConfigBindingMode
    required: bool = True
    default: Optional[str] = None
    declared_by: str


class ConditionDeclaration(BaseModel):
    """Raw conditional-registration fragments of one declaration.

    Attributes:
        environments: Environment allow-list.
        not_environments: Environment deny-list.
        config_key: Configuration key compared against ``equals``/``not_equals``.
        equals: Value the configuration key must hold.
        not_equals: Values the configuration key must not hold.
    """

    model_config = ConfigDict(frozen=True)

    environments: Tuple[str, ...] = Field(default=())
    not_environments: Tuple[str, ...] = Field(default=())
    config_key: Optional[str] = Field(default=None)
    equals: Optional[str] = Field(default=None)
    not_equals: Tuple[str, ...] = Field(default=())

    @field_validator("environments", "not_environments", "not_equals", mode="before")
    @classmethod
    def split_lists(cls, value: Any) -> Any:
        return _split_list(value)


class Component(BaseModel):
    """A class-like unit eligible for dependency injection.

    Attributes:
        identity: Stable, unique identity (the qualified type name).
        type_parameters: Names of the component's own generic parameters.
        dependencies: Locally declared dependencies, in declaration order.
        base: Reference to the base component, with closing type arguments.
        lifetime: Registration lifetime.
        contracts: Implemented contract types.
        exposure: Which contracts the component is registered under.
        explicit_contracts: Contracts named for ``ExposureMode.EXPLICIT_LIST``.
        excluded_contracts: Contracts explicitly excluded from registration.
        sharing: Instance-sharing mode across exposed contracts.
        conditions: Conditional-registration declarations.
        existing_members: Member names declared by means other than injection.
        is_abstract: Abstract components never become registration targets.
        is_static: Static components never become registration targets.
        is_concrete: Whether the unit is a concrete class at all.
    """

    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., min_length=1)
    type_parameters: Tuple[str, ...] = Field(default=())
    dependencies: Tuple[DependencySpec, ...] = Field(default=())
    base: Optional[TypeRef] = Field(default=None)
    lifetime: Lifetime = Field(default=Lifetime.UNRESOLVED)
    contracts: Tuple[TypeRef, ...] = Field(default=())
    exposure: ExposureMode = Field(default=ExposureMode.ALL_CONTRACTS)
    explicit_contracts: Tuple[TypeRef, ...] = Field(default=())
    excluded_contracts: Tuple[TypeRef, ...] = Field(default=())
    sharing: InstanceSharing = Field(default=InstanceSharing.SEPARATE)
    conditions: Tuple[ConditionDeclaration, ...] = Field(default=())
    existing_members: FrozenSet[str] = Field(default=frozenset())
    is_abstract: bool = False
    is_static: bool = False
    is_concrete: bool = True

    @field_validator("base", mode="before")
    @classmethod
    def parse_base(cls, value: Any) -> Any:
        return TypeRef.coerce(value)

    @field_validator("contracts", "explicit_contracts", "excluded_contracts", mode="before")
    @classmethod
    def parse_type_refs(cls, value: Any) -> Any:
        return _coerce_refs(value)

    @property
    def type_ref(self) -> TypeRef:
        """The component's own type, open over its generic parameters."""
        return TypeRef(name=self.identity, args=tuple(TypeRef(name=param) for param in self.type_parameters))

    @property
    def is_registrable(self) -> bool:
        """Whether the component can become a registration target."""
        return self.is_concrete and not self.is_abstract and not self.is_static and self.lifetime != Lifetime.UNRESOLVED


class Finding(BaseModel):
    """A structured analysis diagnostic.

    Presentation layers own message text; a finding only carries the reason
    code and the one or two references it concerns.

    Attributes:
        kind: Taxonomy bucket, derived from ``code``.
        code: Concrete reason.
        severity: Reported severity.
        fatal: Whether the finding blocks output for ``component``.
        component: Identity of the affected component.
        subject: Second affected type or name reference, if any.
        path: Component identities along a cycle, closed on its first member.
    """

    model_config = ConfigDict(frozen=True)

    kind: FindingKind
    code: FindingCode
    severity: Severity
    fatal: bool = False
    component: str
    subject: Optional[str] = None
    path: Tuple[str, ...] = Field(default=())

    @classmethod
    def of(
        cls,
        code: FindingCode,
        component: str,
        subject: Optional[object] = None,
        fatal: bool = False,
        path: Iterable[str] = (),
    ) -> "Finding":
        """Build a finding, deriving kind and default severity from ``code`` and ``fatal``."""
        return cls(
            kind=code.kind,
            code=code,
            severity=Severity.ERROR if fatal else Severity.WARNING,
            fatal=fatal,
            component=component,
            subject=None if subject is None else str(subject),
            path=tuple(path),
        )


class MergeResult(BaseModel):
    """Outcome of merging one component's dependencies across its inheritance chain.

    Attributes:
        component: Identity of the merged component.
        flattened: Base flattened list followed by locally new entries.
        inherited_count: Length of the prefix inherited from the base.
        findings: Findings produced at this component's own level.
        error: Fatal structural finding; when set, ``flattened`` is empty.
        bindings: Configuration bindings declared at this component's own level.
        configuration_parameter: Name of the configuration source parameter the
            bindings read from, when there are bindings.
    """

    model_config = ConfigDict(frozen=True)

    component: str
    flattened: Tuple[ResolvedDependency, ...] = Field(default=())
    inherited_count: int = Field(default=0, ge=0)
    findings: Tuple[Finding, ...] = Field(default=())
    bindings: Tuple[ConfigurationBinding, ...] = Field(default=())
    configuration_parameter: Optional[str] = None
    error: Optional[Finding] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def inherited(self) -> Tuple[ResolvedDependency, ...]:
        return self.flattened[: self.inherited_count]

    @property
    def own(self) -> Tuple[ResolvedDependency, ...]:
        return self.flattened[self.inherited_count :]


class ConstructorParameter(BaseModel):
    """A constructor parameter owned by the synthesized component.

    Attributes:
        name: Parameter name.
        type_ref: Resolved parameter type.
        member_name: Member the parameter is stored in, or None when it is only
            read inside the constructor body.
        declares_member: False when the member already exists.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type_ref: TypeRef
    member_name: Optional[str] = None
    declares_member: bool = True


class ConstructorPlan(BaseModel):
    """Constructor parameter plan handed to a textual emitter.

    Attributes:
        component: Identity of the planned component.
        forwarded_parameter_names: Names passed to the base constructor, in order.
        own_parameters: Parameters unique to this component, in order.
        locally_assigned_names: Members this component stores itself.
        configuration_bindings: Members assigned from configuration, in order.
        configuration_parameter: Parameter the configuration bindings read from.
    """

    model_config = ConfigDict(frozen=True)

    component: str
    forwarded_parameter_names: Tuple[str, ...] = Field(default=())
    own_parameters: Tuple[ConstructorParameter, ...] = Field(default=())
    locally_assigned_names: Tuple[str, ...] = Field(default=())
    configuration_bindings: Tuple[ConfigurationBinding, ...] = Field(default=())
    configuration_parameter: Optional[str] = None

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        """Full constructor signature order: forwarded names then own names."""
        return self.forwarded_parameter_names + tuple(param.name for param in self.own_parameters)


class RegistrationEntry(BaseModel):
    """One registration in the global plan.

    Attributes:
        component: Identity of the concrete implementation.
        service: Type the entry is registered under.
        lifetime: Registration lifetime.
        sharing: Instance-sharing mode of the component.
        forwards_to: Concrete identity this entry delegates to (Shared mode only).
        predicate: Compiled registration condition, if any.
    """

    model_config = ConfigDict(frozen=True)

    component: str
    service: TypeRef
    lifetime: Lifetime
    sharing: InstanceSharing
    forwards_to: Optional[str] = None
    predicate: Optional[PredicateNode] = None

    @property
    def is_forwarding(self) -> bool:
        return self.forwards_to is not None


class AnalysisResult(BaseModel):
    """Everything one analysis pass produces.

    Attributes:
        merges: Merge results keyed by component identity.
        constructor_plans: Constructor plans keyed by component identity.
        predicates: Compiled predicates keyed by component identity.
        registrations: Global registration plan.
        findings: All findings, in reporting order.
        blocked: Identities with at least one fatal finding.
    """

    model_config = ConfigDict(frozen=True)

    merges: Dict[str, MergeResult] = Field(default_factory=dict)
    constructor_plans: Dict[str, ConstructorPlan] = Field(default_factory=dict)
    predicates: Dict[str, PredicateNode] = Field(default_factory=dict)
    registrations: Tuple[RegistrationEntry, ...] = Field(default=())
    findings: Tuple[Finding, ...] = Field(default=())
    blocked: FrozenSet[str] = Field(default=frozenset())

    def findings_for(self, identity: str) -> Tuple[Finding, ...]:
        return tuple(finding for finding in self.findings if finding.component == identity)

    def registrations_for(self, identity: str) -> Tuple[RegistrationEntry, ...]:
        return tuple(entry for entry in self.registrations if entry.component == identity)
