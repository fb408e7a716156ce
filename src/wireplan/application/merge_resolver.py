"""Application layer - Inheritance-aware dependency merging."""

from typing import Dict, List, Optional, Set

from wireplan.application.configuration_binding import binding_mode, resolve_binding
from wireplan.application.naming import derive_parameter_name, resolve_naming
from wireplan.application.type_substitution import build_substitution_map, substitute
from wireplan.config import AnalysisSettings, get_settings
from wireplan.domain import (
    Component,
    ConfigBindingMode,
    ConfigurationBinding,
    DependencyOrigin,
    DependencySpec,
    Finding,
    FindingCode,
    ITypeCatalog,
    MergeResult,
    NamingOptions,
    ResolvedDependency,
    TypeRef,
)
from wireplan.logging import get_logger

logger = get_logger(__name__)


class InheritanceMergeResolver:
    """Merges each component's declared dependencies with those of its ancestors.

    The flattened list of a component is its base's flattened list, with the
    base's generic parameters substituted, followed by the dependencies that are
    new at the component's own level. Results are memoized per identity and
    written exactly once, so a resolver must not outlive one analysis pass.

    Attributes:
        _catalog: Source of component facts.
        _settings: Naming defaults and collection wrappers.
        _results: Write-once memo of merge results by identity.
    """

    def __init__(self, catalog: ITypeCatalog, settings: Optional[AnalysisSettings] = None) -> None:
        """Initialize the resolver with an empty memo.

        Args:
            catalog: Catalog to read components from.
            settings: Analysis settings. Uses cached settings if not provided.
        """
        self._catalog = catalog
        self._settings = settings or get_settings()
        self._results: Dict[str, MergeResult] = {}

    def merge(self, component: Component) -> MergeResult:
        """Return the merge result for ``component``, computing its ancestors first.

        Walks the base chain leaf-to-root until it reaches a memoized result, a
        root, or a base the catalog does not know (a framework base that
        contributes nothing), then folds levels root-to-leaf. A base already on
        the walk means the chain is cyclic: every component on the walk fails
        with a fatal ``InheritanceCycle`` finding.

        Args:
            component: The component to merge.

        Returns:
            The memoized merge result.

        Example:
            >>> resolver = InheritanceMergeResolver(catalog)
            >>> result = resolver.merge(catalog.get("app.Leaf"))
            >>> [str(dep.type_ref) for dep in result.flattened]
            ['app.IA', 'app.IB', 'app.IC', 'app.ID']
        """
        cached = self._results.get(component.identity)
        if cached is not None:
            return cached

        chain: List[Component] = [component]
        visited: Set[str] = {component.identity}
        current = component
        cyclic = False
        while current.base is not None:
            base_identity = current.base.name
            if base_identity in self._results:
                break
            if base_identity in visited:
                cyclic = True
                break
            base = self._catalog.get(base_identity)
            if base is None:
                break
            visited.add(base_identity)
            chain.append(base)
            current = base

        if cyclic:
            for member in chain:
                logger.debug("merge.inheritance_cycle", component=member.identity)
                self._store(self._failure(member, FindingCode.INHERITANCE_CYCLE, member.base))
            return self._results[component.identity]

        for level in reversed(chain):
            self._store(self._merge_level(level))
        return self._results[component.identity]

    def _store(self, result: MergeResult) -> None:
        # Write-once: a computed result is never replaced.
        self._results.setdefault(result.component, result)

    def _failure(self, component: Component, code: FindingCode, subject: Optional[object]) -> MergeResult:
        error = Finding.of(code, component.identity, subject=subject, fatal=True)
        return MergeResult(component=component.identity, error=error)

    def _merge_level(self, component: Component) -> MergeResult:
        identity = component.identity
        inherited: tuple = ()

        if component.base is not None:
            base_result = self._results.get(component.base.name)
            base_component = self._catalog.get(component.base.name)
            if base_result is not None and base_component is not None:
                if not base_result.succeeded:
                    return self._failure(component, base_result.error.code, component.base.name)
                mapping = build_substitution_map(base_component.type_parameters, component.base.args)
                if mapping is None:
                    return self._failure(component, FindingCode.UNRESOLVABLE_GENERIC, component.base)
                inherited = tuple(
                    dep.model_copy(update={"type_ref": substitute(dep.type_ref, mapping)})
                    for dep in base_result.flattened
                )
                collapsed = _first_duplicate(dep.type_ref for dep in inherited)
                if collapsed is not None:
                    # Two distinct ancestor parameters closed onto the same type.
                    return self._failure(component, FindingCode.UNRESOLVABLE_GENERIC, collapsed)

        findings: List[Finding] = []
        declared = sorted(
            enumerate(component.dependencies),
            key=lambda item: (item[1].order, item[0]),
        )
        bulk_specs = [spec for _, spec in declared if spec.origin == DependencyOrigin.BULK_DECLARED]
        member_specs = [spec for _, spec in declared if spec.origin != DependencyOrigin.BULK_DECLARED]

        bulk: Dict[TypeRef, ResolvedDependency] = {}
        for spec in bulk_specs:
            existing = bulk.get(spec.type_ref)
            if existing is not None:
                code = (
                    FindingCode.DUPLICATE_WITHIN_GROUP
                    if existing.group == spec.group
                    else FindingCode.DUPLICATE_ACROSS_GROUPS
                )
                findings.append(Finding.of(code, identity, subject=spec.type_ref))
                continue
            bulk[spec.type_ref] = self._resolve(identity, spec)

        fields: Dict[TypeRef, ResolvedDependency] = {}
        bindings: List[ConfigurationBinding] = []
        members: Set[str] = set()
        for spec in member_specs:
            mode = None
            if spec.origin == DependencyOrigin.CONFIG_BOUND:
                mode = spec.configuration.mode or binding_mode(spec.type_ref, self._settings)
                if spec.member_name in members:
                    findings.append(Finding.of(FindingCode.DUPLICATE_FIELD, identity, subject=spec.member_name))
                    continue
            if mode in (ConfigBindingMode.DIRECT_VALUE, ConfigBindingMode.SECTION):
                members.add(spec.member_name)
                bindings.append(resolve_binding(identity, spec, mode, self._settings))
                continue
            if spec.type_ref in fields:
                findings.append(Finding.of(FindingCode.DUPLICATE_FIELD, identity, subject=spec.type_ref))
                continue
            entry = self._resolve(identity, spec)
            members.add(entry.member_name)
            fields[spec.type_ref] = entry

        for type_ref in list(bulk):
            if type_ref in fields:
                del bulk[type_ref]
                findings.append(Finding.of(FindingCode.FIELD_OVERRIDES_BULK, identity, subject=type_ref))

        source_type = TypeRef.parse(self._settings.configuration_type)
        candidates = list(bulk.values()) + list(fields.values())
        if bindings and all(entry.type_ref != source_type for entry in inherited + tuple(candidates)):
            candidates.append(self._configuration_source(identity, source_type, len(component.dependencies)))

        ancestors = {dep.type_ref: dep.declared_by for dep in inherited}
        used_names = {dep.name for dep in inherited}
        new: List[ResolvedDependency] = []
        for entry in candidates:
            ancestor = ancestors.get(entry.type_ref)
            if ancestor is not None:
                findings.append(
                    Finding.of(
                        FindingCode.REDUNDANT_WITH_ANCESTOR,
                        identity,
                        subject=entry.type_ref,
                        path=(identity, ancestor),
                    )
                )
                continue
            if entry.origin == DependencyOrigin.BULK_DECLARED:
                # Bulk parameters become members, so they must not shadow a local field.
                name = _unique_name(entry.name, used_names | members)
                entry = entry.model_copy(update={"name": name, "member_name": name})
            else:
                name = _unique_name(entry.name, used_names)
                entry = entry.model_copy(update={"name": name})
            used_names.add(name)
            new.append(entry)

        flattened = inherited + tuple(new)
        configuration_parameter = None
        if bindings:
            configuration_parameter = next(dep.name for dep in flattened if dep.type_ref == source_type)

        logger.debug(
            "merge.level_completed",
            component=identity,
            inherited=len(inherited),
            new=len(new),
            bindings=len(bindings),
            findings=len(findings),
        )
        return MergeResult(
            component=identity,
            flattened=flattened,
            inherited_count=len(inherited),
            findings=tuple(findings),
            bindings=tuple(bindings),
            configuration_parameter=configuration_parameter,
        )

    def _derive_name(self, naming: NamingOptions, type_ref: TypeRef) -> str:
        convention, prefix, strip = resolve_naming(naming, self._settings)
        return derive_parameter_name(
            type_ref,
            convention=convention,
            prefix=prefix,
            strip_interface_marker=strip,
            collection_types=self._settings.collection_types,
        )

    def _resolve(self, identity: str, spec: DependencySpec) -> ResolvedDependency:
        name = spec.member_name or self._derive_name(spec.naming, spec.type_ref)
        return ResolvedDependency(
            origin=spec.origin,
            type_ref=spec.type_ref,
            name=name,
            member_name=None if spec.origin == DependencyOrigin.BULK_DECLARED else name,
            order=spec.order,
            group=spec.group,
            # Options wrappers are supplied by the host, not by a registration.
            external=spec.external or spec.origin == DependencyOrigin.CONFIG_BOUND,
            declared_by=identity,
        )

    def _configuration_source(self, identity: str, source_type: TypeRef, order: int) -> ResolvedDependency:
        return ResolvedDependency(
            origin=DependencyOrigin.CONFIG_BOUND,
            type_ref=source_type,
            name=self._derive_name(NamingOptions(), source_type),
            order=order,
            external=True,
            declared_by=identity,
        )


def _first_duplicate(type_refs) -> Optional[TypeRef]:
    seen: Set[TypeRef] = set()
    for type_ref in type_refs:
        if type_ref in seen:
            return type_ref
        seen.add(type_ref)
    return None


def _unique_name(name: str, used: Set[str]) -> str:
    if name not in used:
        return name
    suffix = 2
    while f"{name}{suffix}" in used:
        suffix += 1
    return f"{name}{suffix}"
