"""Application layer - Conditional registration predicate compilation."""

from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from wireplan.domain import ConditionDeclaration, Finding, FindingCode
from wireplan.domain.predicates import (
    ConfigEquals,
    ConfigNotEquals,
    EnvEquals,
    Not,
    PredicateNode,
    all_of,
    any_of,
    fold,
)
from wireplan.logging import get_logger

logger = get_logger(__name__)


class CompilationResult(BaseModel):
    """Outcome of compiling one component's condition declarations.

    Attributes:
        predicate: The compiled expression tree; None when there are no
            declarations or compilation failed.
        findings: Fatal ``ConditionContradiction`` findings, if any.
    """

    model_config = ConfigDict(frozen=True)

    predicate: Optional[PredicateNode] = None
    findings: Tuple[Finding, ...] = Field(default=())

    @property
    def succeeded(self) -> bool:
        return not self.findings


class PredicateCompiler:
    """Compiles raw condition declarations into a ``PredicateNode`` tree.

    Within one declaration, allow-list names combine with ``Or``; the allow
    check, the negated deny check and the configuration check combine with
    ``And``. Several declarations on one component are accepted only when every
    pair is provably mutually exclusive, and then combine with ``Or``. All
    comparisons are case-insensitive.
    """

    def compile(self, identity: str, declarations: Sequence[ConditionDeclaration]) -> CompilationResult:
        """Compile ``declarations`` for the component ``identity``.

        Args:
            identity: Component the declarations belong to.
            declarations: Condition declarations, in declaration order.

        Returns:
            A result holding either the predicate or the contradiction findings.

        Example:
            >>> result = PredicateCompiler().compile(
            ...     "app.MailSender",
            ...     [ConditionDeclaration(environments="Development,Testing")],
            ... )
            >>> result.predicate.evaluate("testing", {})
            True
        """
        if not declarations:
            return CompilationResult()

        findings: List[Finding] = []
        for declaration in declarations:
            findings.extend(_validate(identity, declaration))
        if findings:
            return CompilationResult(findings=tuple(findings))

        for (first_index, first), (second_index, second) in combinations(enumerate(declarations), 2):
            if not _mutually_exclusive(first, second):
                logger.debug(
                    "predicate.ambiguous",
                    component=identity,
                    first=first_index,
                    second=second_index,
                )
                return CompilationResult(
                    findings=(Finding.of(FindingCode.AMBIGUOUS_CONDITIONS, identity, fatal=True),)
                )

        predicate = any_of(tuple(_build(declaration) for declaration in declarations))
        return CompilationResult(predicate=predicate)


def _equals(declaration: ConditionDeclaration) -> Optional[str]:
    # A blank comparator value is no comparator.
    if declaration.equals is None or not declaration.equals.strip():
        return None
    return declaration.equals.strip()


def _has_key(declaration: ConditionDeclaration) -> bool:
    return bool(declaration.config_key and declaration.config_key.strip())


def _unique(values: Sequence[str]) -> Tuple[str, ...]:
    seen: Dict[str, str] = {}
    for value in values:
        seen.setdefault(fold(value), value.strip())
    return tuple(seen.values())


def _validate(identity: str, declaration: ConditionDeclaration) -> List[Finding]:
    findings: List[Finding] = []

    denied = {fold(name) for name in declaration.not_environments}
    for name in _unique(declaration.environments):
        if fold(name) in denied:
            findings.append(Finding.of(FindingCode.ENVIRONMENT_CONFLICT, identity, subject=name, fatal=True))

    equals = _equals(declaration)
    has_comparator = equals is not None or bool(declaration.not_equals)
    if declaration.config_key is not None and not declaration.config_key.strip():
        findings.append(Finding.of(FindingCode.EMPTY_CONFIG_KEY, identity, fatal=True))
    elif _has_key(declaration) and not has_comparator:
        findings.append(
            Finding.of(FindingCode.KEY_WITHOUT_COMPARATOR, identity, subject=declaration.config_key, fatal=True)
        )
    elif declaration.config_key is None and has_comparator:
        findings.append(Finding.of(FindingCode.COMPARATOR_WITHOUT_KEY, identity, fatal=True))

    if equals is not None and fold(equals) in {fold(value) for value in declaration.not_equals}:
        findings.append(Finding.of(FindingCode.CONFIG_VALUE_CONFLICT, identity, subject=equals, fatal=True))

    if (
        not declaration.environments
        and not declaration.not_environments
        and declaration.config_key is None
        and not has_comparator
    ):
        findings.append(Finding.of(FindingCode.EMPTY_CONDITION, identity, fatal=True))
    return findings


def _mutually_exclusive(first: ConditionDeclaration, second: ConditionDeclaration) -> bool:
    first_allowed = {fold(name) for name in first.environments}
    second_allowed = {fold(name) for name in second.environments}
    if first_allowed and second_allowed and not first_allowed & second_allowed:
        return True
    if first_allowed and first_allowed <= {fold(name) for name in second.not_environments}:
        return True
    if second_allowed and second_allowed <= {fold(name) for name in first.not_environments}:
        return True

    if not (_has_key(first) and _has_key(second)) or fold(first.config_key) != fold(second.config_key):
        return False
    first_equals = _equals(first)
    second_equals = _equals(second)
    if first_equals is not None and second_equals is not None and fold(first_equals) != fold(second_equals):
        return True
    if first_equals is not None and fold(first_equals) in {fold(value) for value in second.not_equals}:
        return True
    if second_equals is not None and fold(second_equals) in {fold(value) for value in first.not_equals}:
        return True
    return False


def _build(declaration: ConditionDeclaration) -> PredicateNode:
    parts: List[PredicateNode] = []

    allowed = _unique(declaration.environments)
    if allowed:
        parts.append(any_of(tuple(EnvEquals(name=name) for name in allowed)))
    denied = _unique(declaration.not_environments)
    if denied:
        parts.append(Not(child=any_of(tuple(EnvEquals(name=name) for name in denied))))

    if _has_key(declaration):
        key = declaration.config_key.strip()
        equals = _equals(declaration)
        if equals is not None:
            parts.append(ConfigEquals(key=key, value=equals))
        parts.extend(ConfigNotEquals(key=key, value=value) for value in _unique(declaration.not_equals))

    return all_of(tuple(parts))
