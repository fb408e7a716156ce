"""Boolean expression tree gating conditional registration.

Nodes are immutable and evaluated by a pure function over an environment name
and a configuration lookup, so they can be tested without any container.
"""

from typing import Annotated, Callable, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

ConfigLookup = Union[Mapping[str, Optional[str]], Callable[[str], Optional[str]]]


def fold(value: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison; None folds to empty."""
    return (value or "").strip().casefold()


def lookup_config(config: ConfigLookup, key: str) -> Optional[str]:
    """Read ``key`` from a mapping or a callable lookup.

    Mapping keys are matched exactly first, then case-insensitively.
    """
    if callable(config):
        return config(key)
    if key in config:
        return config[key]
    folded = fold(key)
    for candidate in sorted(config):
        if fold(candidate) == folded:
            return config[candidate]
    return None


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class And(_Node):
    """True when every child is true."""

    kind: Literal["and"] = "and"
    children: Tuple["PredicateNode", ...] = Field(..., min_length=1)

    def evaluate(self, environment: Optional[str], config: ConfigLookup) -> bool:
        return all(child.evaluate(environment, config) for child in self.children)


class Or(_Node):
    """True when at least one child is true."""

    kind: Literal["or"] = "or"
    children: Tuple["PredicateNode", ...] = Field(..., min_length=1)

    def evaluate(self, environment: Optional[str], config: ConfigLookup) -> bool:
        return any(child.evaluate(environment, config) for child in self.children)


class Not(_Node):
    """Negates its child."""

    kind: Literal["not"] = "not"
    child: "PredicateNode"

    def evaluate(self, environment: Optional[str], config: ConfigLookup) -> bool:
        return not self.child.evaluate(environment, config)


class EnvEquals(_Node):
    """True when the active environment name matches ``name``."""

    kind: Literal["env_equals"] = "env_equals"
    name: str

    def evaluate(self, environment: Optional[str], config: ConfigLookup) -> bool:
        return fold(environment) == fold(self.name)


class ConfigEquals(_Node):
    """True when configuration ``key`` holds ``value``."""

    kind: Literal["config_equals"] = "config_equals"
    key: str
    value: str

    def evaluate(self, environment: Optional[str], config: ConfigLookup) -> bool:
        return fold(lookup_config(config, self.key)) == fold(self.value)


class ConfigNotEquals(_Node):
    """True when configuration ``key`` does not hold ``value``."""

    kind: Literal["config_not_equals"] = "config_not_equals"
    key: str
    value: str

    def evaluate(self, environment: Optional[str], config: ConfigLookup) -> bool:
        return fold(lookup_config(config, self.key)) != fold(self.value)


PredicateNode = Annotated[
    Union[And, Or, Not, EnvEquals, ConfigEquals, ConfigNotEquals],
    Field(discriminator="kind"),
]

And.model_rebuild()
Or.model_rebuild()
Not.model_rebuild()


def all_of(nodes: Tuple[PredicateNode, ...]) -> PredicateNode:
    """Combine nodes with And, collapsing a single node to itself."""
    if len(nodes) == 1:
        return nodes[0]
    return And(children=nodes)


def any_of(nodes: Tuple[PredicateNode, ...]) -> PredicateNode:
    """Combine nodes with Or, collapsing a single node to itself."""
    if len(nodes) == 1:
        return nodes[0]
    return Or(children=nodes)
