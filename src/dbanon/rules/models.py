"""
Rule data types.

A Rule describes one masking operation: which table and columns to overwrite,
how to generate the new value, which rows to touch, and which rows to leave
alone. Rules are frozen; each resolves to exactly one UPDATE statement.
"""
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple, Union

PLACEHOLDER = 'xxxxxxxx'


# ============================================================================
# Value Strategies
# ============================================================================

@dataclass(frozen=True)
class FixedValue:
    """Overwrite with a literal value."""
    value: str


@dataclass(frozen=True)
class Placeholder(FixedValue):
    """Overwrite with the standard placeholder string."""
    value: str = PLACEHOLDER


@dataclass(frozen=True)
class RandomNumber:
    """
    Overwrite with a random integer in [low, high] followed by a literal suffix.

    With the defaults this produces addresses like ``48213@localhost.dev``.
    The value is regenerated on every run.
    """
    low: int = 10000
    high: int = 99999
    suffix: str = '@localhost.dev'

    @property
    def span(self) -> int:
        return self.high - self.low + 1


Strategy = Union[FixedValue, RandomNumber]


# ============================================================================
# Row Selection
# ============================================================================

@dataclass(frozen=True)
class KeyFilter:
    """
    Restrict a rule to rows whose key column matches.

    Attributes:
        column: Column to match (e.g. 'meta_key')
        values: Values to match against
        mode: 'in' for an exact match against any value, 'prefix' for
            ``LIKE '<value>%'`` against a single value
    """
    column: str
    values: Tuple[str, ...]
    mode: str = 'in'

    def __post_init__(self):
        if self.mode not in ('in', 'prefix'):
            raise ValueError(f"Unknown key filter mode: {self.mode}")
        if self.mode == 'prefix' and len(self.values) != 1:
            raise ValueError("A prefix filter takes exactly one value")


@dataclass(frozen=True)
class Exclusion:
    """Rows whose ``column`` value is in ``ids`` are never mutated."""
    column: str
    ids: FrozenSet[int] = frozenset()

    def __bool__(self):
        return bool(self.ids)


# ============================================================================
# Rules
# ============================================================================

@dataclass(frozen=True)
class Rule:
    """One atomic masking operation."""
    name: str
    scope: str
    table: str
    columns: Tuple[str, ...]
    strategy: Strategy
    key_filter: Optional[KeyFilter] = None
    exclusion: Optional[Exclusion] = None

    @property
    def target(self) -> str:
        """Human-readable description of what the rule touches."""
        target = f"{self.table}.{','.join(self.columns)}"
        if self.key_filter is not None:
            if self.key_filter.mode == 'prefix':
                target += f" [{self.key_filter.column} LIKE '{self.key_filter.values[0]}%']"
            else:
                target += f" [{self.key_filter.column} IN ({', '.join(self.key_filter.values)})]"
        return target


@dataclass(frozen=True)
class RuleGroup:
    """A named, independently toggleable, ordered collection of rules."""
    name: str
    rules: Tuple[Rule, ...] = ()
    enabled: bool = False

    def __len__(self):
        return len(self.rules)
