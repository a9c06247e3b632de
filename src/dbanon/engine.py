"""
Anonymization engine.

Runs resolved rules against the store gateway, one statement at a time and in
order. The first failure stops the run. Statements that already ran stay
applied: there is no rollback across rules, so a failed run can leave the
database partially anonymized.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from dbanon.exceptions import ConfigError
from dbanon.rules.models import Rule
from dbanon.rules.statements import build_statement, precondition_statement
from dbanon.session.gateway import Statement

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Fatal error categories reported in a run summary."""

    # Users table could not be read or is empty; nothing was mutated
    PRECONDITION = "precondition"

    # A rule's UPDATE failed or could not be built; earlier rules remain applied
    MUTATION = "mutation"

    # Multisite installation; nothing was resolved or executed
    UNSUPPORTED_TOPOLOGY = "unsupported_topology"


@dataclass(frozen=True)
class RuleResult:
    """Outcome of a single executed rule."""
    rule: Rule
    rowcount: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunFailure:
    """
    The error that stopped a run.

    Attributes:
        kind: Error category
        message: Underlying store message, unmodified
        rule: Failing rule for mutation failures, None otherwise
    """
    kind: ErrorKind
    message: str
    rule: Optional[Rule] = None


@dataclass
class RunSummary:
    """Result of one anonymization run."""
    requested_groups: List[str] = field(default_factory=list)
    resolved_rules: List[Rule] = field(default_factory=list)
    results: List[RuleResult] = field(default_factory=list)
    failure: Optional[RunFailure] = None
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def attempted(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def rows_affected(self) -> int:
        return sum(result.rowcount for result in self.results if result.ok)


class AnonymizationEngine:
    """Sequential, fail-fast executor of resolved rules."""

    def __init__(self, gateway, table_prefix: str = 'wp_'):
        """
        Args:
            gateway: StoreGateway (or any object with ``execute``, ``query``
                and ``dialect_name``) already connected to the target database
            table_prefix: Table prefix of the installation
        """
        self.gateway = gateway
        self.table_prefix = table_prefix

    def check_precondition(self) -> Optional[RunFailure]:
        """
        Verify the users table is reachable and has rows.

        An empty users table is treated the same as an unreadable one.
        """
        result = self.gateway.query(precondition_statement(self.table_prefix))
        if not result.ok:
            return RunFailure(ErrorKind.PRECONDITION, result.error)
        if not result.rows:
            return RunFailure(
                ErrorKind.PRECONDITION,
                f"No rows returned from {self.table_prefix}users"
            )
        return None

    def build_statements(self, rules: Sequence[Rule]) -> Tuple[List[Statement], Optional[RunFailure]]:
        """
        Build every rule's statement for the gateway's dialect.

        All statements are built before the first write, so a rule that
        cannot be rendered stops the run with the database untouched.
        """
        statements = []
        for rule in rules:
            try:
                statements.append(build_statement(rule, self.gateway.dialect_name))
            except ConfigError as e:
                return statements, RunFailure(ErrorKind.MUTATION, str(e), rule)
        return statements, None

    def execute_rule(self, rule: Rule, statement: Statement) -> RuleResult:
        """Submit the statement built for one rule."""
        logger.debug(f"{statement.sql} {statement.params}")
        result = self.gateway.execute(statement)
        if not result.ok:
            return RuleResult(rule=rule, rowcount=result.rowcount, error=result.message)
        return RuleResult(rule=rule, rowcount=result.rowcount)

    def run(self, rules: Sequence[Rule], requested_groups: Iterable[str] = ()) -> RunSummary:
        """
        Execute rules in order, stopping at the first failure.

        Args:
            rules: Resolved rules
            requested_groups: Group names the caller asked for, for reporting

        Returns:
            RunSummary; ``summary.failure`` is set if the run stopped early.
        """
        start_time = datetime.now()
        summary = RunSummary(requested_groups=list(requested_groups), resolved_rules=list(rules))

        summary.failure = self.check_precondition()
        if summary.failure is not None:
            logger.error(f"Precondition failed: {summary.failure.message}")
        else:
            statements, summary.failure = self.build_statements(rules)
            if summary.failure is not None:
                logger.error(f"Rule {summary.failure.rule.name} cannot run: {summary.failure.message}")
                statements = []

            for index, (rule, statement) in enumerate(zip(rules, statements), 1):
                logger.info(f"[{index}/{len(rules)}] Anonymizing {rule.target}")
                result = self.execute_rule(rule, statement)
                summary.results.append(result)

                if not result.ok:
                    logger.error(f"Rule {rule.name} failed: {result.error}")
                    summary.failure = RunFailure(ErrorKind.MUTATION, result.error, rule)
                    break

                logger.info(f"  {result.rowcount:,} rows updated")

        summary.duration = (datetime.now() - start_time).total_seconds()
        return summary
