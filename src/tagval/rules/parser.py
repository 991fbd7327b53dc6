"""Rule string parsing.

A rule string holds one or more ``kind:param`` clauses separated by ``;``,
for example ``"min:3;max:10"`` or ``"in:red, green, blue"``.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from tagval.errors import RuleSyntaxError

logger = logging.getLogger(__name__)

CLAUSE_SEPARATOR = ";"
KIND_SEPARATOR = ":"


class RuleKind(str, Enum):
    """Supported rule kinds."""
    LEN = "len"
    IN = "in"
    MIN = "min"
    MAX = "max"


@dataclass(frozen=True)
class RuleDescriptor:
    """One parsed clause: the kind token as written and its raw parameter."""
    kind: str
    param: str

    @property
    def rule_kind(self) -> RuleKind | None:
        """The matching RuleKind, or None for an unknown token."""
        try:
            return RuleKind(self.kind)
        except ValueError:
            return None

    @property
    def known(self) -> bool:
        return self.rule_kind is not None

    def __str__(self) -> str:
        return f"{self.kind}{KIND_SEPARATOR}{self.param}"


def parse_rules(raw: str, field: str) -> list[RuleDescriptor]:
    """Split a raw rule string into ordered rule descriptors.

    Clauses are trimmed and empty ones are skipped. Unknown kind tokens are
    kept so that each is reported on its own by the evaluator.

    Args:
        raw: Rule string attached to the field
        field: Field name used for error attribution

    Returns:
        Descriptors in declaration order

    Raises:
        RuleSyntaxError: If a clause has no kind separator. The remaining
            clauses of the field are not parsed.
    """
    rules = []
    for clause in raw.split(CLAUSE_SEPARATOR):
        clause = clause.strip()
        if not clause:
            continue

        kind, sep, param = clause.partition(KIND_SEPARATOR)
        if not sep:
            raise RuleSyntaxError(field, clause)

        rule = RuleDescriptor(kind, param)
        if not rule.known:
            logger.debug(f"Unknown rule kind {kind!r} on field {field}")
        rules.append(rule)

    return rules
