"""
listgen - rule formatting
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from regex import regex as re

logger = logging.getLogger(__name__)

ACTION_PREFIX = {
    "allow": "@@",
    "deny": "",
}

TIME_FORMAT = "%d-%m-%Y %H:%M:%S"


@dataclass(frozen=True)
class RuleSetStats:
    """Counts for a formatted rule set."""

    name: str
    total: int
    emitted: int
    skipped: int
    groups: int


def short_tz_name(now=None):
    """Returns the local timezone name up to its first space."""
    now = now or datetime.now().astimezone()
    tz_name = now.strftime("%Z") or ""
    return re.split(r"\s", tz_name, maxsplit=1)[0]


def time_generated(now=None):
    """The timestamp used in the list header."""
    now = now or datetime.now().astimezone()
    return f"{now.strftime(TIME_FORMAT)} {short_tz_name(now)}"


def format_rule(rule):
    """
    Renders a rule as a filter line,
    returns None when the action is not allow or deny.
    """
    prefix = ACTION_PREFIX.get(rule.action) if isinstance(rule.action, str) else None
    if prefix is None:
        return None
    modifiers = ",".join(f"${x}" for x in rule.modifiers)
    return f"{prefix}||{rule.url}^{modifiers}"


def group_rules(rule_set, strict=False):
    """
    Groups the rendered lines of a rule set by rule description,
    in order of first appearance.

    :return: ordered mapping of description to lines, number of skipped rules
    """
    groups = {}
    skipped = 0
    for index, rule in enumerate(rule_set.rules):
        line = format_rule(rule)
        if line is None:
            skipped += 1
            logger.log(
                logging.WARNING if strict else logging.DEBUG,
                "Skipping rule #%d of '%s' (%s): unknown action %r",
                index + 1,
                rule_set.name,
                rule.url,
                rule.action,
            )
            continue
        groups.setdefault(rule.description, []).append(line)
    return groups, skipped


def gen_header(description, source, now=None):
    """Header lines of a rule set block."""
    return [
        f"# {description}",
        f"# Time generated: {time_generated(now)}",
        f"# Source: {source}",
        "",
    ]


def gen_block(rule_set, source, now=None, strict=False):
    """
    Generates the full block for a rule set:
    the header, then every description group followed by a blank line.

    :return: block lines, statistics
    """
    groups, skipped = group_rules(rule_set, strict=strict)
    block = gen_header(rule_set.description, source, now)
    for description, lines in groups.items():
        block.append(f"# {description}")
        block.extend(lines)
        block.append("")
    stats = RuleSetStats(
        name=rule_set.name,
        total=len(rule_set.rules),
        emitted=len(rule_set.rules) - skipped,
        skipped=skipped,
        groups=len(groups),
    )
    return block, stats
