import unittest
from datetime import datetime, timedelta, timezone

from listgen.listgen_functions import (
    format_rule,
    gen_block,
    gen_header,
    group_rules,
    short_tz_name,
    time_generated,
)
from listgen.listgen_helper_functions import Rule, RuleSet

NOW = datetime(2024, 3, 5, 7, 8, 9, tzinfo=timezone.utc)


def make_rule_set(rules, name="ads", description="Ad servers"):
    return RuleSet(name=name, description=description, rules=tuple(rules))


class FormatRuleTests(unittest.TestCase):
    def test_deny_with_modifiers(self):
        rule = Rule("example.com", "deny", "Trackers", ("third-party", "script"))
        self.assertEqual(format_rule(rule), "||example.com^$third-party,$script")

    def test_allow_without_modifiers(self):
        rule = Rule("ads.example.com", "allow", "Exceptions")
        self.assertEqual(format_rule(rule), "@@||ads.example.com^")

    def test_single_modifier(self):
        rule = Rule("cdn.example.org", "deny", "CDN", ("important",))
        self.assertEqual(format_rule(rule), "||cdn.example.org^$important")

    def test_unknown_action_is_none(self):
        self.assertIsNone(format_rule(Rule("a.com", "block", "x")))
        self.assertIsNone(format_rule(Rule("a.com", "Allow", "x")))
        self.assertIsNone(format_rule(Rule("a.com", None, "x")))


class GroupRulesTests(unittest.TestCase):
    def test_groups_keep_first_seen_order(self):
        rule_set = make_rule_set(
            [
                Rule("a.com", "deny", "Trackers"),
                Rule("b.com", "allow", "Exceptions"),
                Rule("c.com", "deny", "Trackers"),
                Rule("d.com", "deny", "Malware"),
            ]
        )
        groups, skipped = group_rules(rule_set)
        self.assertEqual(list(groups), ["Trackers", "Exceptions", "Malware"])
        self.assertEqual(groups["Trackers"], ["||a.com^", "||c.com^"])
        self.assertEqual(groups["Exceptions"], ["@@||b.com^"])
        self.assertEqual(skipped, 0)

    def test_invalid_rules_are_skipped_silently(self):
        rule_set = make_rule_set(
            [Rule("a.com", "deny", "Trackers"), Rule("b.com", "nope", "Broken")]
        )
        with self.assertNoLogs("listgen.listgen_functions", level="INFO"):
            groups, skipped = group_rules(rule_set)
        self.assertEqual(list(groups), ["Trackers"])
        self.assertEqual(skipped, 1)

    def test_strict_warns_per_skipped_rule(self):
        rule_set = make_rule_set(
            [Rule("a.com", "nope", "x"), Rule("b.com", "", "y")]
        )
        with self.assertLogs("listgen.listgen_functions", level="WARNING") as logs:
            group_rules(rule_set, strict=True)
        self.assertEqual(len(logs.records), 2)
        self.assertIn("a.com", logs.output[0])
        self.assertIn("'nope'", logs.output[0])


class HeaderTests(unittest.TestCase):
    def test_time_generated(self):
        self.assertEqual(time_generated(NOW), "05-03-2024 07:08:09 UTC")

    def test_short_tz_name_truncates_at_first_space(self):
        tz = timezone(timedelta(hours=1), "(UTC+01:00) Amsterdam, Berlin")
        now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=tz)
        self.assertEqual(short_tz_name(now), "(UTC+01:00)")
        self.assertEqual(time_generated(now), "02-01-2024 03:04:05 (UTC+01:00)")

    def test_header_lines(self):
        self.assertEqual(
            gen_header("Ad servers", "src", NOW),
            [
                "# Ad servers",
                "# Time generated: 05-03-2024 07:08:09 UTC",
                "# Source: src",
                "",
            ],
        )


class GenBlockTests(unittest.TestCase):
    def test_block_layout(self):
        rule_set = make_rule_set(
            [
                Rule("a.com", "deny", "Trackers", ("third-party",)),
                Rule("b.com", "allow", "Exceptions"),
                Rule("c.com", "deny", "Trackers"),
                Rule("d.com", "maybe", "Trackers"),
            ]
        )
        block, stats = gen_block(rule_set, "src", now=NOW)
        self.assertEqual(
            block,
            [
                "# Ad servers",
                "# Time generated: 05-03-2024 07:08:09 UTC",
                "# Source: src",
                "",
                "# Trackers",
                "||a.com^$third-party",
                "||c.com^",
                "",
                "# Exceptions",
                "@@||b.com^",
                "",
            ],
        )
        self.assertEqual(stats.total, 4)
        self.assertEqual(stats.emitted, 3)
        self.assertEqual(stats.skipped, 1)
        self.assertEqual(stats.groups, 2)

    def test_empty_rule_set_is_header_only(self):
        block, stats = gen_block(make_rule_set([]), "src", now=NOW)
        self.assertEqual(len(block), 4)
        self.assertEqual(stats.groups, 0)


if __name__ == "__main__":
    unittest.main()
