"""
listgen - Generator
"""
import argparse
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List

from tqdm import tqdm

from listgen import markdown_strings
from listgen.listgen_functions import gen_block, time_generated
from listgen.listgen_helper_functions import (
    InputError,
    ListgenError,
    is_path,
    load_rule_sets,
    write_file,
)

logger = logging.getLogger(__name__)


def invoking_dir():
    """Directory of the invoking script, or the working directory."""
    script = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
    if script and script.is_file():
        return script.resolve().parent
    return Path.cwd()


@dataclass
class DirPath:
    """Where the generated lists go by default."""

    base = invoking_dir()
    output_name = "generatedLists"

    @classmethod
    def default_output(cls, base_dir=None):
        return Path.joinpath(Path(base_dir or cls.base), cls.output_name)


@dataclass
class ListInfo:
    """Values for the list header and the output files."""

    source = "listgen - JSON rule sets"
    full_list = "fullList"
    extension = ".txt"
    readme = "README"


@dataclass
class RunResult:
    """Files written and per rule set statistics of a run."""

    dir_out: Path
    files: List[Path] = field(default_factory=list)
    stats: list = field(default_factory=list)

    @property
    def skipped(self):
        return sum(x.skipped for x in self.stats)


def select_rule_sets(rule_sets, only=None):
    """
    Keeps the named rule sets, in declaration order.
    A rule set may not take the name of the full list.
    """
    # case-insensitive file systems would clash too
    clashing = [
        x for x in rule_sets if x.casefold() == ListInfo.full_list.casefold()
    ]
    if clashing:
        raise InputError(f"Rule set name is reserved: {', '.join(clashing)}")
    if not only:
        return rule_sets
    unknown = [x for x in only if x not in rule_sets]
    if unknown:
        raise InputError(f"Unknown rule sets: {', '.join(unknown)}")
    return {k: v for k, v in rule_sets.items() if k in only}


def gen_readme(dir_out, rule_sets, stats, now=None):
    """Writes an index README.md for the generated lists."""
    rows = [["#", "Rule set", "Description", "Rules", "Skipped", "File"]]
    rows.append(
        [
            "00",
            ListInfo.full_list,
            "All rule sets",
            sum(x.emitted for x in stats),
            sum(x.skipped for x in stats),
            markdown_strings.link(
                f"{ListInfo.full_list}{ListInfo.extension}",
                f"{ListInfo.full_list}{ListInfo.extension}",
            ),
        ]
    )
    for index, item in enumerate(stats):
        file_name = f"{item.name}{ListInfo.extension}"
        rows.append(
            [
                str(index + 1).zfill(2),
                markdown_strings.bold(item.name),
                rule_sets[item.name].description,
                item.emitted,
                item.skipped,
                markdown_strings.link(file_name, file_name),
            ]
        )
    section = [
        markdown_strings.header("Generated filter lists", 1),
        markdown_strings.blockquote(f"Time generated: {time_generated(now)}"),
        markdown_strings.table_from_rows(rows),
    ]
    return write_file(
        ListInfo.readme, dir_out, "\n\n".join(section).split("\n"), extension=".md"
    )


def run(
    input_path,
    destination=None,
    base_dir=None,
    strict=False,
    only=None,
    readme=False,
    now=None,
    progress=True,
):
    """
    Generates the lists:
    resolves the destination, loads the rule sets,
    formats every rule set and writes the full list and one list per rule set.
    """
    dir_out = is_path(destination or DirPath.default_output(base_dir))
    rule_sets = select_rule_sets(load_rule_sets(input_path), only)
    now = now or datetime.now().astimezone()
    result = RunResult(dir_out=dir_out)

    blocks = {}
    p_bar = tqdm(
        rule_sets.values(), desc="Generating lists", leave=False, disable=not progress
    )
    for rule_set in p_bar:
        p_bar.set_description(desc=f"Formatting — {rule_set.name}")
        blocks[rule_set.name], stats = gen_block(
            rule_set, ListInfo.source, now=now, strict=strict
        )
        result.stats.append(stats)
        logger.info(
            "%s: %d of %d rules in %d groups, %d skipped",
            stats.name,
            stats.emitted,
            stats.total,
            stats.groups,
            stats.skipped,
        )

    full_list = [line for block in blocks.values() for line in block]
    result.files.append(write_file(ListInfo.full_list, dir_out, full_list))
    for name, block in blocks.items():
        result.files.append(write_file(name, dir_out, block))
    if readme:
        result.files.append(gen_readme(dir_out, rule_sets, result.stats, now))
    return result


def parse_args(argv=None):
    """Parses the command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate DNS filter lists from a JSON file of rule sets"
    )
    parser.add_argument("path", help="the source json file")
    parser.add_argument(
        "destination",
        nargs="?",
        default=None,
        help=f"output directory (default: {DirPath.output_name} next to the script)",
    )
    parser.add_argument(
        "--base-dir",
        default=None,
        help="directory the default destination is resolved against",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="warn about every skipped rule and exit with status 3 if any",
    )
    parser.add_argument(
        "--only",
        action="append",
        metavar="NAME",
        help="only generate the named rule set (repeatable)",
    )
    parser.add_argument(
        "--readme", action="store_true", help="also write an index README.md"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="more logging (-vv debug)"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="hide the progress bar"
    )
    return parser.parse_args(argv)


def main(argv=None):
    """
    Main
    """
    args = parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    try:
        result = run(
            args.path,
            destination=args.destination,
            base_dir=args.base_dir,
            strict=args.strict,
            only=args.only,
            readme=args.readme,
            progress=not args.quiet,
        )
    except ListgenError as exc:
        logger.error("%s", exc)
        return 1
    if args.strict and result.skipped:
        logger.warning("%d rules skipped", result.skipped)
        return 3
    return 0


if __name__ == "__main__":
    sys.exit(main())
