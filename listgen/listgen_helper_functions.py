"""
listgen - helper functions for paths, reading and writing
"""
import logging
from dataclasses import dataclass, field
from json import load, JSONDecodeError
from pathlib import Path
from typing import Tuple

from regex import regex as re

logger = logging.getLogger(__name__)

PATTERN_JSON = re.compile(r"\.json$", re.I)
# a rule set name is a file name stem inside the destination
PATTERN_NAME = re.compile(r"^(?!\.{1,2}$)[^\/\\\x00\r\n]+$")
PATTERN_LINE_BREAK = re.compile(r"[\r\n]")


class ListgenError(Exception):
    """Base error, carries the offending path."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class InputError(ListgenError):
    """The source document is missing, misnamed or malformed."""


class FilesystemError(ListgenError):
    """A directory or file could not be created, deleted or written."""


def is_path(path):
    """Creates the directory if path doesn't exist and returns path."""
    path = Path(path)
    if path.exists():
        if not path.is_dir():
            raise FilesystemError(f"{path} exists but is not a directory", path)
        logger.info("Destination is valid: %s", path)
        return path
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Could not create {path}: {exc}", path) from exc
    logger.info("Destination created: %s", path)
    return path


def read_file(path):
    """Reads a json file and returns its contents."""
    path = Path(path)
    if not path.is_file():
        raise InputError(f"{path} is not an existing file", path)
    if not re.search(PATTERN_JSON, path.name):
        raise InputError(f"{path} does not have a .json extension", path)
    try:
        with open(path, encoding="utf-8") as file:
            return load(file)
    except JSONDecodeError as exc:
        raise InputError(f"{path} is not valid json: {exc}", path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Could not read {path}: {exc}", path) from exc


def write_file(name, dir_out, lines, extension=".txt"):
    """Replaces the file `name` in dir_out with the given lines."""
    file_out = Path.joinpath(Path(dir_out), f"{name}{extension}")
    try:
        if file_out.exists():
            file_out.unlink()
        file_out.open("x", encoding="utf-8").close()
        with open(file_out, "a", encoding="utf-8") as output_file:
            for line in lines:
                output_file.write(f"{line}\n")
    except OSError as exc:
        raise FilesystemError(f"Could not write {file_out}: {exc}", file_out) from exc
    logger.info("Written %s", file_out)
    return file_out


@dataclass
class JsonKey:
    """Keys for a rule set in the source json file."""

    def __init__(self, **kwargs):
        self.desc = None
        self.rules = None
        self.__dict__.update(kwargs)


@dataclass
class ItemKey:
    """Keys for the individual rules of a rule set."""

    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


j_key = JsonKey(desc="description", rules="rules")
i_key = ItemKey(
    url="url",
    action="action",
    modifiers="modifiers",
    desc="description",
)


@dataclass(frozen=True)
class Rule:
    """A single rule; action is kept as given and checked when formatting."""

    url: str
    action: str
    description: str
    modifiers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RuleSet:
    """A named rule set, written to <name>.txt."""

    name: str
    description: str
    rules: Tuple[Rule, ...] = field(default_factory=tuple)


def parse_rule(item, set_name, index, path=None):
    """Builds a Rule from its json object."""
    where = f"rule #{index + 1} of '{set_name}'"
    if not isinstance(item, dict):
        raise InputError(f"{where} is not an object", path)
    for key in (i_key.url, i_key.action, i_key.desc):
        if key not in item:
            raise InputError(f"{where} is missing '{key}'", path)
    for key in (i_key.url, i_key.desc):
        if not isinstance(item[key], str):
            raise InputError(f"{where}: '{key}' must be a string", path)
    modifiers = item.get(i_key.modifiers) or []
    if not isinstance(modifiers, list) or not all(
        isinstance(x, str) for x in modifiers
    ):
        raise InputError(f"{where}: '{i_key.modifiers}' must be a list of strings", path)
    for value in (item[i_key.url], item[i_key.desc], *modifiers):
        if re.search(PATTERN_LINE_BREAK, value):
            raise InputError(f"{where}: line break in {value!r}", path)
    return Rule(
        url=item[i_key.url],
        action=item[i_key.action],
        description=item[i_key.desc],
        modifiers=tuple(modifiers),
    )


def parse_rule_set(name, data, path=None):
    """Builds a RuleSet from its json object."""
    if not isinstance(name, str) or not re.match(PATTERN_NAME, name):
        raise InputError(f"Rule set name {name!r} is not a valid file name", path)
    if not isinstance(data, dict):
        raise InputError(f"Rule set '{name}' is not an object", path)
    if not isinstance(data.get(j_key.desc), str):
        raise InputError(f"Rule set '{name}' needs a string '{j_key.desc}'", path)
    if re.search(PATTERN_LINE_BREAK, data[j_key.desc]):
        raise InputError(f"Rule set '{name}': line break in its {j_key.desc}", path)
    if not isinstance(data.get(j_key.rules), list):
        raise InputError(f"Rule set '{name}' needs a '{j_key.rules}' array", path)
    rules = tuple(
        parse_rule(item, name, index, path)
        for index, item in enumerate(data[j_key.rules])
    )
    return RuleSet(name=name, description=data[j_key.desc], rules=rules)


def load_rule_sets(path):
    """
    Loads the source json file into rule sets,
    keyed by name in declaration order.
    """
    data_json = read_file(path)
    if not isinstance(data_json, dict):
        raise InputError(f"{path} must hold a json object of rule sets", path)
    rule_sets = {
        name: parse_rule_set(name, data, path) for name, data in data_json.items()
    }
    logger.info("Loaded %d rule sets from %s", len(rule_sets), path)
    return rule_sets
