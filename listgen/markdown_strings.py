"""markdown_strings
Modified from https://github.com/awesmubarak/markdown_strings
Only the helpers used for the index README of the generated lists are kept.
"""


def esc_format(text):
    """Return text with formatting escaped."""
    return str(text).replace("_", r"\_").replace("*", r"\*")


def header(header_text, header_level):
    """Return an atx header of specified level."""
    if not isinstance(header_level, int):
        raise TypeError("header_level must be int")
    if not 1 <= header_level <= 6:
        raise ValueError(f"Invalid level {header_level} for atx")
    return f"{'#' * header_level} {esc_format(header_text)}"


def bold(text):
    """Return bold formatted text."""
    return f"**{esc_format(text)}**"


def link(text, link_url):
    """Return an inline link."""
    return f"[{esc_format(text)}]({link_url})"


def blockquote(text):
    """Return a blockquote."""
    return "\n".join([f"> {esc_format(item)}" for item in str(text).split("\n")])


# Tables


def table_row(text_list, pad=None):
    """Return a single table row."""
    if pad is None:
        pad = [0] * len(text_list)
    row = "|"
    for cell, width in zip(text_list, pad):
        row += (" " + str(cell)).ljust(width + 1) + " |"
    return row


def table_delimiter_row(column_lengths):
    """Return a delimiter row for use in a table."""
    return table_row(["-" * max(3, length) for length in column_lengths])


def table_from_rows(rows):
    """Return a formatted table, the first row being the title row."""
    rows = [[str(cell) for cell in row] for row in rows]
    column_lengths = [
        max(3, max(len(cell) for cell in column)) for column in zip(*rows)
    ]
    table = [
        table_row(rows[0], column_lengths),
        table_delimiter_row(column_lengths),
    ]
    table.extend(table_row(row, column_lengths) for row in rows[1:])
    return "\n".join(table)
