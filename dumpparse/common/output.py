from typing import Iterable

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.theme import Theme

theme = Theme(
    {
        "repr.attrib_value": "#047bd6",
        "repr.call": Style.null(),
        "repr.none": "italic #d24a00",
        "repr.number": "#008df8",
        "repr.str": "bright_blue",
        "table.border": "#0084a8",
        "table.cell": "#00a5fa",
        "table.header": "bold italic #d24a00",
        "table.title": "bold #f9c300",
    }
)


def get_dumpparse_console():
    return Console(theme=theme)


def get_dumpparse_table(title: str = None, columns: Iterable[str] = ()):
    table = Table(
        title=title,
        expand=False,
        box=box.SIMPLE_HEAVY,
        highlight=True,
        border_style="#047bd6",
    )
    for column in columns:
        table.add_column(column, overflow="fold")
    return table
