"""Windows minidump parser with a rich/typer command line front end"""
import logging

import construct
import typer
from typer import rich_utils
from rich import traceback
from rich.logging import RichHandler

__version__ = "0.1.0"

# Parse failures surface from deep inside construct, keep those frames short
traceback.install(show_locals=True, suppress=[construct, typer])

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            rich_tracebacks=True,
            tracebacks_suppress=[construct, typer],
            show_path=False,
            show_time=False,
        )
    ],
)

# ***** TYPER RICH STYLE *****
rich_utils.MAX_WIDTH = 100
rich_utils.USE_MARKDOWN = True
rich_utils.SHOW_METAVARS_COLUMN = True
rich_utils.APPEND_METAVARS_HELP = False

rich_utils.STYLE_HELPTEXT_FIRST_LINE = "#d24a00"
rich_utils.STYLE_ERRORS_PANEL_BORDER = "bold #d24a00"

rich_utils.STYLE_OPTION = "#f9c300"
rich_utils.STYLE_OPTIONS_TABLE_BOX = "SIMPLE"
rich_utils.STYLE_OPTIONS_PANEL_BORDER = "bold #0084a8"
rich_utils.STYLE_OPTIONS_TABLE_ROW_STYLES = ["#f9c300"]

rich_utils.STYLE_COMMANDS_TABLE_BOX = "SIMPLE"
rich_utils.STYLE_COMMANDS_PANEL_BORDER = "bold #0084a8"
rich_utils.STYLE_COMMANDS_TABLE_ROW_STYLES = ["#f9c300"]

rich_utils.STYLE_USAGE = "bold #0084a8"
rich_utils.STYLE_USAGE_COMMAND = "#d24a00 italic"
