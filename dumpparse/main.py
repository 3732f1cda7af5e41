import logging
from pathlib import Path
from typing import Optional

import typer

from .common.formatting import format_hex, hexdump
from .common.output import get_dumpparse_console
from .common.renderers import (
    render_exception,
    render_handles,
    render_header,
    render_misc_info,
    render_modules,
    render_regions,
    render_segments,
    render_streams,
    render_system_info,
    render_threads,
)
from .minidump import MinidumpError, MinidumpFile

app = typer.Typer(
    name="dumpparse",
    help="Inspect the streams and captured memory of a Windows minidump",
    add_completion=False,
)
console = get_dumpparse_console()
log = logging.getLogger("rich")


def parse_int(value) -> int:
    """Parser that accepts decimal, 0x hex, 0o octal and 0b binary integers"""
    if isinstance(value, int):
        return value
    try:
        return int(value, 0)
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not an integer")


def open_minidump(file: Path) -> MinidumpFile:
    try:
        return MinidumpFile(file.absolute())
    except (MinidumpError, OSError) as e:
        log.error(f"Failed to parse {file}: {e}")
        raise typer.Exit(code=1)


def file_option():
    return typer.Option(..., "--file", "-f", help="Path to minidump", dir_okay=False)


def address_option():
    return typer.Option(
        ..., "--address", "-a", help="Virtual address (0x prefix for hex)", parser=parse_int
    )


@app.command(name="header", help="Show the minidump header")
def header(file: Path = file_option()):
    console.print(render_header(open_minidump(file)))


@app.command(name="streams", help="List the stream directory")
def streams(file: Path = file_option()):
    console.print(render_streams(open_minidump(file)))


@app.command(name="threads", help="List the threads")
def threads(file: Path = file_option()):
    console.print(render_threads(open_minidump(file)))


@app.command(name="modules", help="List the loaded modules")
def modules(file: Path = file_option()):
    console.print(render_modules(open_minidump(file)))


@app.command(name="segments", help="List the captured memory segments")
def segments(file: Path = file_option()):
    console.print(render_segments(open_minidump(file)))


@app.command(name="regions", help="List the memory info regions")
def regions(file: Path = file_option()):
    console.print(render_regions(open_minidump(file)))


@app.command(name="sysinfo", help="Show the system info stream")
def sysinfo(file: Path = file_option()):
    minidump = open_minidump(file)
    if minidump.system_info is None:
        log.info("No system info stream")
        return
    console.print(render_system_info(minidump))


@app.command(name="exception", help="Show the exception stream")
def exception(file: Path = file_option()):
    minidump = open_minidump(file)
    if minidump.exception is None:
        log.info("No exception stream")
        return
    console.print(render_exception(minidump))


@app.command(name="handles", help="List the open handles")
def handles(file: Path = file_option()):
    console.print(render_handles(open_minidump(file)))


@app.command(name="misc", help="Show the misc info stream")
def misc(file: Path = file_option()):
    minidump = open_minidump(file)
    if minidump.misc_info is None:
        log.info("No misc info stream")
        return
    console.print(render_misc_info(minidump))


@app.command(name="all", help="Show everything that was parsed")
def show_all(file: Path = file_option()):
    minidump = open_minidump(file)
    console.print(render_header(minidump))
    console.print(render_streams(minidump))
    console.print(render_threads(minidump))
    console.print(render_modules(minidump))
    console.print(render_segments(minidump))
    console.print(render_regions(minidump))
    if minidump.system_info is not None:
        console.print(render_system_info(minidump))
    if minidump.exception is not None:
        console.print(render_exception(minidump))
    console.print(render_handles(minidump))
    if minidump.misc_info is not None:
        console.print(render_misc_info(minidump))


@app.command(name="read", help="Hexdump captured memory at a virtual address")
def read(
    file: Path = file_option(),
    address: int = address_option(),
    size: int = typer.Option(0x100, "--size", "-s", help="Bytes to read", parser=parse_int),
):
    minidump = open_minidump(file)
    with minidump.open_reader() as reader:
        try:
            data = reader.read_memory(address, size)
        except (MinidumpError, ValueError) as e:
            log.error(str(e))
            raise typer.Exit(code=1)
    console.print(hexdump(data, address), highlight=False)


@app.command(name="pointer", help="Read a pointer sized for the captured process")
def pointer(file: Path = file_option(), address: int = address_option()):
    minidump = open_minidump(file)
    with minidump.open_reader() as reader:
        value = reader.read_pointer(address)
    if value is None:
        log.error(f"Could not read a pointer at {format_hex(address)}")
        raise typer.Exit(code=1)
    console.print(format_hex(value, reader.pointer_size() * 2), highlight=False)


@app.command(name="string", help="Read a NUL terminated string")
def string(
    file: Path = file_option(),
    address: int = address_option(),
    max_length: int = typer.Option(
        1024, "--max-length", "-m", help="Bytes to read", parser=parse_int
    ),
):
    minidump = open_minidump(file)
    with minidump.open_reader() as reader:
        console.print(reader.read_string(address, max_length), highlight=False)


@app.command(name="module", help="Find the module containing an address or matching a name")
def module(
    file: Path = file_option(),
    address: Optional[int] = typer.Option(
        None, "--address", "-a", help="Virtual address inside the module", parser=parse_int
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Substring of the module name"),
):
    if (address is None) == (name is None):
        raise typer.BadParameter("Pass exactly one of --address or --name")

    minidump = open_minidump(file)
    with minidump.open_reader() as reader:
        if address is not None:
            found = reader.find_module_by_address(address)
        else:
            found = reader.find_module_by_name(name)

    if found is None:
        log.error("No matching module")
        raise typer.Exit(code=1)
    console.print(
        f"{found.ModuleName or ''} {format_hex(found.BaseOfImage, 8)}-{format_hex(found.EndAddress, 8)}",
        highlight=False,
    )


if __name__ == "__main__":
    app()
