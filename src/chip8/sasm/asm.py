import logging as lg
import struct
import sys
from pathlib import Path
from typing import cast, Tuple, List

import click

from chip8.common.hwconf import ROM_BASE, MEMORY_SIZE
from chip8.sasm.fpp import FPP, AsmError
import chip8.sasm.grammar as grammar


class CompilationItem:
    modulename: str
    contents: str

    def __init__(self, modulename: str = '<inline>', contents: str = ''):
        self.modulename = modulename
        self.contents = contents


def collect_file(filepath: str | Path) -> CompilationItem:
    if isinstance(filepath, str):
        filepath = Path(filepath)

    lg.debug(f'Collecting file {filepath}')
    return CompilationItem(filepath.stem, filepath.read_text())


def collect_files(filepaths: list[Path]) -> list[CompilationItem]:
    return [collect_file(path) for path in filepaths]


def compile_items(compile_items: list[CompilationItem]) -> bytes:
    # First pass
    first_pass = FPP()

    for compile_item in compile_items:
        lg.info("Processing {0}".format(compile_item.modulename))
        first_pass.namespace = compile_item.modulename
        actions = grammar.program.parse_string(compile_item.contents, parse_all=True)

        for (func, arg) in actions:  # type: ignore
            func(first_pass, arg)

    # Second pass
    bytestr = bytearray()

    for (t, d) in first_pass.cmd_list:
        new_bytes = bytes()

        if t == 'bytes':
            new_bytes = d

        if t == 'ref':
            (op, labelname) = cast(Tuple[int, str], d)

            if labelname not in first_pass.label_dict:
                raise AsmError(f'Unresolved label {labelname}')

            address = ROM_BASE + first_pass.label_dict[labelname]

            if address > 0xFFF:
                raise AsmError(f'Label {labelname} lies beyond addressable memory')

            new_bytes = struct.pack('>H', op | address)

        bytestr += cast(bytes, new_bytes)

    if len(bytestr) > MEMORY_SIZE - ROM_BASE:
        raise AsmError(f'Program of {len(bytestr)} bytes does not fit in memory')

    # Dumping results
    return bytes(bytestr)


def compile_string(contents: str) -> bytes:
    return compile_items([CompilationItem(contents=contents)])


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.argument('sources', nargs=-1, type=Path)
@click.argument('binary', type=Path)
def compile(verbose: bool, sources: Tuple[Path], binary: Path):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info("CHIP8 ASM")

    items: List[CompilationItem] = collect_files(list(sources))

    try:
        bytestr = compile_items(items)
    except AsmError as e:
        lg.error(f'Compilation failed: {e}')
        sys.exit(1)

    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_bytes(bytestr)
    lg.info(f'Written {len(bytestr)} bytes to {binary}')


if __name__ == "__main__":
    compile()
