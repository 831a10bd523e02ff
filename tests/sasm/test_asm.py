import pytest
from click.testing import CliRunner

import chip8.sasm.asm as asm
from chip8.sasm.fpp import AsmError


def words(binary: bytes) -> list[int]:
    return [int.from_bytes(binary[i:i + 2], 'big') for i in range(0, len(binary), 2)]


def test_flow():
    binary = asm.compile_string('''
        CLS
        RET
        SYS 0x123
        JP 0x300
        JP V0, 0x300
        CALL 0x210
    ''')

    assert words(binary) == [0x00E0, 0x00EE, 0x0123, 0x1300, 0xB300, 0x2210]


def test_skips():
    binary = asm.compile_string('''
        SE V1, 0x22
        SE V1, V2
        SNE VA, 255
        SNE VA, VB
        SKP V3
        SKNP V4
    ''')

    assert words(binary) == [0x3122, 0x5120, 0x4AFF, 0x9AB0, 0xE39E, 0xE4A1]


def test_loads():
    binary = asm.compile_string('''
        LD V0, 0x1F
        LD V1, V2
        LD I, 0x456
        LD V3, DT
        LD V4, K
        LD DT, V5
        LD ST, V6
        LD F, V7
        LD B, V8
        LD [I], V9
        LD VA, [I]
    ''')

    assert words(binary) == [
        0x601F, 0x8120, 0xA456, 0xF307, 0xF40A, 0xF515,
        0xF618, 0xF729, 0xF833, 0xF955, 0xFA65
    ]


def test_arithmetic():
    binary = asm.compile_string('''
        add v1, 1
        add v1, v2
        add i, v3
        or v1, v2
        and v1, v2
        xor v1, v2
        sub v1, v2
        shr v1
        subn v1, v2
        shl v1, v2
        rnd vc, 0b00001111
        drw v1, v2, 15
    ''')

    assert words(binary) == [
        0x7101, 0x8124, 0xF31E, 0x8121, 0x8122, 0x8123,
        0x8125, 0x8106, 0x8127, 0x812E, 0xCC0F, 0xD12F
    ]


def test_labels_are_absolute():
    binary = asm.compile_string('''
        start:  JP end      // forward reference
                CALL start
        end:    LD I, data
        data:   DB 0xF0, 0x90
    ''')

    assert words(binary) == [0x1204, 0x2200, 0xA206, 0xF090]


def test_label_on_own_line():
    binary = asm.compile_string('''
        JP tail
        tail:
    ''')

    assert words(binary) == [0x1202]


def test_unknown_command():
    with pytest.raises(AsmError):
        asm.compile_string('FOO V1, V2')


def test_trailing_garbage():
    with pytest.raises(AsmError):
        asm.compile_string('CLS CLS')


def test_operand_out_of_range():
    with pytest.raises(AsmError):
        asm.compile_string('LD V0, 256')

    with pytest.raises(AsmError):
        asm.compile_string('DRW V0, V1, 16')

    with pytest.raises(AsmError):
        asm.compile_string('JP 0x1000')


def test_unresolved_label():
    with pytest.raises(AsmError):
        asm.compile_string('JP nowhere')


def test_duplicate_label():
    with pytest.raises(AsmError):
        asm.compile_string('''
            a: CLS
            a: CLS
        ''')


def test_compile_command(tmp_path):
    source = tmp_path / 'prog.asm'
    source.write_text('LD V0, 1\nloop: JP loop\n')
    binary = tmp_path / 'out' / 'prog.ch8'

    result = CliRunner().invoke(asm.compile, [str(source), str(binary)])

    assert result.exit_code == 0
    assert binary.read_bytes() == b'\x60\x01\x12\x02'
