import struct
import logging as lg
from typing import List, Tuple, Dict, Any

from chip8.common.hwconf import OPCODE_SIZE, GP_REGS

Tokens = List[Any]


class AsmError(Exception):
    pass


def check_range(what: str, val: int, limit: int):
    if not 0 <= val < limit:
        raise AsmError(f'{what} {val} out of range 0..{limit - 1}')


class FPP:
    ''' First pass processor '''
    cmd_list: List[Tuple[str, bytes | Tuple[int, str]]]
    label_dict: Dict[str, int]

    def __init__(self):
        self.cmd_list = list()
        self.offset = 0
        self.namespace = "<global>"
        self.label_dict = dict()

    # Handlers
    def issue_bytes(self, bytestr: bytes):
        self.cmd_list.append(('bytes', bytestr))
        self.offset += len(bytestr)

    def issue_op(self, op: int):
        lg.debug(f'Issuing command 0x{op:04X}')
        self.issue_bytes(struct.pack('>H', op))

    def issue_x(self, tokens: Tokens):
        (op, x) = tokens
        check_range('Register', x, GP_REGS)
        self.issue_op(op | (x << 8))

    def issue_xy(self, tokens: Tokens):
        (op, x, y) = tokens
        check_range('Register', x, GP_REGS)
        check_range('Register', y, GP_REGS)
        self.issue_op(op | (x << 8) | (y << 4))

    def issue_xnn(self, tokens: Tokens):
        (op, x, nn) = tokens
        check_range('Register', x, GP_REGS)
        check_range('Byte', nn, 0x100)
        self.issue_op(op | (x << 8) | nn)

    def issue_xyn(self, tokens: Tokens):
        (op, x, y, n) = tokens
        check_range('Register', x, GP_REGS)
        check_range('Register', y, GP_REGS)
        check_range('Nibble', n, 0x10)
        self.issue_op(op | (x << 8) | (y << 4) | n)

    def issue_addr(self, tokens: Tokens):
        (op, addr) = tokens

        if isinstance(addr, str):
            self.on_ref(op, addr)
        else:
            check_range('Address', addr, 0x1000)
            self.issue_op(op | addr)

    def issue_db(self, tokens: Tokens):
        for val in tokens:
            check_range('Byte', val, 0x100)

        self.issue_bytes(bytes(tokens))

    def on_label(self, labelname: str):
        if labelname in self.label_dict:
            raise AsmError(f'Duplicate label {labelname}')

        self.label_dict[labelname] = self.offset
        lg.debug(f'Label {labelname} @ 0x{self.offset:X}')

    def on_ref(self, op: int, labelname: str):
        lg.debug(f'Ref {labelname}')

        self.cmd_list.append(('ref', (op, labelname)))
        self.offset += OPCODE_SIZE  # placeholder-bytes

    def on_fail(self, rest: str):
        raise AsmError(f'Unknown command {rest} in {self.namespace}')
