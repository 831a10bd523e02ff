''' Cowgod-style mnemonics '''

import pyparsing as pp

import chip8.common.ops as ops
from chip8.sasm.fpp import FPP


def kw(literal):
    return pp.Suppress(pp.CaselessKeyword(literal))


comma = pp.Suppress(',')

id = pp.Word(pp.alphas + '_', pp.alphanums + '_')
comment = pp.Suppress(pp.Literal('//') + pp.restOfLine)

label = (id + pp.Suppress(':')).setParseAction(lambda r: (FPP.on_label, r[0]))

reg = pp.Regex('[Vv][0-9A-Fa-f]\\b').setParseAction(lambda r: int(r[0][1], 16))
v0 = pp.Suppress(pp.Regex('[Vv]0\\b'))

hex_const = pp.Regex('0[xX][0-9A-Fa-f]+').setParseAction(lambda r: int(r[0], 16))
bin_const = pp.Regex('0[bB][01]+').setParseAction(lambda r: int(r[0], 2))
dec_const = pp.Regex('[0-9]+').setParseAction(lambda r: int(r[0]))
const = hex_const | bin_const | dec_const

addr = const | id


def g_op(literal, op):
    return kw(literal).setParseAction(lambda _: (FPP.issue_op, op))


def g_action(expr, func, op):
    return expr.setParseAction(lambda r: (func, [op, *r]))


def g_cmd_x(literal, op):
    return g_action(kw(literal) + reg, FPP.issue_x, op)


def g_cmd_xy(literal, op):
    return g_action(kw(literal) + reg + comma + reg, FPP.issue_xy, op)


def g_cmd_xnn(literal, op):
    return g_action(kw(literal) + reg + comma + const, FPP.issue_xnn, op)


def g_cmd_addr(literal, op):
    return g_action(kw(literal) + addr, FPP.issue_addr, op)


def g_cmd_shift(literal, op):
    # VY is accepted for compatibility and ignored by the machine
    expr = kw(literal) + reg + pp.Optional(comma + reg, default=0)
    return g_action(expr, FPP.issue_xy, op)


# Flow
sys_cmd = g_cmd_addr('sys', ops.SYS)
cls_cmd = g_op('cls', ops.CLS)
ret_cmd = g_op('ret', ops.RET)
jp_cmd = g_cmd_addr('jp', ops.JP)
jpv_cmd = g_action(kw('jp') + v0 + comma + addr, FPP.issue_addr, ops.JPV)
call_cmd = g_cmd_addr('call', ops.CALL)
se_cmd = g_cmd_xnn('se', ops.SE)
ser_cmd = g_cmd_xy('se', ops.SER)
sne_cmd = g_cmd_xnn('sne', ops.SNE)
sner_cmd = g_cmd_xy('sne', ops.SNER)

# Loads
ld_cmd = g_cmd_xnn('ld', ops.LD)
mov_cmd = g_cmd_xy('ld', ops.MOV)
ldi_cmd = g_action(kw('ld') + kw('i') + comma + addr, FPP.issue_addr, ops.LDI)
ldvdt_cmd = g_action(kw('ld') + reg + comma + kw('dt'), FPP.issue_x, ops.LDVDT)
ldk_cmd = g_action(kw('ld') + reg + comma + kw('k'), FPP.issue_x, ops.LDK)
lddt_cmd = g_action(kw('ld') + kw('dt') + comma + reg, FPP.issue_x, ops.LDDT)
ldst_cmd = g_action(kw('ld') + kw('st') + comma + reg, FPP.issue_x, ops.LDST)
ldf_cmd = g_action(kw('ld') + kw('f') + comma + reg, FPP.issue_x, ops.LDF)
bcd_cmd = g_action(kw('ld') + kw('b') + comma + reg, FPP.issue_x, ops.BCD)
stm_cmd = g_action(kw('ld') + pp.Suppress(pp.CaselessLiteral('[i]')) + comma + reg, FPP.issue_x, ops.STR)
ldr_cmd = g_action(kw('ld') + reg + comma + pp.Suppress(pp.CaselessLiteral('[i]')), FPP.issue_x, ops.LDR)

# Arithmetic
add_cmd = g_cmd_xnn('add', ops.ADD)
addr_cmd = g_cmd_xy('add', ops.ADDR)
addi_cmd = g_action(kw('add') + kw('i') + comma + reg, FPP.issue_x, ops.ADDI)
bor_cmd = g_cmd_xy('or', ops.OR)
band_cmd = g_cmd_xy('and', ops.AND)
xor_cmd = g_cmd_xy('xor', ops.XOR)
sub_cmd = g_cmd_xy('sub', ops.SUB)
subn_cmd = g_cmd_xy('subn', ops.SUBN)
shr_cmd = g_cmd_shift('shr', ops.SHR)
shl_cmd = g_cmd_shift('shl', ops.SHL)
rnd_cmd = g_cmd_xnn('rnd', ops.RND)

# Display and keypad
drw_cmd = g_action(kw('drw') + reg + comma + reg + comma + const, FPP.issue_xyn, ops.DRW)
skp_cmd = g_cmd_x('skp', ops.SKP)
sknp_cmd = g_cmd_x('sknp', ops.SKNP)

# Data
db_cmd = (kw('db') + pp.delimitedList(const)).setParseAction(lambda r: (FPP.issue_db, list(r)))

asm_cmd = sys_cmd \
    ^ cls_cmd \
    ^ ret_cmd \
    ^ jp_cmd \
    ^ jpv_cmd \
    ^ call_cmd \
    ^ se_cmd \
    ^ ser_cmd \
    ^ sne_cmd \
    ^ sner_cmd \
    ^ ld_cmd \
    ^ mov_cmd \
    ^ ldi_cmd \
    ^ ldvdt_cmd \
    ^ ldk_cmd \
    ^ lddt_cmd \
    ^ ldst_cmd \
    ^ ldf_cmd \
    ^ bcd_cmd \
    ^ stm_cmd \
    ^ ldr_cmd \
    ^ add_cmd \
    ^ addr_cmd \
    ^ addi_cmd \
    ^ bor_cmd \
    ^ band_cmd \
    ^ xor_cmd \
    ^ sub_cmd \
    ^ subn_cmd \
    ^ shr_cmd \
    ^ shl_cmd \
    ^ rnd_cmd \
    ^ drw_cmd \
    ^ skp_cmd \
    ^ sknp_cmd \
    ^ db_cmd

# Fail on unknown command
unknown = pp.Regex('.+').setParseAction(lambda r: (FPP.on_fail, r[0]))

statement = pp.Optional(label) + pp.Optional(comment) + asm_cmd + pp.ZeroOrMore(comment)

program = pp.ZeroOrMore(statement ^ label ^ comment ^ unknown)
