class MachineFault(Exception):
    ''' Fatal condition: the current step did not complete '''
    pass


class StackOverflow(MachineFault):
    pass


class StackUnderflow(MachineFault):
    pass


class MemoryFault(MachineFault):
    def __init__(self, address: int):
        super().__init__(f'Memory access out of range 0x{address:X}')
        self.address = address


class UnknownOpcode(MachineFault):
    def __init__(self, opcode: int, address: int):
        super().__init__(f'Unknown opcode 0x{opcode:04X} @ 0x{address:03X}')
        self.opcode = opcode
        self.address = address


class RomTooLarge(MachineFault):
    def __init__(self, size: int, available: int):
        super().__init__(f'ROM of {size} bytes exceeds {available} available bytes')
        self.size = size
        self.available = available
