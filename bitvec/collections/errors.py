import enum


class Status(enum.IntEnum):
    """ Outcome codes of mutating bitset operations """

    GOOD = 0
    NULL_ERR = 1
    ALLOC_ERR = 2
    LENGTH_ERR = 3


class BitSetError(Exception):

    status = None


class NullInputError(BitSetError, ValueError):
    """ A required bitset, buffer or string is missing,
        or a size that must be positive is not """

    status = Status.NULL_ERR


class AllocationError(BitSetError, MemoryError):
    """ Storage for a bitset or for rotation scratch space
        could not be obtained """

    status = Status.ALLOC_ERR


class LengthMismatchError(BitSetError, ValueError):
    """ Binary operator invoked on bitsets of different lengths """

    status = Status.LENGTH_ERR

    def __init__(self, lhs, rhs):
        super().__init__('Length mismatch: {} != {}'.format(lhs, rhs))
        self.lhs = lhs
        self.rhs = rhs
