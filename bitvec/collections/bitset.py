import array
import enum
import itertools
import logging

from bitvec.collections.errors import (AllocationError, LengthMismatchError,
                                       NullInputError)


CHAR_BITS = 8
TERMINATOR = '\0'
DEFAULT_ENCODING = 'utf-8'

logger = logging.getLogger(__name__)


class State(enum.Enum):

    UNINITIALIZED = 'uninitialized'
    READY = 'ready'
    RELEASED = 'released'


def _allocate(length, fill=0):
    """ Obtains a buffer of `length` cells set to `fill` """
    try:
        return array.array('B', [1 if fill else 0]) * length
    except (MemoryError, OverflowError) as exc:
        raise AllocationError(
            'Cannot allocate {} cells'.format(length)) from exc


def _duplicate(cells):
    try:
        return array.array('B', cells)
    except MemoryError as exc:
        raise AllocationError(
            'Cannot allocate {} cells'.format(len(cells))) from exc


def _stage(view):
    """ Copies a slice of cells to transient scratch space """
    try:
        return bytes(view)
    except MemoryError as exc:
        logger.warning('Cannot stage %d cells for rotation', len(view))
        raise AllocationError(
            'Cannot allocate {} scratch cells'.format(len(view))) from exc


def _clear(cells, start, stop):
    for i in range(start, stop):
        cells[i] = 0


def _positive(value, name):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise NullInputError(
            '{} must be a positive integer, got {!r}'.format(name, value))
    return value


def _amount(value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise NullInputError(
            'Amount must be a non-negative integer, got {!r}'.format(value))
    return value


class BitSet(object):
    """
        Fixed-length sequence of boolean cells, one cell per storage slot.
        Cells are accessed by index, i.e. bitset[12], and every bulk
        operation mutates the bitset in place without changing its length.

        A bitset created without a length is uninitialized; release()
        drops the storage. In both states only re-initialization, reset,
        release and the count / all / any queries are allowed.
    """

    # most significant bit first
    BITMASK = [0x80, 0x40, 0x20, 0x10, 0x08, 0x04, 0x02, 0x01]

    def __init__(self, length=None, bitset=None, fill=0):
        self._array = None
        self._state = State.UNINITIALIZED

        if bitset is not None:
            bitset.__check()
            self.__assign(_duplicate(bitset._array))
        elif length is not None:
            self.init(length, fill=fill)

    @classmethod
    def from_bits(cls, string, length=None):
        """ Creates a bitset from a string of '1' and '0' characters """
        bitset = cls()
        bitset.init_bits(string, length)
        return bitset

    @classmethod
    def from_bytes(cls, data, length=None, encoding=DEFAULT_ENCODING):
        """ Creates a bitset holding 8 cells per source byte """
        bitset = cls()
        bitset.init_bytes(data, length, encoding=encoding)
        return bitset

    def init(self, length, fill=0):
        """ (Re)initializes the bitset with `length` cells set to `fill` """
        self.__assign(_allocate(_positive(length, 'length'), fill))

    def init_bits(self, string, length=None):
        """ (Re)initializes the bitset from a bit string.
            At most `length` characters are read, stopping at a terminator;
            a cell is set only for a '1' character """
        if string is None:
            raise NullInputError('Bit string is missing')

        length = _positive(len(string) if length is None else length,
                           'length')
        cells = _allocate(length)

        for i, char in enumerate(itertools.islice(string, length)):
            if char == TERMINATOR:
                break
            cells[i] = 1 if char == '1' else 0

        self.__assign(cells)

    def init_bytes(self, data, length=None, encoding=DEFAULT_ENCODING):
        """ (Re)initializes the bitset from raw bytes.
            Each of at most `length` bytes, up to a zero byte, becomes
            8 cells in big-endian bit order. Text is encoded first, so
            one byte (not one code point) always maps to 8 cells """
        if data is None:
            raise NullInputError('Byte string is missing')
        if isinstance(data, str):
            data = data.encode(encoding)
        data = bytes(memoryview(data))

        length = _positive(len(data) if length is None else length,
                           'length')
        cells = _allocate(length * CHAR_BITS)

        for i, byte in enumerate(data[:length]):
            if byte == ord(TERMINATOR):
                break
            offset = i * CHAR_BITS
            for bit, mask in enumerate(self.BITMASK):
                cells[offset + bit] = 1 if byte & mask else 0

        self.__assign(cells)

    @property
    def state(self):
        return self._state

    @property
    def length(self):
        """ Length property getter, 0 unless initialized """
        if self._state is not State.READY:
            return 0
        return len(self._array)

    def is_ready(self):
        return self._state is State.READY

    def __len__(self):
        return self.length

    def __getitem__(self, pos):
        """ Retrieves the bit at a specified position """
        self.__check()
        return self._array[self.__pos(pos)]

    def __setitem__(self, pos, val):
        """ Sets the bit at a specified position """
        self.__check()
        self._array[self.__pos(pos)] = 1 if val else 0

    def get(self, pos):
        """ Retrieves the bit at the specified position.
            Proxy for __getitem__ """
        return self[pos]

    def set(self, pos, val):
        """ Sets the bit at the specified position.
            Proxy for __setitem__ """
        self[pos] = val

    def __iter__(self):
        if self._state is not State.READY:
            return iter(())
        return iter(self._array)

    def count(self, value=1):
        """ Returns the total number of 0 or 1 bits """
        if self._state is not State.READY:
            return 0
        return self._array.count(1 if value else 0)

    def all(self):
        """ Checks whether all bits are set to 1 """
        return self._state is State.READY and 0 not in self._array

    def any(self):
        """ Checks whether at least one bit is set to 1 """
        return self._state is State.READY and 1 in self._array

    def copy(self):
        return self.__class__(bitset=self)

    def and_(self, other):
        """ Stores self AND other in self """
        self.__operands(other)
        for i, bit in enumerate(other._array):
            self._array[i] &= bit

    def or_(self, other):
        """ Stores self OR other in self """
        self.__operands(other)
        for i, bit in enumerate(other._array):
            self._array[i] |= bit

    def xor(self, other):
        """ Stores self XOR other in self """
        self.__operands(other)
        for i, bit in enumerate(other._array):
            self._array[i] ^= bit

    def invert(self):
        """ Flips every bit """
        self.__check()
        for i in range(len(self._array)):
            self._array[i] ^= 1

    def lshift(self, n):
        """ Shifts cells towards index 0, zero-filling the top `n` cells """
        self.__check()
        n = _amount(n)
        length = len(self._array)

        if n == 0:
            return
        if n >= length:
            _clear(self._array, 0, length)
            return

        keep = length - n
        with memoryview(self._array) as view:
            view[:keep] = view[n:]
        _clear(self._array, keep, length)

    def rshift(self, n):
        """ Shifts cells away from index 0, zero-filling the low `n` cells """
        self.__check()
        n = _amount(n)
        length = len(self._array)

        if n == 0:
            return
        if n >= length:
            _clear(self._array, 0, length)
            return

        keep = length - n
        with memoryview(self._array) as view:
            view[n:] = view[:keep]
        _clear(self._array, 0, n)

    def lrotate(self, n):
        """ Rotates cells towards index 0; the head wraps to the tail """
        self.__rotate(self.__rotation(n))

    def rrotate(self, n):
        """ Rotates cells away from index 0; the tail wraps to the head """
        k = self.__rotation(n)
        if k:
            self.__rotate(len(self._array) - k)

    def reset(self):
        """ Sets every bit to 0, no-op unless initialized """
        if self._state is State.READY:
            _clear(self._array, 0, len(self._array))

    def release(self):
        """ Frees the internal storage. Safe to call more than once """
        if self._state is State.READY:
            logger.debug('Releasing bitset of %d cells', len(self._array))
            self._array = None
            self._state = State.RELEASED

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.release()

    def __iand__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        self.and_(other)
        return self

    def __ior__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        self.or_(other)
        return self

    def __ixor__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        self.xor(other)
        return self

    def __ilshift__(self, n):
        self.lshift(n)
        return self

    def __irshift__(self, n):
        self.rshift(n)
        return self

    def __eq__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self._state is other._state and self._array == other._array

    __hash__ = None

    def __str__(self):
        return ''.join('1' if bit else '0' for bit in self)

    def __repr__(self):
        if self._state is not State.READY:
            return '<{} {}>'.format(self.__class__.__name__,
                                    self._state.value)
        return '{}.from_bits({!r})'.format(self.__class__.__name__, str(self))

    def __assign(self, cells):
        self._array = cells
        self._state = State.READY
        logger.debug('Allocated bitset of %d cells', len(cells))

    def __check(self):
        if self._state is not State.READY:
            raise NullInputError('Bitset is {}'.format(self._state.value))

    def __operands(self, other):
        """ Validates both sides of a binary operator """
        if other is None:
            raise NullInputError('Right operand is missing')
        if not isinstance(other, BitSet):
            raise TypeError('Expected a BitSet, got {!r}'.format(other))

        self.__check()
        other.__check()

        if len(self._array) != len(other._array):
            raise LengthMismatchError(len(self._array), len(other._array))

    def __rotation(self, n):
        """ Effective left or right rotation amount, taken modulo the
            length only once the bitset is known to hold cells """
        self.__check()
        return _amount(n) % len(self._array)

    def __rotate(self, k):
        """ Rotates left by k, staging only the smaller partition """
        if k == 0:
            return

        rest = len(self._array) - k
        with memoryview(self._array) as view:
            if k <= rest:
                head = _stage(view[:k])
                view[:rest] = view[k:]
                view[rest:] = head
            else:
                tail = _stage(view[k:])
                view[rest:] = view[:k]
                view[:rest] = tail

    def __pos(self, pos):
        """ Calculates position if negative indexing was used """
        if pos < 0:
            pos += len(self._array)
        if not 0 <= pos < len(self._array):
            raise IndexError('Index out of range')
        return pos
