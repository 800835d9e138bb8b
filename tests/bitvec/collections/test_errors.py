import pytest

from bitvec.collections.errors import (AllocationError, BitSetError,
                                       LengthMismatchError, NullInputError,
                                       Status)


def test_status_codes():
    assert [int(s) for s in Status] == [0, 1, 2, 3]
    assert Status.GOOD == 0


@pytest.mark.parametrize('error, status, builtin', [
    (NullInputError, Status.NULL_ERR, ValueError),
    (AllocationError, Status.ALLOC_ERR, MemoryError),
    (LengthMismatchError, Status.LENGTH_ERR, ValueError),
])
def test_hierarchy(error, status, builtin):
    assert issubclass(error, BitSetError)
    assert issubclass(error, builtin)
    assert error.status is status


def test_length_mismatch_message():
    exc = LengthMismatchError(4, 5)

    assert exc.lhs == 4
    assert exc.rhs == 5
    assert str(exc) == 'Length mismatch: 4 != 5'
