#
# Exceptions raised by the exact numeric types
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

__all__ = ('ExactNumError', 'InvalidSyntax', 'SizeOutOfRange', 'ExponentOutOfRange',
           'SignificandOverflow', 'FormatMismatch', 'InvalidOperationOnSpecialValue',
           'InternalInvariantViolation')


class ExactNumError(ArithmeticError):
    '''All exceptions raised by this package subclass from this.

    Exceptions with a natural builtin counterpart also derive from it, always through
    ExactNumError first, so that callers can catch either.  None of them is ever handled
    internally; an operation either returns a value or raises.
    '''


class InvalidSyntax(ExactNumError, ValueError):
    '''Raised when a string does not match the grammar of the type being parsed.'''


class SizeOutOfRange(ExactNumError, ValueError):
    '''Raised for a significand or exponent width less than 2, or a decimal digit budget
    less than 1.'''


class ExponentOutOfRange(ExactNumError, OverflowError):
    '''Raised when a parsed or converted value needs an exponent the format cannot store.'''


class SignificandOverflow(ExactNumError, OverflowError):
    '''Raised when a parsed or converted value has more significant bits than the format.'''


class FormatMismatch(ExactNumError, ValueError):
    '''Raised when a binary operation is given operands of different formats.'''


class InvalidOperationOnSpecialValue(ExactNumError):
    '''Raised when an operation with no meaning for NaNs or infinities is given one.'''


class InternalInvariantViolation(ExactNumError, AssertionError):
    '''An internal consistency check failed.  This is a bug, not a usage error.'''
