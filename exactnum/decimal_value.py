#
# Arbitrary-precision decimal values of the form mantissa * 10^exponent
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import logging
import re
import sys
from collections import namedtuple

from .errors import InvalidSyntax, SizeOutOfRange, InternalInvariantViolation

__all__ = ('DecimalValue', )

logger = logging.getLogger(__name__)


class DecimalValue(namedtuple('DecimalValue', 'mantissa exponent')):
    '''An exact decimal number, mantissa * 10^exponent.

    Values are always normalized: a non-zero mantissa is not a multiple of ten, and zero
    has an exponent of zero.  Each value therefore has exactly one representation and
    equality is equality of the (mantissa, exponent) pair.
    '''

    def __new__(cls, mantissa, exponent=0):
        '''Create a decimal value, dividing trailing factors of ten out of the mantissa.'''
        if not isinstance(mantissa, int) or isinstance(mantissa, bool):
            raise TypeError('mantissa must be an integer')
        if not isinstance(exponent, int) or isinstance(exponent, bool):
            raise TypeError('exponent must be an integer')
        if mantissa == 0:
            exponent = 0
        else:
            while mantissa % 10 == 0:
                mantissa //= 10
                exponent += 1
        return super().__new__(cls, mantissa, exponent)

    @classmethod
    def from_int(cls, value):
        '''Return the integer as a decimal value.'''
        return cls(value, 0)

    @classmethod
    def from_string(cls, string):
        '''Parse a string of the form [-]<digits>[.[<digits>]][e<int>], such as 1.5, 1.e5 or
        -2.5e-3.'''
        if not isinstance(string, str):
            raise TypeError('from_string requires a string')
        match = DECIMAL_REGEX.fullmatch(string)
        # The fraction digits may be omitted but a literal cannot end in the point
        if match is None or string.endswith('.'):
            logger.debug('cannot parse %r as a decimal', string)
            raise InvalidSyntax(f'invalid decimal literal: {string!r}')

        sign, integral, fraction, exponent = match.groups()
        fraction = fraction or ''
        # Each fraction digit moves the point one place; the sign covers all the digits
        mantissa = int(integral + fraction)
        if sign:
            mantissa = -mantissa
        return cls(mantissa, int(exponent or 0) - len(fraction))

    ##
    ## Queries
    ##

    def is_zero(self):
        return self.mantissa == 0

    def is_positive(self):
        return self.mantissa > 0

    def is_negative(self):
        return self.mantissa < 0

    ##
    ## Arithmetic
    ##

    def negate(self):
        '''Return the value with the opposite sign.'''
        return DecimalValue(-self.mantissa, self.exponent)

    def abs(self):
        '''Return the absolute value.'''
        return DecimalValue(abs(self.mantissa), self.exponent)

    def add(self, other):
        '''Return the sum of this value and other.'''
        other = _check_operand(other, 'add')
        (lhs_mant, lhs_exp), (rhs_mant, rhs_exp) = sorted((self, other), key=_exponent)
        # Scale the operand with the greater exponent down to the smaller one
        rhs_mant *= 10 ** (rhs_exp - lhs_exp)
        return DecimalValue(lhs_mant + rhs_mant, lhs_exp)

    def subtract(self, other):
        '''Return the difference of this value and other.'''
        other = _check_operand(other, 'subtract')
        return self.add(other.negate())

    def multiply(self, other):
        '''Return the product of this value and other.'''
        other = _check_operand(other, 'multiply')
        return DecimalValue(self.mantissa * other.mantissa, self.exponent + other.exponent)

    ##
    ## Comparisons
    ##

    def compare_to(self, other):
        '''Return -1, 0 or 1 as this value is less than, equal to or greater than other.'''
        other = _check_operand(other, 'compare_to')
        if self.mantissa == other.mantissa and self.exponent == other.exponent:
            return 0
        return -1 if self.subtract(other).is_negative() else 1

    def eq(self, other):
        return self.compare_to(other) == 0

    def ne(self, other):
        return self.compare_to(other) != 0

    def lt(self, other):
        return self.compare_to(other) < 0

    def gt(self, other):
        return self.compare_to(other) > 0

    def le(self, other):
        return self.compare_to(other) <= 0

    def ge(self, other):
        return self.compare_to(other) >= 0

    ##
    ## Integer conversion
    ##

    def floor_ceiling(self):
        '''Return the pair (floor, ceiling) of Python integers that bound the value.'''
        mantissa, exponent = self
        if mantissa == 0:
            floor = ceiling = 0
        elif exponent >= 0:
            floor = ceiling = mantissa * 10 ** exponent
        else:
            # Truncate towards zero, then step away from zero on the side the value lies
            quotient, remainder = divmod(abs(mantissa), 10 ** -exponent)
            if mantissa > 0:
                floor = quotient
                ceiling = quotient + (remainder != 0)
            else:
                ceiling = -quotient
                floor = ceiling - (remainder != 0)

        if floor > ceiling:
            raise InternalInvariantViolation(f'floor {floor} exceeds ceiling {ceiling} '
                                             f'for {self}')
        return floor, ceiling

    ##
    ## Text
    ##

    def to_string(self):
        '''Return the exact scientific form <mantissa>e<exponent>.'''
        return f'{self.mantissa}e{self.exponent}'

    def _decimal_parts(self):
        '''Return a tuple (sign, integral, fraction) of strings.  integral has no leading
        zeroes and is empty if the value is less than one in magnitude.'''
        sign = '-' if self.mantissa < 0 else ''
        digits = str(abs(self.mantissa))
        if self.exponent >= 0:
            return sign, digits + '0' * self.exponent, ''
        # The number of digits before the decimal point
        point = len(digits) + self.exponent
        if point > 0:
            return sign, digits[:point], digits[point:]
        return sign, '', '0' * -point + digits

    def to_decimal_string(self, max_digits=None):
        '''Return the value as a decimal without an exponent.

        With no max_digits the output is exact, for example '123.45', '0.00123' or
        '100.0'.  Otherwise fraction digits beyond max_digits are truncated, and a value
        whose integer part has more than max_digits digits is output as 10^max_digits
        with the value's sign, followed by '.0'.
        '''
        sign, integral, fraction = self._decimal_parts()
        if max_digits is not None:
            if not isinstance(max_digits, int) or isinstance(max_digits, bool):
                raise TypeError('max_digits must be an integer')
            if max_digits < 1:
                raise SizeOutOfRange(f'max_digits must be positive: {max_digits}')
            if len(integral) > max_digits:
                limit = 10 ** max_digits
                return f'{-limit if self.mantissa < 0 else limit}.0'
            fraction = fraction[:max_digits]
            if not integral and not fraction.strip('0'):
                # Every kept digit is zero
                sign = ''
        return f'{sign}{integral or "0"}.{fraction or "0"}'

    ##
    ## Python support
    ##

    def __repr__(self):
        return self.to_string()

    def __str__(self):
        return self.to_string()

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    def __abs__(self):
        return self.abs()

    def __add__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return other.subtract(self)

    def __mul__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __eq__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.eq(other)

    def __ne__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.ne(other)

    def __lt__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.lt(other)

    def __le__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.le(other)

    def __gt__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other):
        other = _convert_for_arith(other)
        if other is None:
            return NotImplemented
        return self.ge(other)

    def __bool__(self):
        return not self.is_zero()

    def __floor__(self):
        return self.floor_ceiling()[0]

    def __ceil__(self):
        return self.floor_ceiling()[1]

    def __hash__(self):
        '''Hash as the equal int, float or Fraction would.'''
        if self.exponent >= 0:
            exp_hash = pow(10, self.exponent, _HASH_MODULUS)
        else:
            exp_hash = pow(_HASH_10INV, -self.exponent, _HASH_MODULUS)
        hash_ = abs(self.mantissa) * exp_hash % _HASH_MODULUS
        ans = -hash_ if self.mantissa < 0 else hash_
        return -2 if ans == -1 else ans


def _exponent(value):
    return value.exponent


def _check_operand(value, op_name):
    if not isinstance(value, DecimalValue):
        raise TypeError(f'{op_name} requires a DecimalValue operand')
    return value


def _convert_for_arith(value):
    '''Return value as a DecimalValue if it is one or a Python int, otherwise None.'''
    if isinstance(value, DecimalValue):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return DecimalValue(value)
    return None


DecimalValue.ZERO = DecimalValue(0)

# Numeric hashing is based on reduction modulo this prime
_HASH_MODULUS = sys.hash_info.modulus
# The inverse of 10 modulo _HASH_MODULUS
_HASH_10INV = pow(10, _HASH_MODULUS - 2, _HASH_MODULUS)

DECIMAL_REGEX = re.compile(
    # sign[opt] dec-integer
    '(-?)([0-9]+)'
    # . dec-fraction   [opt]
    '(?:\\.([0-9]*))?'
    # e exp-sign[opt]dec-exponent   [opt]
    '(?:e([-+]?[0-9]+))?',
    re.ASCII | re.IGNORECASE
)
