#
# Binary floating-point values of arbitrary significand and exponent width
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import logging
import re
from collections import namedtuple
from enum import IntEnum

from .context import get_context
from .errors import (
    InvalidSyntax, ExponentOutOfRange, SignificandOverflow, FormatMismatch,
    InvalidOperationOnSpecialValue,
)
from .formats import FloatFormat, Float32

__all__ = ('Special', 'GenericFloat')

logger = logging.getLogger(__name__)


class Special(IntEnum):
    '''The tag of a GenericFloat.  NONE means a finite number.'''
    NONE = 0
    NAN = 1
    POS_INF = 2
    NEG_INF = 3

    @property
    def token(self):
        return _special_tokens[self]


_special_tokens = {
    Special.NAN: 'NaN',
    Special.POS_INF: '+oo',
    Special.NEG_INF: '-oo',
}

_negated_specials = {
    Special.NAN: Special.NAN,
    Special.POS_INF: Special.NEG_INF,
    Special.NEG_INF: Special.POS_INF,
}

# Position in the total order of compare_to() relative to all finite numbers
_order_rank = {
    Special.NEG_INF: -1,
    Special.NONE: 0,
    Special.POS_INF: 1,
    Special.NAN: 2,
}


def _cmp(lhs, rhs):
    return (lhs > rhs) - (lhs < rhs)


def _rejected(exc_class, string, reason):
    '''Log and return an exception for a string the parser cannot accept.'''
    logger.debug('cannot parse %r: %s', string, reason)
    return exc_class(f'{reason}: {string!r}')


class GenericFloat(namedtuple('GenericFloat', 'fmt sign exponent significand special')):
    '''Internal Representation
       -----------------------

    A finite number has special set to Special.NONE.  Its exponent is the biased exponent
    field and its significand the fraction bits, without the hidden bit, exactly as they
    would be stored in an IEEE-754 style encoding of the format.  A stored exponent of zero
    means a zero or a subnormal; both have no hidden bit and are scaled as though the
    stored exponent were 1.  Therefore for all finite numbers:

        value = (-1)^sign * S * 2^(E - bias - (significand_size - 1))

    where S is the significand plus the hidden bit if the exponent is non-zero, and E is
    the stored exponent or 1 if that is zero.

    NaNs and infinities are tagged by special and have a zero exponent and significand.
    Their sign is implied by the tag: only negative infinity is negative.

    Values are immutable.  Binary operations require both operands to have the same
    format and raise FormatMismatch otherwise.
    '''

    def __new__(cls, fmt, sign, exponent, significand, special=Special.NONE):
        '''Validate and create a floating point number with the given format, sign, biased
        exponent, significand and special tag.
        '''
        if not isinstance(fmt, FloatFormat):
            raise TypeError('fmt must be a FloatFormat')
        if not isinstance(sign, bool):
            raise TypeError('sign must be a bool')
        if not isinstance(exponent, int):
            raise TypeError('exponent must be an integer')
        if not isinstance(significand, int):
            raise TypeError('significand must be an integer')
        special = Special(special)
        if special:
            if exponent or significand:
                raise ValueError(f'{special.name} must have a zero exponent and significand')
            if sign != (special == Special.NEG_INF):
                raise ValueError(f'sign does not agree with {special.name}')
        else:
            if not 0 <= exponent < fmt.max_exponent:
                raise ValueError(f'biased exponent {exponent:,d} out of range')
            if not 0 <= significand < fmt.hidden_bit:
                raise ValueError(f'significand {significand:,d} out of range')
        return super().__new__(cls, fmt, sign, exponent, significand, special)

    ##
    ## Constructors
    ##

    @classmethod
    def zero(cls, fmt, sign=False):
        '''Return a zero of the given format and sign.'''
        return cls(fmt, sign, 0, 0)

    @classmethod
    def infinity(cls, fmt, sign=False):
        '''Return an infinity of the given format and sign.'''
        return cls.special_value(fmt, Special.NEG_INF if sign else Special.POS_INF)

    @classmethod
    def nan(cls, fmt):
        '''Return the NaN of the given format.'''
        return cls.special_value(fmt, Special.NAN)

    @classmethod
    def special_value(cls, fmt, special):
        '''Return the NaN or infinity with the given tag.'''
        special = Special(special)
        if not special:
            raise ValueError('special_value requires a NaN or infinity tag')
        return cls(fmt, special == Special.NEG_INF, 0, 0, special)

    @classmethod
    def from_int(cls, value, fmt=None):
        '''Return the integer value exactly represented in the format.  If no format is given
        that of the current context is used.

        Raises SignificandOverflow if the value has too many significant bits and
        ExponentOutOfRange if it is too large for the exponent.'''
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError('from_int requires an integer')
        fmt = fmt or get_context().float_format
        sign = value < 0
        magnitude = abs(value)
        if magnitude == 0:
            return cls.zero(fmt)

        size = magnitude.bit_length()
        surplus = size - fmt.significand_size
        if surplus > 0:
            if magnitude & ((1 << surplus) - 1):
                raise SignificandOverflow(f'{value} has more than {fmt.significand_size} '
                                          f'significant bits')
            magnitude >>= surplus
        else:
            magnitude <<= -surplus

        exponent = fmt.bias + size - 1
        if exponent >= fmt.max_exponent:
            raise ExponentOutOfRange(f'{value} is too large for exponent size '
                                     f'{fmt.exponent_size}')
        return cls(fmt, sign, exponent, magnitude - fmt.hidden_bit)

    @classmethod
    def from_string(cls, string):
        '''Parse a string of the form [-]0x<hex>.<hex>e<int>f<sig_size>e<exp_size>, whose
        value is the hexadecimal number times 16 to the power <int>, or one of the special
        forms 0NaN<sig_size>e<exp_size>, 0+oo<sig_size>e<exp_size> and
        0-oo<sig_size>e<exp_size>.

        The value must be exactly representable in the format named by the sizes.
        '''
        if not isinstance(string, str):
            raise TypeError('from_string requires a string')

        match = SPECIAL_REGEX.fullmatch(string)
        if match:
            token, sig_size, exp_size = match.groups()
            fmt = FloatFormat.from_sizes(int(sig_size), int(exp_size))
            if token.lower() == 'nan':
                return cls.nan(fmt)
            return cls.infinity(fmt, token[0] == '-')

        match = HEX_FLOAT_REGEX.fullmatch(string)
        if match is None:
            raise _rejected(InvalidSyntax, string, 'invalid floating point literal')
        sign, int_digits, frac_digits, exponent16, sig_size, exp_size = match.groups()
        if not (int_digits or frac_digits):
            raise _rejected(InvalidSyntax, string, 'no hexadecimal digits')
        fmt = FloatFormat.from_sizes(int(sig_size), int(exp_size))
        sign = bool(sign)

        # Expand to binary; the point follows the bits of the integer digits
        bits = ''.join(f'{int(digit, 16):04b}' for digit in int_digits + frac_digits)
        point = len(int_digits) * 4
        first = bits.find('1')
        if first == -1:
            return cls.zero(fmt, sign)
        bits = bits[first: bits.rfind('1') + 1]

        # The biased exponent of the leading one bit
        exponent = int(exponent16) * 4 + fmt.bias + (point - first - 1)

        if exponent > 0:
            # Normal; drop the hidden bit
            bits = bits[1:]
        elif len(bits) - exponent <= fmt.fraction_bits:
            # Subnormal; the leading one moves right of the binary point
            bits = '0' * -exponent + bits
            exponent = 0
        elif exponent == 0:
            raise _rejected(SignificandOverflow, string,
                            f'significand does not fit in {fmt.fraction_bits} bits')

        if not 0 <= exponent < fmt.max_exponent:
            raise _rejected(ExponentOutOfRange, string,
                            f'exponent does not fit in {fmt.exponent_size} bits')
        if len(bits) > fmt.fraction_bits:
            raise _rejected(SignificandOverflow, string,
                            f'significand does not fit in {fmt.fraction_bits} bits')

        significand = int(bits or '0', 2) << (fmt.fraction_bits - len(bits))
        return cls(fmt, sign, exponent, significand)

    ##
    ## Queries
    ##

    def is_nan(self):
        '''Return True if this is a NaN.'''
        return self.special == Special.NAN

    def is_infinite(self):
        '''Return True if the value is an infinity of either sign.'''
        return self.special in (Special.POS_INF, Special.NEG_INF)

    def is_finite(self):
        '''Return True if the value is finite.'''
        return self.special == Special.NONE

    def is_zero(self):
        '''Return True if the value is zero regardless of sign.'''
        return not self.special and self.exponent == 0 and self.significand == 0

    def is_subnormal(self):
        '''Return True if the value is subnormal.'''
        return not self.special and self.exponent == 0 and self.significand != 0

    def is_normal(self):
        '''Return True if the value is finite, non-zero and not subnormal.'''
        return not self.special and self.exponent != 0

    def is_negative(self):
        '''Return True if the sign bit is set.'''
        return self.sign

    def _unpacked(self):
        '''Return the pair (S, E) of the class docstring for a finite number.'''
        if self.exponent:
            return self.significand + self.fmt.hidden_bit, self.exponent
        return self.significand, 1

    def _check_format(self, other, op_name):
        if not isinstance(other, GenericFloat):
            raise TypeError(f'{op_name} requires a GenericFloat operand')
        if self.fmt != other.fmt:
            raise FormatMismatch(f'{op_name} requires both operands have the same format: '
                                 f'{self.fmt!r} and {other.fmt!r}')

    def _normalize(self, sign, significand, exponent):
        '''Return the finite number in our format whose hidden-bit-inclusive significand and
        exponent are given, shifting the significand into range first.  Right shifts
        truncate.  Returns an infinity if the exponent is too large.'''
        fmt = self.fmt
        # Too many bits, or an exponent below the subnormal exponent of 1
        rshift = max(significand.bit_length() - fmt.significand_size, 1 - exponent, 0)
        significand >>= rshift
        exponent += rshift

        # Too few bits; move them up while the exponent allows
        if significand < fmt.hidden_bit:
            lshift = min(fmt.significand_size - significand.bit_length(), exponent - 1)
            significand <<= lshift
            exponent -= lshift

        if significand < fmt.hidden_bit:
            exponent = 0
        else:
            significand -= fmt.hidden_bit

        if exponent >= fmt.max_exponent:
            logger.debug('result overflows format %r to infinity', fmt)
            return self.infinity(fmt, sign)
        return GenericFloat(fmt, sign, exponent, significand)

    ##
    ## Arithmetic
    ##

    def negate(self):
        '''Return this value with the opposite sign.  NaN negates to itself.'''
        if self.special:
            return self.special_value(self.fmt, _negated_specials[self.special])
        return GenericFloat(self.fmt, not self.sign, self.exponent, self.significand)

    def add(self, other):
        '''Return the sum of this value and other.'''
        self._check_format(other, 'add')
        fmt = self.fmt

        if self.special or other.special:
            specials = {self.special, other.special}
            if Special.NAN in specials or specials == {Special.POS_INF, Special.NEG_INF}:
                return self.nan(fmt)
            return self if self.special else other

        # Make x the operand with the smaller exponent
        x, y = (self, other) if self.exponent <= other.exponent else (other, self)

        # x cannot affect the result if it lies wholly below y's precision
        if y.exponent - x.exponent > fmt.significand_size:
            return y

        x_sig, x_exp = x._unpacked()
        y_sig, y_exp = y._unpacked()
        if x.sign:
            x_sig = -x_sig
        if y.sign:
            y_sig = -y_sig

        significand = y_sig + (x_sig >> (y_exp - x_exp))
        sign = significand < 0
        significand = abs(significand)
        if significand == 0:
            return self.zero(fmt, x.sign and y.sign)
        return self._normalize(sign, significand, y_exp)

    def subtract(self, other):
        '''Return the difference of this value and other.'''
        self._check_format(other, 'subtract')
        return self.add(other.negate())

    def multiply(self, other):
        '''Return the product of this value and other.'''
        self._check_format(other, 'multiply')
        fmt = self.fmt
        sign = self.sign ^ other.sign

        if (self.is_nan() or other.is_nan()
                or (self.is_infinite() and other.is_zero())
                or (other.is_infinite() and self.is_zero())):
            return self.nan(fmt)
        if self.special or other.special:
            return self.infinity(fmt, sign)

        x_sig, x_exp = self._unpacked()
        y_sig, y_exp = other._unpacked()
        significand = x_sig * y_sig
        if significand == 0:
            return self.zero(fmt, sign)
        exponent = x_exp + y_exp - fmt.bias - fmt.fraction_bits
        return self._normalize(sign, significand, exponent)

    ##
    ## Comparisons
    ##

    def compare_to(self, other):
        '''Return -1, 0 or 1 as this value is less than, equal to or greater than other in a
        total order.

        Zeroes compare equal regardless of sign.  Negative infinity is below every other
        value, positive infinity above every finite value, and NaN above everything
        including positive infinity.  Unlike IEEE-754, a NaN compares equal to a NaN;
        use eq() and the other predicates for unordered NaN semantics.
        '''
        self._check_format(other, 'compare_to')
        if self.special or other.special:
            return _cmp(_order_rank[self.special], _order_rank[other.special])

        lhs_class = self._sign_class()
        rhs_class = other._sign_class()
        if lhs_class != rhs_class:
            return _cmp(lhs_class, rhs_class)
        if self.exponent != other.exponent:
            return lhs_class * _cmp(self.exponent, other.exponent)
        return lhs_class * _cmp(self.significand, other.significand)

    def _sign_class(self):
        if self.is_zero():
            return 0
        return -1 if self.sign else 1

    def _unordered(self, other, op_name):
        '''Return True if either operand is a NaN, after checking the formats match.'''
        self._check_format(other, op_name)
        return self.is_nan() or other.is_nan()

    def eq(self, other):
        '''Return True if the values are equal.  False if either is a NaN.'''
        if self._unordered(other, 'eq'):
            return False
        return self.compare_to(other) == 0

    def ne(self, other):
        '''Return True if the values are not equal.  True if either is a NaN.'''
        if self._unordered(other, 'ne'):
            return True
        return self.compare_to(other) != 0

    def lt(self, other):
        if self._unordered(other, 'lt'):
            return False
        return self.compare_to(other) < 0

    def gt(self, other):
        if self._unordered(other, 'gt'):
            return False
        return self.compare_to(other) > 0

    def le(self, other):
        if self._unordered(other, 'le'):
            return False
        return self.compare_to(other) <= 0

    def ge(self, other):
        if self._unordered(other, 'ge'):
            return False
        return self.compare_to(other) >= 0

    ##
    ## Integer conversion
    ##

    def floor_ceiling(self):
        '''Return the pair (floor, ceiling) of Python integers that bound the value.

        Raises InvalidOperationOnSpecialValue for NaNs and infinities.'''
        if self.special:
            raise InvalidOperationOnSpecialValue(
                f'floor_ceiling is undefined for {self.special.token}')

        significand, exponent = self._unpacked()
        exponent -= self.fmt.bias + self.fmt.fraction_bits

        if exponent >= 0:
            value = significand << exponent
            value = -value if self.sign else value
            return value, value

        rshift = -exponent
        if rshift > self.fmt.significand_size:
            # Strictly between -1 and 1
            if significand == 0:
                return 0, 0
            ceiling = 0 if self.sign else 1
            return ceiling - 1, ceiling

        fraction = significand & ((1 << rshift) - 1)
        significand >>= rshift
        if fraction == 0:
            value = -significand if self.sign else significand
            return value, value
        ceiling = -significand if self.sign else significand + 1
        return ceiling - 1, ceiling

    ##
    ## Text
    ##

    def to_string(self):
        '''Return the value in the format accepted by from_string().  Finite numbers have a
        single leading hexadecimal digit, which is non-zero unless the value is zero, and
        trailing zeroes stripped from the fraction.'''
        fmt = self.fmt
        if self.special:
            return f'0{self.special.token}{fmt.suffix}'

        sign = '-' if self.sign else ''
        if self.is_zero():
            return f'{sign}0x0.0e0f{fmt.suffix}'

        significand, exponent = self._unpacked()
        exponent -= fmt.bias + fmt.fraction_bits
        # Make the binary exponent a multiple of 4 so it converts to a power of 16
        lshift = exponent % 4
        significand <<= lshift
        exponent -= lshift

        digits = f'{significand:x}'
        fraction = digits[1:].rstrip('0') or '0'
        exponent16 = exponent // 4 + len(digits) - 1
        return f'{sign}0x{digits[0]}.{fraction}e{exponent16}f{fmt.suffix}'

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
        '''Return this value with the sign cleared; negative infinity becomes positive.'''
        if self.sign:
            return self.negate()
        return self

    def __add__(self, other):
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        if not isinstance(other, GenericFloat):
            # NotImplemented would fall back to tuple repetition for integers
            raise TypeError(f'cannot multiply GenericFloat by {type(other).__name__}')
        return self.multiply(other)

    __rmul__ = __mul__

    def __eq__(self, other):
        # Values of different formats are simply unequal rather than an error
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.fmt == other.fmt and self.eq(other)

    def __ne__(self, other):
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.fmt != other.fmt or self.ne(other)

    def __lt__(self, other):
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other):
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.le(other)

    def __gt__(self, other):
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other):
        if not isinstance(other, GenericFloat):
            return NotImplemented
        return self.ge(other)

    def __bool__(self):
        return not self.is_zero()

    def __floor__(self):
        return self.floor_ceiling()[0]

    def __ceil__(self):
        return self.floor_ceiling()[1]

    def __hash__(self):
        '''Hash equally for values that compare equal.'''
        if self.is_zero():
            return hash((self.fmt, 0))
        return hash((self.fmt, self.sign, self.exponent, self.significand, self.special))


GenericFloat.ZERO = GenericFloat.zero(Float32)

SPECIAL_REGEX = re.compile(
    # zero nan-or-signed-infinity sig-size e exp-size
    '0(nan|[-+]oo)([0-9]+)e([0-9]+)',
    re.ASCII | re.IGNORECASE
)
HEX_FLOAT_REGEX = re.compile(
    # sign[opt] hex-prefix
    '(-?)0x'
    # hex-integer[opt] . hex-fraction[opt]; the fraction is greedy so the exponent is the
    # last e<int>f group
    '([0-9a-f]*)\\.([0-9a-f]*)'
    # e exp-sign[opt]dec-exponent f sig-size e exp-size
    'e([-+]?[0-9]+)f([0-9]+)e([0-9]+)',
    re.ASCII | re.IGNORECASE
)
