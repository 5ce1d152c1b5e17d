#
# Binary floating-point formats of arbitrary significand and exponent width
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from typing import NamedTuple

from .errors import SizeOutOfRange

__all__ = ('FloatFormat', 'Float16', 'Float32', 'Float64', 'Float128')


class FloatFormat(NamedTuple):
    '''A binary floating point format.  Only instantiate indirectly through from_sizes().

    significand_size is the number of bits of precision including the hidden bit, so an
    IEEE single has a significand_size of 24.  Stored significands exclude the hidden bit
    and are strictly less than hidden_bit.

    exponent_size is the width of the biased exponent field.  Stored exponents of finite
    numbers lie in [0, max_exponent); a stored exponent of zero means a zero or subnormal
    number, which has no hidden bit and is scaled as though its exponent were 1.
    max_exponent itself, the all-ones exponent field, is only ever reached by NaNs and
    infinities and is never stored.
    '''

    # These two attributes determine the rest, which are pre-calculated for efficiency
    significand_size: int
    exponent_size: int

    bias: int
    hidden_bit: int
    max_exponent: int

    @classmethod
    def from_sizes(cls, significand_size, exponent_size):
        '''Construct from the specified significand and exponent widths in bits.'''
        if not all(isinstance(arg, int) and not isinstance(arg, bool)
                   for arg in (significand_size, exponent_size)):
            raise TypeError('significand_size and exponent_size must be integers')
        if significand_size <= 1:
            raise SizeOutOfRange(f'significand size must be greater than 1: {significand_size}')
        if exponent_size <= 1:
            raise SizeOutOfRange(f'exponent size must be greater than 1: {exponent_size}')
        bias = (1 << (exponent_size - 1)) - 1
        hidden_bit = 1 << (significand_size - 1)
        max_exponent = (1 << exponent_size) - 1
        return cls(significand_size, exponent_size, bias, hidden_bit, max_exponent)

    @property
    def fraction_bits(self):
        '''The number of stored significand bits.'''
        return self.significand_size - 1

    @property
    def suffix(self):
        '''The size suffix used in the string form of values of this format.'''
        return f'{self.significand_size}e{self.exponent_size}'

    def __repr__(self):
        return (f'FloatFormat(significand_size={self.significand_size}, '
                f'exponent_size={self.exponent_size})')


Float16 = FloatFormat.from_sizes(11, 5)
Float32 = FloatFormat.from_sizes(24, 8)
Float64 = FloatFormat.from_sizes(53, 11)
Float128 = FloatFormat.from_sizes(113, 15)
