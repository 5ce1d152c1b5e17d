import math
import os
import random
from decimal import Decimal
from fractions import Fraction
from itertools import product

import pytest

from exactnum import *


operations = {
    'add': DecimalValue.add,
    'sub': DecimalValue.subtract,
    'mul': DecimalValue.multiply,
}


def read_lines(filename):
    result = []
    with open(os.path.join('tests/data', filename)) as f:
        for line in f:
            hash_pos = line.find('#')
            if hash_pos != -1:
                line = line[:hash_pos]
            line = line.strip()
            if line:
                result.append(line)
    return result


def dec(string):
    return DecimalValue.from_string(string)


def random_decimal():
    return DecimalValue(random.randrange(-10**6, 10**6), random.randrange(-8, 8))


def as_fraction(value):
    return Fraction(value.mantissa) * Fraction(10) ** value.exponent


sample_values = tuple(dec(s) for s in (
    '0', '1', '-1', '0.5', '-0.5', '123.45', '1e10', '-7.25e-3', '999', '0.001'))


class TestConstruction:

    @pytest.mark.parametrize('mantissa, exponent, answer', (
        (1200, -1, (12, 1)),
        (-50, 0, (-5, 1)),
        (0, 5, (0, 0)),
        (0, -3, (0, 0)),
        (7, -2, (7, -2)),
        (10**20, -20, (1, 0)),
    ))
    def test_normalized(self, mantissa, exponent, answer):
        value = DecimalValue(mantissa, exponent)
        assert (value.mantissa, value.exponent) == answer

    def test_default_exponent(self):
        assert DecimalValue(15) == DecimalValue(15, 0)

    @pytest.mark.parametrize('args', ((1.5, 0), ('1', 0), (1, 0.0), (True, 0), (1, None)))
    def test_bad_types(self, args):
        with pytest.raises(TypeError):
            DecimalValue(*args)

    def test_from_int(self):
        value = DecimalValue.from_int(-3400)
        assert (value.mantissa, value.exponent) == (-34, 2)
        assert DecimalValue.ZERO == DecimalValue.from_int(0)
        with pytest.raises(TypeError):
            DecimalValue.from_int(2.0)


class TestFromString:

    @pytest.mark.parametrize('line', read_lines('decimal_parse.txt'))
    def test_parse(self, line):
        parts = line.split()
        if len(parts) != 4:
            assert False, f'bad line: {line}'
        string, mantissa, exponent, canonical = parts
        value = DecimalValue.from_string(string)
        assert value.mantissa == int(mantissa)
        assert value.exponent == int(exponent)
        assert value.to_decimal_string() == canonical
        assert DecimalValue.from_string(canonical) == value
        assert DecimalValue.from_string(value.to_string()) == value
        assert as_fraction(value) == Fraction(Decimal(string))

    @pytest.mark.parametrize('string', (
        '', '+1', '.5', '1.', '1e', 'e5', '1.5.5', '1e2.5', 'abc', '1 2', '--1', '0x10',
        ' 1', '1\n', '1_000', 'inf', 'NaN', '1e+', '١',
        '-1.', '1.e', '1..5', '.e5',
    ))
    def test_invalid_syntax(self, string):
        with pytest.raises(InvalidSyntax):
            DecimalValue.from_string(string)

    def test_invalid_syntax_is_value_error(self):
        with pytest.raises(ValueError):
            DecimalValue.from_string('1.2.3')

    def test_not_a_string(self):
        with pytest.raises(TypeError):
            DecimalValue.from_string(12)

    def test_empty_fraction(self):
        assert dec('1.e5') == dec('1e5')
        assert dec('-2.E-1').to_decimal_string() == '-0.2'
        with pytest.raises(InvalidSyntax):
            dec('1.')

    def test_example(self):
        value = dec('123.45')
        assert value.mantissa == 12345
        assert value.exponent == -2
        assert value.to_decimal_string() == '123.45'


class TestArithmetic:

    @pytest.mark.parametrize('line', read_lines('decimal_arith.txt'))
    def test_arith(self, line):
        parts = line.split()
        if len(parts) != 4:
            assert False, f'bad line: {line}'
        operation, lhs, rhs, answer = parts
        result = operations[operation](dec(lhs), dec(rhs))
        assert result.to_string() == answer

    def test_add_example(self):
        assert dec('1e2').add(dec('1e-1')).to_decimal_string() == '100.1'

    @pytest.mark.parametrize('lhs, rhs', tuple(product(sample_values, repeat=2)))
    def test_against_fractions(self, lhs, rhs):
        assert as_fraction(lhs + rhs) == as_fraction(lhs) + as_fraction(rhs)
        assert as_fraction(lhs - rhs) == as_fraction(lhs) - as_fraction(rhs)
        assert as_fraction(lhs * rhs) == as_fraction(lhs) * as_fraction(rhs)

    @pytest.mark.parametrize('lhs, rhs', tuple(product(sample_values, repeat=2)))
    def test_commutative(self, lhs, rhs):
        assert lhs.add(rhs) == rhs.add(lhs)
        assert lhs.multiply(rhs) == rhs.multiply(lhs)

    def test_associative(self):
        for n in range(100):
            x, y, z = random_decimal(), random_decimal(), random_decimal()
            assert (x + y) + z == x + (y + z)
            assert (x * y) * z == x * (y * z)

    @pytest.mark.parametrize('value', sample_values)
    def test_negate(self, value):
        assert value.negate().negate() == value
        assert -value == value.negate()
        assert (value + -value).is_zero()
        assert +value is value
        assert abs(value) == abs(-value)
        assert not abs(value).is_negative()

    def test_ints(self):
        value = dec('2.5')
        assert value + 1 == dec('3.5')
        assert 1 + value == dec('3.5')
        assert value - 3 == dec('-0.5')
        assert 3 - value == dec('0.5')
        assert value * 2 == 5
        assert 4 * value == 10

    @pytest.mark.parametrize('other', (1.5, '1', None, Decimal(1)))
    def test_bad_operand(self, other):
        value = dec('2.5')
        with pytest.raises(TypeError):
            value + other
        with pytest.raises(TypeError):
            value - other
        with pytest.raises(TypeError):
            value * other

    @pytest.mark.parametrize('method', ('add', 'subtract', 'multiply', 'compare_to',
                                        'eq', 'lt'))
    def test_named_bad_operand(self, method):
        with pytest.raises(TypeError):
            getattr(dec('1'), method)(1)


class TestQueries:

    @pytest.mark.parametrize('string, zero, positive, negative', (
        ('0', True, False, False),
        ('-0.0', True, False, False),
        ('0.001', False, True, False),
        ('-5e3', False, False, True),
    ))
    def test_queries(self, string, zero, positive, negative):
        value = dec(string)
        assert value.is_zero() is zero
        assert value.is_positive() is positive
        assert value.is_negative() is negative
        assert bool(value) is not zero


class TestCompare:

    @pytest.mark.parametrize('lhs, rhs, answer', (
        ('1', '2', -1),
        ('2', '1', 1),
        ('1.0', '1', 0),
        ('-1', '1', -1),
        ('-1', '-2', 1),
        ('0.001', '0.0001', 1),
        ('1e3', '999.999', 1),
        ('-0', '0', 0),
        ('-0.5', '0', -1),
    ))
    def test_compare_to(self, lhs, rhs, answer):
        lhs, rhs = dec(lhs), dec(rhs)
        assert lhs.compare_to(rhs) == answer
        assert rhs.compare_to(lhs) == -answer
        assert lhs.eq(rhs) is (answer == 0)
        assert lhs.ne(rhs) is (answer != 0)
        assert lhs.lt(rhs) is (answer < 0)
        assert lhs.gt(rhs) is (answer > 0)
        assert lhs.le(rhs) is (answer <= 0)
        assert lhs.ge(rhs) is (answer >= 0)
        assert (lhs == rhs) is (answer == 0)
        assert (lhs != rhs) is (answer != 0)
        assert (lhs < rhs) is (answer < 0)
        assert (lhs > rhs) is (answer > 0)
        assert (lhs <= rhs) is (answer <= 0)
        assert (lhs >= rhs) is (answer >= 0)

    def test_ints(self):
        assert dec('20') == 20
        assert 20 == dec('2e1')
        assert dec('0.5') < 1
        assert 1 > dec('0.5')
        assert dec('3') != 4

    def test_sort(self):
        values = [random_decimal() for n in range(50)]
        assert sorted(values, key=as_fraction) == sorted(values)

    def test_hash(self):
        assert hash(dec('20')) == hash(20)
        assert hash(dec('0.5')) == hash(0.5)
        assert hash(dec('-1.5')) == hash(Fraction(-3, 2))
        assert hash(dec('123.45')) == hash(Decimal('123.45'))
        assert hash(dec('-1')) == hash(-1)
        assert hash(dec('1e-30')) == hash(Fraction(1, 10**30))
        assert len({dec('1.0'), dec('1'), 1, dec('2')}) == 2


class TestFloorCeiling:

    @pytest.mark.parametrize('string, floor, ceiling', (
        ('2.5', 2, 3),
        ('-2.5', -3, -2),
        ('3', 3, 3),
        ('-3', -3, -3),
        ('0.001', 0, 1),
        ('-0.001', -1, 0),
        ('0', 0, 0),
        ('1e3', 1000, 1000),
        ('-1e3', -1000, -1000),
        ('123.45', 123, 124),
        ('-123.45', -124, -123),
        ('12.000001', 12, 13),
    ))
    def test_floor_ceiling(self, string, floor, ceiling):
        value = dec(string)
        assert value.floor_ceiling() == (floor, ceiling)
        assert math.floor(value) == floor
        assert math.ceil(value) == ceiling

    def test_bounds(self):
        for n in range(200):
            value = random_decimal()
            floor, ceiling = value.floor_ceiling()
            assert floor <= as_fraction(value) <= ceiling
            assert ceiling - floor == (0 if as_fraction(value).denominator == 1 else 1)


class TestToString:

    @pytest.mark.parametrize('string, answer', (
        ('123.45', '12345e-2'),
        ('-0.5', '-5e-1'),
        ('100', '1e2'),
        ('0', '0e0'),
        ('7', '7e0'),
    ))
    def test_scientific(self, string, answer):
        value = dec(string)
        assert value.to_string() == answer
        assert str(value) == answer
        assert repr(value) == answer

    @pytest.mark.parametrize('mantissa, exponent, answer', (
        (12345, -2, '123.45'),
        (-5, -1, '-0.5'),
        (1, 2, '100.0'),
        (-1, 0, '-1.0'),
        (123, -5, '0.00123'),
        (-123, -3, '-0.123'),
        (0, 0, '0.0'),
        (1, 30, '1' + '0' * 30 + '.0'),
    ))
    def test_canonical(self, mantissa, exponent, answer):
        assert DecimalValue(mantissa, exponent).to_decimal_string() == answer

    @pytest.mark.parametrize('string, max_digits, answer', (
        ('123.456', 3, '123.456'),
        ('123.456', 5, '123.456'),
        ('1.23456', 3, '1.234'),
        ('-1.23456', 3, '-1.234'),
        ('1.99999', 2, '1.99'),
        ('-1.99999', 2, '-1.99'),
        ('0.00123', 4, '0.0012'),
        ('-0.00123', 4, '-0.0012'),
        ('5', 1, '5.0'),
        ('10', 1, '10.0'),
        ('-10', 1, '-10.0'),
        ('123.456', 2, '100.0'),
        ('-12345', 3, '-1000.0'),
        ('0', 1, '0.0'),
        ('-0.001', 2, '0.00'),
        ('-0.009', 1, '0.0'),
        ('-0.0012', 3, '-0.001'),
    ))
    def test_truncated(self, string, max_digits, answer):
        assert dec(string).to_decimal_string(max_digits) == answer

    @pytest.mark.parametrize('max_digits', (0, -1))
    def test_bad_max_digits(self, max_digits):
        with pytest.raises(SizeOutOfRange):
            dec('1.5').to_decimal_string(max_digits)

    @pytest.mark.parametrize('max_digits', (1.5, '3', True))
    def test_bad_max_digits_type(self, max_digits):
        with pytest.raises(TypeError):
            dec('1.5').to_decimal_string(max_digits)

    def test_round_trip(self):
        for n in range(200):
            value = random_decimal()
            assert dec(value.to_string()) == value
            assert dec(value.to_decimal_string()) == value
