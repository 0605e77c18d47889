'''
Exact and precision-controlled arithmetic over DecimalValue.

Addition, subtraction, multiplication, modulo and non-negative integer powers
are exact whatever the operand lengths. Anything that may not terminate
(division, averages) takes a PrecisionContext and rounds once, at the end.
'''

from functools import cmp_to_key
from math import comb, perm, factorial as _factorial, gcd as _gcd
import decimal
import random

from .util import (InvalidArgument, DivisionByZero, wrap_user_errors)
from .value import DecimalValue, ZERO, ONE

# Never rounds anything that fits in memory
EXACT = decimal.Context(prec=decimal.MAX_PREC,
                        Emax=decimal.MAX_EMAX,
                        Emin=decimal.MIN_EMIN,
                        traps=[decimal.InvalidOperation,
                               decimal.DivisionByZero,
                               decimal.Overflow])


def _integer(value, what):
    '''
    Python int for an integral value, InvalidArgument otherwise.
    '''
    if not value.is_integer():
        raise InvalidArgument('{} must be an integer, got {}'.format(what,
                                                                     value))
    return int(value)


def compare(left, right):
    '''
    Three-way comparison: magnitude first, then sign.

    Returns -1, 0 or 1.
    '''
    if left.negative != right.negative:
        return -1 if left.negative else 1
    magnitude = _compare_magnitude(left, right)
    return -magnitude if left.negative else magnitude


def _compare_magnitude(left, right):
    if len(left.integer_digits) != len(right.integer_digits):
        return -1 if len(left.integer_digits) < len(right.integer_digits) \
            else 1
    if left.integer_digits != right.integer_digits:
        return -1 if left.integer_digits < right.integer_digits else 1
    left_fraction = left.fraction_digits if left.has_fraction else ''
    right_fraction = right.fraction_digits if right.has_fraction else ''
    width = max(len(left_fraction), len(right_fraction))
    left_fraction = left_fraction.ljust(width, '0')
    right_fraction = right_fraction.ljust(width, '0')
    if left_fraction == right_fraction:
        return 0
    return -1 if left_fraction < right_fraction else 1


def add(left, right):
    return DecimalValue.from_decimal(EXACT.add(left.to_decimal(),
                                               right.to_decimal()))


def subtract(left, right):
    return DecimalValue.from_decimal(EXACT.subtract(left.to_decimal(),
                                                    right.to_decimal()))


def multiply(left, right):
    return DecimalValue.from_decimal(EXACT.multiply(left.to_decimal(),
                                                    right.to_decimal()))


def negate(value):
    return -value


def absolute(value):
    return abs(value)


@wrap_user_errors('Cannot divide {0} by {1}')
def divide(dividend, divisor, precision):
    '''
    Long division to precision.significant_digits, rounded by its rule.
    '''
    if divisor.is_zero():
        raise DivisionByZero('Division of {} by zero'.format(dividend))
    quotient = precision.decimal_context().divide(dividend.to_decimal(),
                                                  divisor.to_decimal())
    return DecimalValue.from_decimal(quotient)


@wrap_user_errors('Cannot take {0} modulo {1}')
def modulo(dividend, divisor):
    '''
    Exact remainder, carrying the sign of the dividend.
    '''
    if divisor.is_zero():
        raise DivisionByZero('Modulo of {} by zero'.format(dividend))
    return DecimalValue.from_decimal(EXACT.remainder(dividend.to_decimal(),
                                                     divisor.to_decimal()))


def floor(value):
    return DecimalValue.from_decimal(
        value.to_decimal().to_integral_value(rounding=decimal.ROUND_FLOOR))


def ceil(value):
    return DecimalValue.from_decimal(
        value.to_decimal().to_integral_value(rounding=decimal.ROUND_CEILING))


def integer_power(base, exponent, precision):
    '''
    base ** exponent for a Python int exponent, by repeated squaring.

    Exact for non-negative exponents; negative exponents divide at precision.
    '''
    if exponent < 0:
        if base.is_zero():
            raise DivisionByZero('Zero to the negative power {}'
                                 .format(exponent))
        return divide(ONE, integer_power(base, -exponent, precision),
                      precision)
    result = ONE
    square = base
    while exponent:
        if exponent & 1:
            result = multiply(result, square)
        exponent >>= 1
        if exponent:
            square = multiply(square, square)
    return result


def factorial(value):
    n = _integer(value, 'Factorial argument')
    if n < 0:
        raise InvalidArgument('Factorial of negative number {}'.format(n))
    return DecimalValue.from_int(_factorial(n))


def _counting_arguments(n, k):
    n = _integer(n, 'n')
    k = _integer(k, 'k')
    if n < 0 or k < 0 or k > n:
        raise InvalidArgument('Need 0 <= k <= n, got n={} k={}'.format(n, k))
    return n, k


def permutation(n, k):
    '''
    Ordered selections of k out of n: n! / (n - k)!
    '''
    return DecimalValue.from_int(perm(*_counting_arguments(n, k)))


def combination(n, k):
    '''
    Unordered selections of k out of n: n! / (k! (n - k)!)
    '''
    return DecimalValue.from_int(comb(*_counting_arguments(n, k)))


def gcd(left, right):
    return DecimalValue.from_int(_gcd(_integer(left, 'GCD argument'),
                                      _integer(right, 'GCD argument')))


def lcm(left, right):
    left = _integer(left, 'LCM argument')
    right = _integer(right, 'LCM argument')
    if not left or not right:
        return ZERO
    return DecimalValue.from_int(abs(left * right) // _gcd(left, right))


def random_integer_in_range(minimum, maximum):
    '''
    Uniformly distributed integer in [minimum, maximum).
    '''
    low = _integer(minimum, 'Lower bound')
    high = _integer(maximum, 'Upper bound')
    if low >= high:
        raise InvalidArgument('Need min < max, got {} and {}'
                              .format(low, high))
    return DecimalValue.from_int(random.randrange(low, high))


def random_fraction(precision):
    '''
    Uniformly distributed value in [0, 1) with significant_digits digits.
    '''
    digits = precision.significant_digits
    drawn = random.randrange(10 ** digits)
    return DecimalValue.from_decimal(EXACT.scaleb(decimal.Decimal(drawn),
                                                  -digits))


def minimum(first, *rest):
    return min((first,) + rest, key=cmp_to_key(compare))


def maximum(first, *rest):
    return max((first,) + rest, key=cmp_to_key(compare))


def average(values, precision):
    total = ZERO
    for value in values:
        total = add(total, value)
    return divide(total, DecimalValue.from_int(len(values)), precision)


def median(values, precision):
    ordered = sorted(values, key=cmp_to_key(compare))
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[middle]
    return average(ordered[middle - 1:middle + 1], precision)
