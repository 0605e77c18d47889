'''
Powers, roots, logarithms, trigonometric, hyperbolic and gamma functions.

All of these are built on decimal.Decimal: series expansions run until the
next term no longer changes the sum, roots use Newton-Raphson, and every
routine works with guard digits and rounds once to the caller's
PrecisionContext. None of them ever go through binary floating point.
'''

from decimal import Decimal, localcontext
from functools import lru_cache
from math import factorial as _factorial
import decimal

from .arithmetic import EXACT, integer_power
from .context import AngleMode, PrecisionContext
from .util import (NumericDomainError, InvalidArgument, DivisionByZero,
                   wrap_user_errors)
from .value import DecimalValue, ZERO, ONE


GUARD_DIGITS = 10
# Series and Newton iterations stop here even without convergence
MAX_ITERATIONS = 100000

_QUARTER_SINES = (0, 1, 0, -1)
_QUARTER_COSINES = (1, 0, -1, 0)


def _working(digits):
    '''
    Context for intermediates carrying digits significant digits.
    '''
    return decimal.Context(prec=digits,
                           rounding=decimal.ROUND_HALF_EVEN,
                           Emax=decimal.MAX_EMAX,
                           Emin=decimal.MIN_EMIN,
                           traps=[decimal.InvalidOperation,
                                  decimal.DivisionByZero,
                                  decimal.Overflow])


def _digits(precision, extra=0):
    return precision.significant_digits + GUARD_DIGITS + extra


def _finish(number, precision):
    return DecimalValue.from_decimal(precision.round(number))


def _small_argument_guard(x):
    '''
    Extra digits lost to cancellation for arguments close to zero.
    '''
    return max(0, -x.adjusted()) if x else 0


@lru_cache(maxsize=64)
def _pi(digits):
    '''
    π to the given number of significant digits.
    '''
    with localcontext(_working(digits + 2)):
        three = Decimal(3)
        last, t, s, n, na, d, da = 0, three, three, 1, 0, 0, 24
        while s != last:
            last = s
            n, na = n + na, na + 8
            d, da = d + da, da + 32
            t = (t * n) / d
            s += t
    return _working(digits).plus(s)


def _converged_series(first, next_term):
    '''
    Sum terms until adding one no longer changes the sum.

    Runs in the active decimal context. next_term(i, term) gives term i + 1.
    '''
    total, term = first, first
    for i in range(MAX_ITERATIONS):
        term = next_term(i, term)
        last, total = total, total + term
        if total == last:
            break
    return total


def _reduce(x, digits):
    '''
    x radians folded into [-π, π].
    '''
    work = digits + 2 + max(0, x.adjusted())
    with localcontext(_working(work)):
        two_pi = 2 * _pi(work)
        return x - two_pi * (x / two_pi).to_integral_value()


def _sin(x, digits):
    x = _reduce(x, digits)
    with localcontext(_working(digits + 2)):
        square = x * x
        return _converged_series(
            x, lambda i, term: -term * square / ((2 * i + 2) * (2 * i + 3)))


def _cos(x, digits):
    x = _reduce(x, digits)
    with localcontext(_working(digits + 2)):
        square = x * x
        return _converged_series(
            Decimal(1),
            lambda i, term: -term * square / ((2 * i + 1) * (2 * i + 2)))


def _atan(x, digits):
    with localcontext(_working(digits + 2)):
        if x < 0:
            return -_atan(-x, digits)
        if x > 1:
            return _pi(digits + 2) / 2 - _atan(1 / x, digits)
        # atan(x) = 2 atan(x / (1 + sqrt(1 + x²))) until the series is quick
        halvings = 0
        while x > Decimal('0.1'):
            x = x / (1 + (1 + x * x).sqrt())
            halvings += 1
        square = x * x
        total = _converged_series(
            x, lambda i, term: -term * square * (2 * i + 1) / (2 * i + 3))
        return total * 2 ** halvings


def _ln(x, digits):
    if x <= 0:
        raise NumericDomainError('Logarithm of non-positive value {}'
                                 .format(x))
    return _working(digits).ln(x)


def _exp(x, digits):
    return _working(digits).exp(x)


def _to_radians(x, angle_mode, digits):
    if angle_mode is AngleMode.RADIANS:
        return x
    with localcontext(_working(digits)):
        return x * _pi(digits) / 180


def _from_radians(x, angle_mode, digits):
    if angle_mode is AngleMode.RADIANS:
        return x
    with localcontext(_working(digits)):
        return x * 180 / _pi(digits)


def _quarter_turns(degrees):
    '''
    Quarter turns (0-3) when degrees is a whole multiple of 90, else None.
    '''
    if EXACT.remainder(degrees, 90):
        return None
    return int(EXACT.divide_int(degrees, 90)) % 4


@wrap_user_errors('Cannot compute π at {0}')
def pi(precision):
    return _finish(_pi(_digits(precision)), precision)


@wrap_user_errors('Cannot compute e at {0}')
def e(precision):
    return _finish(_exp(Decimal(1), _digits(precision)), precision)


@wrap_user_errors('Cannot raise {0} to the power {1}')
def power(base, exponent, precision):
    '''
    base ** exponent.

    Integer exponents go through exact repeated squaring; any other exponent
    needs a non-negative base.
    '''
    if exponent.is_integer():
        return integer_power(base, int(exponent), precision)
    if base.is_zero():
        if exponent.negative:
            raise DivisionByZero('Zero to the negative power {}'
                                 .format(exponent))
        return ZERO
    if base.negative:
        raise NumericDomainError('Negative base {} with non-integer '
                                 'exponent {}'
                                 .format(base, exponent))
    digits = _digits(precision)
    return _finish(_working(digits).power(base.to_decimal(),
                                          exponent.to_decimal()),
                   precision)


@wrap_user_errors('Cannot take the square root of {0}')
def sqrt(value, precision):
    if value.negative:
        raise NumericDomainError('Square root of negative value {}'
                                 .format(value))
    return _finish(_working(_digits(precision)).sqrt(value.to_decimal()),
                   precision)


def _root(x, n, digits):
    '''
    Positive n-th root of positive x by Newton-Raphson, from above.
    '''
    with localcontext(_working(digits + 2)):
        # 10 ** ceil((adjusted + 1) / n) is never below the root
        y = Decimal(10) ** (-(-(x.adjusted() + 1) // n))
        for _ in range(MAX_ITERATIONS):
            improved = ((n - 1) * y + x / y ** (n - 1)) / n
            if improved >= y:
                break
            y = improved
        return y


@wrap_user_errors('Cannot take root {1} of {0}')
def nth_root(value, index, precision):
    '''
    index-th root of value; odd integer roots of negative values are real.
    '''
    if index.is_zero():
        raise InvalidArgument('Root index must not be zero')
    if not index.is_integer():
        return power(value, _reciprocal(index, precision), precision)
    n = int(index)
    if n < 0:
        root = nth_root(value, DecimalValue.from_int(-n), precision)
        return _finish(_working(_digits(precision)).divide(
            1, root.to_decimal()), precision)
    if value.is_zero() or n == 1:
        return value
    if value.negative and n % 2 == 0:
        raise NumericDomainError('Even root {} of negative value {}'
                                 .format(n, value))
    root = _root(abs(value).to_decimal(), n, _digits(precision))
    return _finish(root.copy_negate() if value.negative else root, precision)


def cbrt(value, precision):
    return nth_root(value, DecimalValue.from_int(3), precision)


def _reciprocal(value, precision):
    return DecimalValue.from_decimal(
        _working(_digits(precision)).divide(1, value.to_decimal()))


@wrap_user_errors('Cannot take the exponential of {0}')
def exp(value, precision):
    return _finish(_exp(value.to_decimal(), _digits(precision)), precision)


@wrap_user_errors('Cannot take the natural logarithm of {0}')
def ln(value, precision):
    return _finish(_ln(value.to_decimal(), _digits(precision)), precision)


@wrap_user_errors('Cannot take the common logarithm of {0}')
def log10(value, precision):
    if not value > ZERO:
        raise NumericDomainError('Logarithm of non-positive value {}'
                                 .format(value))
    return _finish(_working(_digits(precision)).log10(value.to_decimal()),
                   precision)


def log2(value, precision):
    return log_base(value, DecimalValue.from_int(2), precision)


@wrap_user_errors('Cannot take the logarithm of {0} to base {1}')
def log_base(value, base, precision):
    if not base > ZERO or base == ONE:
        raise NumericDomainError('Bad logarithm base {}'.format(base))
    digits = _digits(precision)
    with localcontext(_working(digits)):
        quotient = _ln(value.to_decimal(), digits) / \
            _ln(base.to_decimal(), digits)
    return _finish(quotient, precision)


def _trigonometric(value, angle_mode, table):
    '''
    Argument as a Decimal (folded into one turn in degree mode) and, in
    degree mode, the exact value of the function when the angle is a whole
    number of quarter turns.
    '''
    x = value.to_decimal()
    if angle_mode is AngleMode.DEGREES:
        x = EXACT.remainder(x, 360)
        quarter = _quarter_turns(x)
        if quarter is not None:
            return None, table[quarter]
    return x, None


def _periodic(series, x, angle_mode, digits):
    '''
    series (_sin or _cos) at angle x, keeping digits significant digits.

    Near a zero of the function, conversion, reduction and series all cancel
    leading digits; every digit lost is won back with one more working digit
    and a rerun, until a run loses no more than it was given.
    '''
    extra = 0
    for _ in range(MAX_ITERATIONS):
        work = digits + extra
        result = series(_to_radians(x, angle_mode, work), work)
        lost = _small_argument_guard(result)
        if lost <= extra:
            break
        extra = lost
    return result


@wrap_user_errors('Cannot take the sine of {0}')
def sin(value, precision, angle_mode):
    x, exact = _trigonometric(value, angle_mode, _QUARTER_SINES)
    if x is None:
        return DecimalValue.from_int(exact)
    return _finish(_periodic(_sin, x, angle_mode, _digits(precision)),
                   precision)


@wrap_user_errors('Cannot take the cosine of {0}')
def cos(value, precision, angle_mode):
    x, exact = _trigonometric(value, angle_mode, _QUARTER_COSINES)
    if x is None:
        return DecimalValue.from_int(exact)
    return _finish(_periodic(_cos, x, angle_mode, _digits(precision)),
                   precision)


@wrap_user_errors('Cannot take the tangent of {0}')
def tan(value, precision, angle_mode):
    return _quotient_of(sin, cos, value, precision, angle_mode, 'Tangent')


@wrap_user_errors('Cannot take the cotangent of {0}')
def cot(value, precision, angle_mode):
    return _quotient_of(cos, sin, value, precision, angle_mode, 'Cotangent')


def _quotient_of(numerator, denominator, value, precision, angle_mode, name):
    # Compute both at extra precision so the quotient keeps all digits
    guarded = PrecisionContext(_digits(precision), precision.rounding)
    bottom = denominator(value, guarded, angle_mode)
    if bottom.is_zero():
        raise NumericDomainError('{} undefined at {}'.format(name, value))
    top = numerator(value, guarded, angle_mode)
    with localcontext(_working(_digits(precision))):
        quotient = top.to_decimal() / bottom.to_decimal()
    return _finish(quotient, precision)


def _check_unit_interval(value, name):
    if abs(value) > ONE:
        raise NumericDomainError('{} argument {} outside [-1, 1]'
                                 .format(name, value))


def _asin(x, digits):
    if abs(x) == 1:
        with localcontext(_working(digits)):
            return _pi(digits) / 2 * x
    # 1 - x² exactly, so nothing cancels near ±1
    complement = EXACT.subtract(1, EXACT.multiply(x, x))
    with localcontext(_working(digits)):
        return _atan(x / complement.sqrt(), digits)


@wrap_user_errors('Cannot take the arcsine of {0}')
def asin(value, precision, angle_mode):
    _check_unit_interval(value, 'Arcsine')
    digits = _digits(precision)
    return _finish(_from_radians(_asin(value.to_decimal(), digits),
                                 angle_mode, digits), precision)


@wrap_user_errors('Cannot take the arccosine of {0}')
def acos(value, precision, angle_mode):
    _check_unit_interval(value, 'Arccosine')
    digits = _digits(precision)
    with localcontext(_working(digits)):
        radians = _pi(digits) / 2 - _asin(value.to_decimal(), digits)
    return _finish(_from_radians(radians, angle_mode, digits), precision)


@wrap_user_errors('Cannot take the arctangent of {0}')
def atan(value, precision, angle_mode):
    digits = _digits(precision)
    return _finish(_from_radians(_atan(value.to_decimal(), digits),
                                 angle_mode, digits), precision)


@wrap_user_errors('Cannot take the arccotangent of {0}')
def acot(value, precision, angle_mode):
    '''
    Arccotangent with range (0, π).
    '''
    digits = _digits(precision)
    with localcontext(_working(digits)):
        radians = _pi(digits) / 2 - _atan(value.to_decimal(), digits)
    return _finish(_from_radians(radians, angle_mode, digits), precision)


@wrap_user_errors('Cannot take the arctangent of {0} / {1}')
def atan2(y, x, precision, angle_mode):
    '''
    Angle of the point (x, y), in (-π, π].
    '''
    digits = _digits(precision)
    y, x = y.to_decimal(), x.to_decimal()
    with localcontext(_working(digits)):
        if x > 0:
            radians = _atan(y / x, digits)
        elif x < 0:
            half_turn = _pi(digits) if y >= 0 else -_pi(digits)
            radians = _atan(y / x, digits) + half_turn
        elif y:
            radians = _pi(digits) / 2 * (1 if y > 0 else -1)
        else:
            raise NumericDomainError('atan2 undefined at the origin')
    return _finish(_from_radians(radians, angle_mode, digits), precision)


def _sinh(x, digits):
    with localcontext(_working(digits + 2)):
        if abs(x) < 1:
            square = x * x
            return _converged_series(
                x, lambda i, term: term * square / ((2 * i + 2) * (2 * i + 3)))
        grown = _exp(x, digits + 2)
        return (grown - 1 / grown) / 2


def _cosh(x, digits):
    with localcontext(_working(digits + 2)):
        grown = _exp(x, digits + 2)
        return (grown + 1 / grown) / 2


@wrap_user_errors('Cannot take the hyperbolic sine of {0}')
def sinh(value, precision):
    return _finish(_sinh(value.to_decimal(), _digits(precision)), precision)


@wrap_user_errors('Cannot take the hyperbolic cosine of {0}')
def cosh(value, precision):
    return _finish(_cosh(value.to_decimal(), _digits(precision)), precision)


def _tanh(x, digits):
    '''
    tanh x from exp(-2|x|), which cannot overflow.

    Past |x| = 1.5 digits, exp(-2|x|) is below 10 ** -(digits + 2) and the
    result is ±1 at the working precision.
    '''
    with localcontext(_working(digits + 2)):
        if abs(x) < 1:
            return _sinh(x, digits) / _cosh(x, digits)
        if abs(x) > Decimal(digits) * Decimal('1.5'):
            return Decimal(1).copy_sign(x)
        shrunk = _exp(-2 * abs(x), digits + 2)
        return ((1 - shrunk) / (1 + shrunk)).copy_sign(x)


@wrap_user_errors('Cannot take the hyperbolic tangent of {0}')
def tanh(value, precision):
    return _finish(_tanh(value.to_decimal(), _digits(precision)), precision)


@wrap_user_errors('Cannot take the hyperbolic cotangent of {0}')
def coth(value, precision):
    if value.is_zero():
        raise NumericDomainError('Hyperbolic cotangent undefined at 0')
    digits = _digits(precision)
    with localcontext(_working(digits)):
        quotient = 1 / _tanh(value.to_decimal(), digits)
    return _finish(quotient, precision)


@wrap_user_errors('Cannot take the inverse hyperbolic sine of {0}')
def asinh(value, precision):
    x = abs(value).to_decimal()
    digits = _digits(precision, _small_argument_guard(x))
    with localcontext(_working(digits)):
        result = _ln(x + (x * x + 1).sqrt(), digits)
    return _finish(result.copy_negate() if value.negative else result,
                   precision)


@wrap_user_errors('Cannot take the inverse hyperbolic cosine of {0}')
def acosh(value, precision):
    if value < ONE:
        raise NumericDomainError('Inverse hyperbolic cosine of {} below 1'
                                 .format(value))
    x = value.to_decimal()
    digits = _digits(precision)
    with localcontext(_working(digits)):
        result = _ln(x + EXACT.subtract(EXACT.multiply(x, x), 1).sqrt(),
                     digits)
    return _finish(result, precision)


@wrap_user_errors('Cannot take the inverse hyperbolic tangent of {0}')
def atanh(value, precision):
    if abs(value) >= ONE:
        raise NumericDomainError('Inverse hyperbolic tangent of {} outside '
                                 '(-1, 1)'.format(value))
    x = value.to_decimal()
    digits = _digits(precision, _small_argument_guard(x))
    with localcontext(_working(digits)):
        result = _ln(EXACT.add(1, x) / EXACT.subtract(1, x), digits) / 2
    return _finish(result, precision)


@wrap_user_errors('Cannot take the inverse hyperbolic cotangent of {0}')
def acoth(value, precision):
    if abs(value) <= ONE:
        raise NumericDomainError('Inverse hyperbolic cotangent of {} inside '
                                 '[-1, 1]'.format(value))
    x = value.to_decimal()
    digits = _digits(precision)
    with localcontext(_working(digits)):
        result = _ln(EXACT.add(x, 1) / EXACT.subtract(x, 1), digits) / 2
    return _finish(result, precision)


def _gamma(x, digits):
    '''
    Γ(x) for non-integral x, by Spouge's approximation.
    '''
    if x < Decimal('0.5'):
        # Reflection: Γ(x) Γ(1 - x) = π / sin(πx)
        with localcontext(_working(digits + 2)):
            return _pi(digits + 2) / (_sin(_pi(digits + 2) * x, digits + 2) *
                                      _gamma(1 - x, digits + 2))
    # Relative error below (2π) ** -(a + 1/2): a ≈ 1.26 digits terms suffice
    a = int(digits * 126 // 100) + 2
    work = digits + a + GUARD_DIGITS
    with localcontext(_working(work)):
        z = x - 1
        total = (2 * _pi(work)).sqrt()
        for k in range(1, a):
            coefficient = (-1) ** (k - 1) * \
                Decimal(a - k) ** (k - Decimal('0.5')) * \
                _exp(Decimal(a - k), work) / _factorial(k - 1)
            total += coefficient / (z + k)
        shifted = z + a
        return shifted ** (z + Decimal('0.5')) * _exp(-shifted, work) * total


@wrap_user_errors('Cannot take the gamma function of {0}')
def gamma(value, precision):
    if value.is_integer():
        n = int(value)
        if n <= 0:
            raise NumericDomainError('Gamma has a pole at {}'.format(n))
        return DecimalValue.from_int(_factorial(n - 1))
    return _finish(_gamma(value.to_decimal(), _digits(precision)), precision)


@wrap_user_errors('Cannot take the beta function of {0} and {1}')
def beta(x, y, precision):
    '''
    B(x, y) = Γ(x) Γ(y) / Γ(x + y)
    '''
    guarded = PrecisionContext(_digits(precision), precision.rounding)
    total = DecimalValue.from_decimal(EXACT.add(x.to_decimal(),
                                                y.to_decimal()))
    with localcontext(_working(_digits(precision))):
        quotient = gamma(x, guarded).to_decimal() * \
            gamma(y, guarded).to_decimal() / \
            gamma(total, guarded).to_decimal()
    return _finish(quotient, precision)
