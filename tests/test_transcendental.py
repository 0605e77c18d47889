'''
Transcendental function tests
'''

from decimal import Decimal

from decimath import transcendental as t
from decimath.arithmetic import divide
from decimath.context import AngleMode, PrecisionContext, RoundingRule
from decimath.util import InvalidArgument, DivisionByZero, NumericDomainError
from decimath.value import DecimalValue, ZERO, ONE

from pytest import fixture, raises

from conftest import D, close

DEG = AngleMode.DEGREES
RAD = AngleMode.RADIANS

PI = '3.14159265358979323846264338327950288'
SQRT2 = '1.41421356237309504880168872420969807'
QUARTER_PI = '0.785398163397448309615660845819875721'


@fixture
def p(precision):
    return precision


def test_constants(p):
    assert str(t.pi(p)).startswith(PI[:30])
    assert str(t.e(p)).startswith('2.71828182845904523536028747')
    assert len(str(t.pi(PrecisionContext(100)))) == 101


def test_constant_rounding():
    assert str(t.pi(PrecisionContext(5))) == '3.1416'
    assert str(t.pi(PrecisionContext(5, RoundingRule.DOWN))) == '3.1415'


def test_roots(p):
    assert close(t.sqrt(D('2'), p), SQRT2)
    assert t.sqrt(D('16'), p) == D('4')
    assert t.cbrt(D('-27'), p) == D('-3')
    assert close(t.nth_root(D('32'), D('5'), p), '2')
    assert close(t.nth_root(D('4'), D('-2'), p), '0.5')
    assert close(t.nth_root(D('9'), D('0.5'), p), '81')
    with raises(NumericDomainError):
        t.sqrt(D('-1'), p)
    with raises(NumericDomainError):
        t.nth_root(D('-16'), D('4'), p)
    with raises(InvalidArgument):
        t.nth_root(D('8'), ZERO, p)


def test_power(p):
    assert t.power(D('2'), D('10'), p) == D('1024')
    assert t.power(D('2'), D('-1'), p) == D('0.5')
    assert close(t.power(D('2'), D('0.5'), p), SQRT2)
    assert t.power(ZERO, D('0.5'), p) == ZERO
    with raises(NumericDomainError):
        t.power(D('-8'), D('0.5'), p)
    with raises(DivisionByZero):
        t.power(ZERO, D('-0.5'), p)


def test_logarithms(p):
    assert t.ln(ONE, p) == ZERO
    assert close(t.ln(D('2'), p), '0.693147180559945309417232121458')
    assert t.log10(D('1000'), p) == D('3')
    assert close(t.log2(D('8'), p), '3')
    assert close(t.log_base(D('81'), D('3'), p), '4')
    assert close(t.exp(ONE, p), '2.71828182845904523536028747135')
    with raises(NumericDomainError):
        t.ln(ZERO, p)
    with raises(NumericDomainError):
        t.log10(D('-1'), p)
    with raises(NumericDomainError):
        t.log_base(D('8'), ONE, p)


def test_trigonometry_in_degrees(p):
    assert close(t.sin(D('30'), p, DEG), '0.5')
    assert close(t.cos(D('60'), p, DEG), '0.5')
    assert close(t.tan(D('45'), p, DEG), '1')
    assert close(t.cot(D('45'), p, DEG), '1')
    assert close(t.sin(D('-330'), p, DEG), '0.5')
    assert close(t.sin(D('45'), p, DEG),
                 '0.707106781186547524400844362105')


def test_quarter_turns_are_exact(p):
    assert t.sin(D('90'), p, DEG) == ONE
    assert t.sin(D('180'), p, DEG) == ZERO
    assert t.cos(D('180'), p, DEG) == D('-1')
    assert t.cos(D('-90'), p, DEG) == ZERO
    assert t.sin(D('3600270'), p, DEG) == D('-1')
    with raises(NumericDomainError):
        t.tan(D('90'), p, DEG)
    with raises(NumericDomainError):
        t.tan(D('-270'), p, DEG)
    with raises(NumericDomainError):
        t.cot(D('180'), p, DEG)


def test_trigonometry_in_radians(p):
    sixth = divide(t.pi(PrecisionContext(40)), D('6'), PrecisionContext(40))
    assert close(t.sin(sixth, p, RAD), '0.5')
    assert t.sin(ZERO, p, RAD) == ZERO
    sine = t.sin(D('1000'), p, RAD).to_decimal()
    cosine = t.cos(D('1000'), p, RAD).to_decimal()
    assert abs(sine * sine + cosine * cosine - 1) < Decimal('1e-25')


def test_results_near_zeros_keep_their_digits(p):
    cosine = t.cos(D('1.5707963267948966192313216916'), p, RAD)
    assert close(cosine, '3.97514420985846996875529104875E-29', digits=57)
    sine = t.sin(D('3.14159265358979323846'), p, RAD)
    assert close(sine, '2.64338327950288419716939937510582E-21', digits=49)
    degrees = t.sin(D('179.9999999999999'), p, DEG)
    assert close(degrees, '1.7453292519943295769236907684886E-15',
                 digits=43)
    assert len(cosine.to_decimal().as_tuple().digits) <= 30


def test_inverse_trigonometry(p):
    assert close(t.asin(ONE, p, DEG), '90')
    assert close(t.asin(D('0.5'), p, DEG), '30')
    assert close(t.acos(ZERO, p, DEG), '90')
    assert close(t.acos(D('-1'), p, DEG), '180')
    assert close(t.atan(ONE, p, DEG), '45')
    assert close(t.atan(D('-1'), p, RAD), '-' + QUARTER_PI)
    assert close(t.acot(ONE, p, DEG), '45')
    assert close(t.atan(ONE, p, RAD), QUARTER_PI)
    with raises(NumericDomainError):
        t.asin(D('1.5'), p, DEG)
    with raises(NumericDomainError):
        t.acos(D('-2'), p, DEG)


def test_atan2(p):
    assert close(t.atan2(ONE, ONE, p, DEG), '45')
    assert close(t.atan2(ONE, D('-1'), p, DEG), '135')
    assert close(t.atan2(D('-1'), D('-1'), p, DEG), '-135')
    assert close(t.atan2(D('-2'), ZERO, p, DEG), '-90')
    with raises(NumericDomainError):
        t.atan2(ZERO, ZERO, p, DEG)


def test_hyperbolic(p):
    assert t.sinh(ZERO, p) == ZERO
    assert t.cosh(ZERO, p) == ONE
    assert close(t.sinh(ONE, p), '1.17520119364380145688238185060')
    assert close(t.cosh(ONE, p), '1.54308063481524377847790562075')
    assert close(t.tanh(ONE, p), '0.761594155955764888119458282605')
    assert close(t.coth(ONE, p), '1.31303528549933130363616124693')
    assert close(t.asinh(t.sinh(D('-2'), p), p), '-2')
    assert close(t.acosh(t.cosh(D('2'), p), p), '2')
    assert close(t.atanh(D('0.5'), p), '0.549306144334054845697622618461')
    assert close(t.acoth(D('2'), p), '0.549306144334054845697622618461')


def test_hyperbolic_tangents_of_large_arguments(p):
    huge = D('100000000000000000000')
    assert t.tanh(huge, p) == ONE
    assert t.tanh(-huge, p) == D('-1')
    assert t.coth(huge, p) == ONE
    assert t.coth(-huge, p) == D('-1')
    ratio = t.sinh(D('-5'), p).to_decimal() / t.cosh(D('5'), p).to_decimal()
    assert close(t.tanh(D('-5'), p), str(ratio))
    assert t.tanh(D('60'), p) == ONE


def test_hyperbolic_domains(p):
    with raises(NumericDomainError):
        t.coth(ZERO, p)
    with raises(NumericDomainError):
        t.acosh(D('0.5'), p)
    with raises(NumericDomainError):
        t.atanh(ONE, p)
    with raises(NumericDomainError):
        t.acoth(D('-0.5'), p)


def test_gamma(p):
    assert t.gamma(D('5'), p) == D('24')
    assert t.gamma(ONE, p) == ONE
    assert close(t.gamma(D('0.5'), p), '1.77245385090551602729816748334')
    assert close(t.gamma(D('-0.5'), p), '-3.54490770181103205459633496668')
    assert close(t.gamma(D('2.5'), p), '1.32934038817913702047362561251')
    with raises(NumericDomainError):
        t.gamma(ZERO, p)
    with raises(NumericDomainError):
        t.gamma(D('-3'), p)


def test_beta(p):
    assert close(t.beta(D('2'), D('3'), p), '0.0833333333333333333333333333')
    assert close(t.beta(D('0.5'), D('0.5'), p), PI[:31])


def test_results_are_decimal_values(p):
    for result in (t.sin(D('1'), p, DEG), t.ln(D('3'), p),
                   t.gamma(D('1.5'), p)):
        assert isinstance(result, DecimalValue)
        assert len(result.to_decimal().as_tuple().digits) <= 30
