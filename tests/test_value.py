'''
Decimal value and formatting profile tests
'''

from decimal import Decimal, ROUND_FLOOR

from decimath.context import EvaluationContext, PrecisionContext, RoundingRule
from decimath.util import InvalidArgument
from decimath.value import (DecimalValue, FormattingProfile, GroupingRule,
                            US, GERMAN, SWISS, INDIAN, PLAIN, ZERO, ONE,
                            formatting_profile)

from pytest import raises


def test_canonical_form():
    value = DecimalValue(False, '0012', '500', True)
    assert value.integer_digits == '12'
    assert value.fraction_digits == '5'
    assert value.has_fraction
    assert value == DecimalValue.parse('12.5')


def test_zero_is_never_negative():
    assert DecimalValue.parse('-0.000') == ZERO
    assert not DecimalValue.parse('-0').negative
    assert not (-ZERO).negative


def test_whole_fraction_of_zeros_is_dropped():
    value = DecimalValue.parse('7.000')
    assert not value.has_fraction
    assert value.fraction_digits == '0'
    assert value.is_integer()


def test_bad_digits():
    with raises(InvalidArgument):
        DecimalValue(False, '12a')
    with raises(InvalidArgument):
        DecimalValue(False, '')


def test_parse_grouped():
    assert DecimalValue.parse('1,234,567.25', US) == \
        DecimalValue(False, '1234567', '25', True)
    assert DecimalValue.parse('1.234.567,25', GERMAN) == \
        DecimalValue.parse('1234567.25')
    assert DecimalValue.parse("1'234", SWISS) == DecimalValue.from_int(1234)
    assert DecimalValue.parse('12,34,567', INDIAN) == \
        DecimalValue.from_int(1234567)


def test_parse_ungrouped_in_grouping_profile():
    assert DecimalValue.parse('1234567', US) == DecimalValue.from_int(1234567)


def test_parse_badly_grouped():
    with raises(InvalidArgument, match='Malformed literal'):
        DecimalValue.parse('1,23', US)
    with raises(InvalidArgument):
        DecimalValue.parse('1,234,56', US)
    with raises(InvalidArgument):
        DecimalValue.parse('1,234', PLAIN)


def test_parse_edges():
    assert DecimalValue.parse('.5') == DecimalValue.parse('0.5')
    assert DecimalValue.parse('5.') == DecimalValue.from_int(5)
    assert DecimalValue.parse('+5') == DecimalValue.from_int(5)
    assert DecimalValue.parse('1.5e3') == DecimalValue.from_int(1500)
    with raises(InvalidArgument):
        DecimalValue.parse('')
    with raises(InvalidArgument):
        DecimalValue.parse('.')


def test_format():
    value = DecimalValue.parse('-1234567.891')
    assert value.format(US) == '-1,234,567.891'
    assert value.format(GERMAN) == '-1.234.567,891'
    assert value.format(SWISS) == "-1'234'567.891"
    assert value.format(INDIAN) == '-12,34,567.891'
    assert value.format(US, grouped=False) == '-1234567.891'
    assert str(value) == '-1234567.891'
    assert DecimalValue.from_int(123).format(US) == '123'


def test_round_trip_through_text():
    for text in '0', '-0.5', '1000', '98765432109876543210.0123456789':
        value = DecimalValue.parse(text)
        for profile in US, GERMAN, SWISS, INDIAN, PLAIN:
            assert DecimalValue.parse(value.format(profile), profile) == value


def test_conversions():
    value = DecimalValue.parse('-2.5')
    assert value.to_decimal() == Decimal('-2.5')
    assert float(value) == -2.5
    assert DecimalValue.from_decimal(Decimal('1.2300E+3')) == \
        DecimalValue.from_int(1230)
    assert int(DecimalValue.parse('-42')) == -42
    with raises(InvalidArgument):
        int(value)
    with raises(InvalidArgument):
        DecimalValue.from_decimal(Decimal('NaN'))


def test_ordering():
    assert DecimalValue.parse('-2') < ZERO < ONE
    assert DecimalValue.parse('1.05') > DecimalValue.parse('1.0499')
    assert DecimalValue.parse('-1.05') < DecimalValue.parse('-1.0499')
    assert DecimalValue.parse('10') >= DecimalValue.parse('9.999')
    assert ONE <= ONE


def test_exact_operators():
    assert DecimalValue.parse('0.1') + DecimalValue.parse('0.2') == \
        DecimalValue.parse('0.3')
    assert ONE - ONE == ZERO
    assert DecimalValue.parse('1.5') * DecimalValue.parse('-2') == \
        DecimalValue.from_int(-3)
    assert abs(DecimalValue.parse('-3')) == DecimalValue.from_int(3)


def test_formatting_profiles():
    assert formatting_profile('German') is GERMAN
    with raises(InvalidArgument, match='No such formatting profile'):
        formatting_profile('klingon')
    with raises(InvalidArgument):
        FormattingProfile('bad', '.', '.', GroupingRule.THOUSANDS)
    with raises(InvalidArgument):
        FormattingProfile('bad', '.', ',')


def test_precision_context():
    assert PrecisionContext().significant_digits == 50
    with raises(InvalidArgument):
        PrecisionContext(0)
    assert PrecisionContext(3).round(Decimal('2.0005')) == Decimal('2.00')
    floored = PrecisionContext(4, RoundingRule.FLOOR).decimal_context()
    assert floored.prec == 4
    assert floored.rounding == ROUND_FLOOR


def test_context_bindings():
    context = EvaluationContext(variables={'x': '1,500.5', 'n': 3})
    assert context.variables['x'] == DecimalValue.parse('1500.5')
    assert context.variables['n'] == DecimalValue.from_int(3)
    bound = context.bind(y=Decimal('0.25'))
    assert 'y' in bound.variables
    assert 'y' not in context.variables
    with raises(InvalidArgument):
        EvaluationContext(variables={'x': '1e3'})
    with raises(InvalidArgument):
        EvaluationContext(variables={'x1': '1'})
