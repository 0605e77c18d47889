'''
Everything an evaluation needs besides the expression itself.
'''

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping
import decimal

from .util import InvalidArgument
from .value import DecimalValue, FormattingProfile, DEFAULT_PROFILE


class RoundingRule(Enum):
    UP = 'up'
    DOWN = 'down'
    CEILING = 'ceiling'
    FLOOR = 'floor'
    HALF_UP = 'half_up'
    HALF_DOWN = 'half_down'
    HALF_EVEN = 'half_even'


# Rounding rule to decimal module translation
ROUNDINGS = {
    RoundingRule.UP: decimal.ROUND_UP,
    RoundingRule.DOWN: decimal.ROUND_DOWN,
    RoundingRule.CEILING: decimal.ROUND_CEILING,
    RoundingRule.FLOOR: decimal.ROUND_FLOOR,
    RoundingRule.HALF_UP: decimal.ROUND_HALF_UP,
    RoundingRule.HALF_DOWN: decimal.ROUND_HALF_DOWN,
    RoundingRule.HALF_EVEN: decimal.ROUND_HALF_EVEN,
}


class AngleMode(Enum):
    DEGREES = 'deg'
    RADIANS = 'rad'


@dataclass(frozen=True)
class PrecisionContext:
    '''
    Significant digits and rounding for results that cannot be exact.
    '''
    DEFAULT_SIGNIFICANT_DIGITS = 50
    DEFAULT_ROUNDING = RoundingRule.HALF_UP

    significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS
    rounding: RoundingRule = DEFAULT_ROUNDING

    def __post_init__(self):
        if not isinstance(self.significant_digits, int) or \
           self.significant_digits < 1:
            raise InvalidArgument('Need at least one significant digit, got {}'
                                  .format(self.significant_digits))

    def decimal_context(self):
        '''
        A decimal.Context rounding to this precision with this rule.
        '''
        return decimal.Context(
            prec=self.significant_digits,
            rounding=ROUNDINGS[self.rounding],
            Emax=decimal.MAX_EMAX,
            Emin=decimal.MIN_EMIN,
            traps=[decimal.InvalidOperation,
                   decimal.DivisionByZero,
                   decimal.Overflow])

    def round(self, number):
        '''
        Round a decimal.Decimal to this precision.
        '''
        return self.decimal_context().plus(number)


@dataclass(frozen=True)
class EvaluationContext:
    '''
    Precision, angle mode, formatting profile and variable bindings.

    Built once per engine and passed by reference into every stage.
    '''
    DEFAULT_ANGLE_MODE = AngleMode.DEGREES

    precision: PrecisionContext = field(default_factory=PrecisionContext)
    angle_mode: AngleMode = DEFAULT_ANGLE_MODE
    profile: FormattingProfile = DEFAULT_PROFILE
    variables: Mapping[str, DecimalValue] = field(default_factory=dict)

    def __post_init__(self):
        variables = {name: self._binding(name, value)
                     for name, value
                     in self.variables.items()}
        object.__setattr__(self, 'variables', MappingProxyType(variables))

    def __hash__(self):
        return hash((self.precision, self.angle_mode, self.profile,
                     frozenset(self.variables.items())))

    def _binding(self, name, value):
        if not name.isalpha():
            raise InvalidArgument('Bad variable name {!r}'.format(name))
        if isinstance(value, DecimalValue):
            return value
        if isinstance(value, int):
            return DecimalValue.from_int(value)
        if isinstance(value, decimal.Decimal):
            return DecimalValue.from_decimal(value)
        # Plain decimal text only; E would be Euler's number
        if 'e' in value.lower():
            raise InvalidArgument('Binding {}={!r} must be plain decimal text'
                                  .format(name, value))
        return DecimalValue.parse(value, self.profile)

    def bind(self, **variables):
        '''
        Copy of this context with extra (or replaced) bindings.
        '''
        merged = dict(self.variables)
        merged.update(variables)
        return replace(self, variables=merged)
