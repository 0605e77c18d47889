'''
Exact decimal values and the formatting profiles used to read and write them.
'''

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from functools import reduce
from typing import Optional
import operator

import regex

from .util import InvalidArgument


class GroupingRule(Enum):
    NONE = 'none'
    # 1,234,567
    THOUSANDS = 'thousands'
    # 12,34,567
    INDIAN = 'indian'


# Default regex flags for numerals
FLAGS = reduce(operator.__or__,
               {regex.ASCII,
                regex.VERSION1,
                regex.VERBOSE},
               0)


@dataclass(frozen=True)
class FormattingProfile:
    '''
    Decimal and grouping separator convention.

    Only ever consulted when turning text into values and values into text,
    never by arithmetic.
    '''
    name: str
    decimal_separator: str = '.'
    grouping_separator: Optional[str] = None
    grouping_rule: GroupingRule = GroupingRule.NONE

    def __post_init__(self):
        if len(self.decimal_separator) != 1 or \
           self.decimal_separator.isdigit():
            raise InvalidArgument('Bad decimal separator {!r}'
                                  .format(self.decimal_separator))
        if self.grouping_separator == self.decimal_separator:
            raise InvalidArgument('Grouping and decimal separators collide')
        if (self.grouping_separator is None) != \
           (self.grouping_rule is GroupingRule.NONE):
            raise InvalidArgument('Grouping separator without grouping rule, '
                                  'or the other way round')

    @property
    def integral_pattern(self):
        '''
        Regular expression for the integer part of a numeral.
        '''
        if self.grouping_rule is GroupingRule.NONE:
            return r'\d+'
        group = regex.escape(self.grouping_separator)
        if self.grouping_rule is GroupingRule.THOUSANDS:
            grouped = r'\d{{1,3}}(?:{0}\d{{3}})+'.format(group)
        else:
            grouped = r'\d{{1,2}}(?:{0}\d{{2}})*{0}\d{{3}}'.format(group)
        # Grouped first, and never leave a digit dangling after the last group
        return r'(?:{0}(?!\d)|\d+)'.format(grouped)

    @property
    def numeral_pattern(self):
        '''
        Regular expression for an unsigned numeral in this profile.
        '''
        return r'''
                (?:
                    # 1, 1,234, 1,234.5, 1. (notice trailing separator)
                    {INTEGRAL}
                    (?:
                        {DECIMAL}
                        \d*
                    )?
                )|(?:
                    # .5
                    {DECIMAL}
                    \d+
                )
                '''.format(INTEGRAL=self.integral_pattern,
                           DECIMAL=regex.escape(self.decimal_separator))

    def normalize(self, numeral):
        '''
        Strip grouping and turn the decimal separator into a dot.
        '''
        if self.grouping_separator is not None:
            numeral = numeral.replace(self.grouping_separator, '')
        return numeral.replace(self.decimal_separator, '.')

    def group(self, digits):
        '''
        Insert grouping separators into a string of integer digits.
        '''
        if self.grouping_rule is GroupingRule.NONE or len(digits) <= 3:
            return digits
        head, tail = digits[:-3], digits[-3:]
        size = 3 if self.grouping_rule is GroupingRule.THOUSANDS else 2
        groups = []
        while head:
            groups.append(head[-size:])
            head = head[:-size]
        return self.grouping_separator.join(reversed(groups)) + \
            self.grouping_separator + tail


US = FormattingProfile('us', '.', ',', GroupingRule.THOUSANDS)
GERMAN = FormattingProfile('german', ',', '.', GroupingRule.THOUSANDS)
SWISS = FormattingProfile('swiss', '.', "'", GroupingRule.THOUSANDS)
INDIAN = FormattingProfile('indian', '.', ',', GroupingRule.INDIAN)
PLAIN = FormattingProfile('plain', '.')

PROFILES = {profile.name: profile
            for profile
            in (US, GERMAN, SWISS, INDIAN, PLAIN)}
DEFAULT_PROFILE = US


def formatting_profile(name):
    '''
    Look up one of the supported formatting profiles by name.
    '''
    try:
        return PROFILES[name.lower()]
    except KeyError:
        raise InvalidArgument('No such formatting profile {!r}, expected one '
                              'of {}'.format(name,
                                             ', '.join(sorted(PROFILES))))


_SCIENTIFIC = regex.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)[eE][+-]?\d+')


@dataclass(frozen=True)
class DecimalValue:
    '''
    Immutable, exact decimal number of unbounded length.

    Sign plus integer and fraction digit strings. Always canonical: no leading
    zeros in the integer part, no trailing zeros in the fraction, and zero is
    never negative. Two values are equal exactly when they are numerically
    equal.
    '''
    negative: bool = False
    integer_digits: str = '0'
    fraction_digits: str = '0'
    has_fraction: bool = False

    def __post_init__(self):
        for digits in self.integer_digits, self.fraction_digits:
            if not digits or not digits.isdigit() or not digits.isascii():
                raise InvalidArgument('Not a digit string: {!r}'
                                      .format(digits))
        integer_digits = self.integer_digits.lstrip('0') or '0'
        fraction_digits = self.fraction_digits.rstrip('0') \
            if self.has_fraction else ''
        has_fraction = bool(fraction_digits)
        negative = self.negative and \
            (integer_digits != '0' or has_fraction)
        # Frozen, so go around __setattr__
        object.__setattr__(self, 'integer_digits', integer_digits)
        object.__setattr__(self, 'fraction_digits', fraction_digits or '0')
        object.__setattr__(self, 'has_fraction', has_fraction)
        object.__setattr__(self, 'negative', negative)

    @classmethod
    def parse(cls, text, profile=DEFAULT_PROFILE):
        '''
        Parse a signed numeral written in the given formatting profile.

        Plain scientific notation (1.5e3) is accepted too.
        '''
        stripped = text.strip()
        if _SCIENTIFIC.fullmatch(stripped):
            return cls.from_decimal(Decimal(stripped))
        match = regex.fullmatch(r'(?<sign>[+-]?)(?<numeral>'
                                + profile.numeral_pattern + r')',
                                stripped, flags=FLAGS)
        if match is None:
            raise InvalidArgument('Malformed literal {!r}'.format(text))
        integer, _, fraction = profile.normalize(match['numeral']) \
            .partition('.')
        return cls(negative=match['sign'] == '-',
                   integer_digits=integer or '0',
                   fraction_digits=fraction or '0',
                   has_fraction=bool(fraction))

    @classmethod
    def from_decimal(cls, number):
        '''
        Exact conversion from decimal.Decimal.
        '''
        if not number.is_finite():
            raise InvalidArgument('Not a finite number: {}'.format(number))
        plain = format(number, 'f')
        negative = plain.startswith('-')
        integer, _, fraction = plain.lstrip('-').partition('.')
        return cls(negative=negative,
                   integer_digits=integer or '0',
                   fraction_digits=fraction or '0',
                   has_fraction=bool(fraction))

    @classmethod
    def from_int(cls, number):
        return cls(negative=number < 0, integer_digits=str(abs(number)))

    def to_decimal(self):
        '''
        Exact conversion to decimal.Decimal.
        '''
        return Decimal(str(self))

    def is_zero(self):
        return self.integer_digits == '0' and not self.has_fraction

    def is_integer(self):
        return not self.has_fraction

    def format(self, profile=DEFAULT_PROFILE, grouped=True):
        '''
        Render in the given formatting profile.
        '''
        integer = profile.group(self.integer_digits) \
            if grouped else self.integer_digits
        text = '-' + integer if self.negative else integer
        if self.has_fraction:
            text += profile.decimal_separator + self.fraction_digits
        return text

    def __str__(self):
        return self.format(PLAIN)

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, str(self))

    def __int__(self):
        if self.has_fraction:
            raise InvalidArgument('Not an integer: {}'.format(self))
        return -int(self.integer_digits) \
            if self.negative else int(self.integer_digits)

    def __float__(self):
        return float(str(self))

    def __neg__(self):
        return type(self)(not self.negative, self.integer_digits,
                          self.fraction_digits, self.has_fraction)

    def __abs__(self):
        return type(self)(False, self.integer_digits,
                          self.fraction_digits, self.has_fraction)

    # Exact operations only; anything that may round needs a context.
    def __add__(self, other):
        from .arithmetic import add
        return add(self, other)

    def __sub__(self, other):
        from .arithmetic import subtract
        return subtract(self, other)

    def __mul__(self, other):
        from .arithmetic import multiply
        return multiply(self, other)

    def __lt__(self, other):
        from .arithmetic import compare
        return compare(self, other) < 0

    def __le__(self, other):
        from .arithmetic import compare
        return compare(self, other) <= 0

    def __gt__(self, other):
        from .arithmetic import compare
        return compare(self, other) > 0

    def __ge__(self, other):
        from .arithmetic import compare
        return compare(self, other) >= 0


ZERO = DecimalValue()
ONE = DecimalValue.from_int(1)
