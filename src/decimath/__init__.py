'''
Arbitrary precision decimal expression engine.

Expressions are lexed into tokens, turned into postfix by shunting-yard and
run on a stack machine. Every number is an exact decimal of unbounded
length: addition, subtraction and multiplication never round, while division,
roots and transcendental functions round to the significant digits and
rounding rule of the evaluation context.

    >>> from decimath import evaluate
    >>> str(evaluate('3 + 4 * 2'))
    '11'

Angles are in degrees unless the context says otherwise, and numerals follow
one of a fixed set of formatting profiles (US by default).
'''

from .cli import CLI
from .context import (AngleMode, EvaluationContext, PrecisionContext,
                      RoundingRule)
from .engine import Engine, evaluate, tokenize, to_postfix
from .lexer import Lexer, Token, TokenKind
from .machine import Machine
from .parser import Parser
from .util import CalculationError
from .value import DecimalValue, FormattingProfile, formatting_profile


__all__ = 'Engine', 'evaluate', 'tokenize', 'to_postfix', \
    'DecimalValue', 'FormattingProfile', 'formatting_profile', \
    'PrecisionContext', 'RoundingRule', 'AngleMode', 'EvaluationContext', \
    'Machine', 'Parser', 'Lexer', 'Token', 'TokenKind', 'CalculationError', \
    'CLI'
