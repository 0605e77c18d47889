'''
Operators, functions and constants the expression language is made of.

Every element carries its symbol, precedence and arity, plus the operation it
stands for. The parser only ever looks at the metadata; the machine calls
apply().

REGISTRY maps every symbol (aliases included) to its element. It is built
once, at import, and is read-only.
'''

from dataclasses import dataclass
from functools import wraps
from itertools import islice
from types import MappingProxyType
from typing import Callable, FrozenSet

from . import arithmetic, series, transcendental
from .util import InvalidArgument, ProcessingError
from .value import DecimalValue

# Arity of functions taking any positive number of arguments
UNLIMITED = -1

ADDITIVE_PRECEDENCE = 2
MULTIPLICATIVE_PRECEDENCE = 3
POWER_PRECEDENCE = 4
POSTFIX_PRECEDENCE = 5
FUNCTION_PRECEDENCE = 6


@dataclass(frozen=True)
class Element:
    '''
    Base of every expression element.

    ``operation`` is called with the operands, leftmost first, and the
    evaluation context as the ``context`` keyword.
    '''
    symbol: str
    operation: Callable
    precedence: int = FUNCTION_PRECEDENCE
    arity: int = 1
    right_associative: bool = False
    # Positions of operands that are raw expression text, not numbers
    text_operands: FrozenSet[int] = frozenset()

    def apply(self, stack, context):
        '''
        Pop this element's operands off stack, push its result.
        '''
        operands = self._popstack(stack, self.arity)
        stack.append(self.operation(*operands, context=context))

    def _popstack(self, stack, n):
        '''
        Pop n operands, returned leftmost (deepest) first.

        Checks depth and operand types before touching the stack.
        '''
        if len(stack) < n:
            raise ProcessingError('{} needs {} operand(s), stack holds {}'
                                  .format(self.symbol, n, len(stack)),
                                  symbol=self.symbol,
                                  expected=n,
                                  actual=len(stack))
        operands = list(islice(stack, len(stack) - n, None))
        for position, operand in enumerate(operands):
            expected = str if position in self.text_operands else DecimalValue
            if not isinstance(operand, expected):
                raise InvalidArgument('{} expects {} as operand {}, got {!r}'
                                      .format(self.symbol,
                                              'an expression'
                                              if expected is str
                                              else 'a number',
                                              position + 1,
                                              operand))
        for _ in range(n):
            stack.pop()
        return operands


@dataclass(frozen=True)
class Constant(Element):
    arity: int = 0

    def value(self, context):
        return self.operation(context=context)


@dataclass(frozen=True)
class ZeroArgumentFunction(Element):
    arity: int = 0


@dataclass(frozen=True)
class PrefixUnaryOperator(Element):
    precedence: int = POWER_PRECEDENCE
    right_associative: bool = True


@dataclass(frozen=True)
class PostfixUnaryOperator(Element):
    precedence: int = POSTFIX_PRECEDENCE


@dataclass(frozen=True)
class BinaryOperator(Element):
    arity: int = 2


@dataclass(frozen=True)
class Function(Element):
    '''
    Named function of fixed or unlimited arity.

    Unlimited functions find their argument count on top of the stack, above
    the arguments themselves.
    '''

    def apply(self, stack, context):
        if self.arity != UNLIMITED:
            return super().apply(stack, context)
        count = self._popstack(stack, 1)[0]
        if not count.is_integer() or int(count) < 1:
            raise ProcessingError('{} got a bad argument count {}'
                                  .format(self.symbol, count),
                                  symbol=self.symbol)
        operands = self._popstack(stack, int(count))
        stack.append(self.operation(*operands, context=context))


OPERATORS = (PrefixUnaryOperator, PostfixUnaryOperator, BinaryOperator)


def _exact(f):
    '''
    Adapt an operation that never needs the context.
    '''
    @wraps(f)
    def wrapped(*operands, context):
        return f(*operands)
    return wrapped


def _precise(f):
    '''
    Adapt an operation that rounds to the context's precision.
    '''
    @wraps(f)
    def wrapped(*operands, context):
        return f(*operands, context.precision)
    return wrapped


def _angular(f):
    '''
    Adapt a trigonometric operation, which also needs the angle mode.
    '''
    @wraps(f)
    def wrapped(*operands, context):
        return f(*operands, context.precision, context.angle_mode)
    return wrapped


def _collecting(f):
    '''
    Adapt a statistic over a list of values.
    '''
    @wraps(f)
    def wrapped(*operands, context):
        return f(list(operands), context.precision)
    return wrapped


def _named(symbols, operation, variant=Function, **kwargs):
    '''
    One element per whitespace-separated alias.
    '''
    return [variant(symbol, operation, **kwargs)
            for symbol
            in symbols.split()]


_ELEMENTS = [
    # Constants, resolved by the lexer
    *_named('pi π', _precise(transcendental.pi), Constant),
    *_named('e', _precise(transcendental.e), Constant),

    # Arithmetic
    *_named('+', _exact(arithmetic.add), BinaryOperator,
            precedence=ADDITIVE_PRECEDENCE),
    *_named('-', _exact(arithmetic.subtract), BinaryOperator,
            precedence=ADDITIVE_PRECEDENCE),
    *_named('* ×', _exact(arithmetic.multiply), BinaryOperator,
            precedence=MULTIPLICATIVE_PRECEDENCE),
    *_named('/ ÷', _precise(arithmetic.divide), BinaryOperator,
            precedence=MULTIPLICATIVE_PRECEDENCE),
    *_named('%', _exact(arithmetic.modulo), BinaryOperator,
            precedence=MULTIPLICATIVE_PRECEDENCE),
    *_named('^', _precise(transcendental.power), BinaryOperator,
            precedence=POWER_PRECEDENCE,
            right_associative=True),
    *_named('neg', _exact(arithmetic.negate), PrefixUnaryOperator),
    *_named('!', _exact(arithmetic.factorial), PostfixUnaryOperator),

    # Combinatorics
    *_named('nPr', _exact(arithmetic.permutation), BinaryOperator,
            precedence=FUNCTION_PRECEDENCE),
    *_named('nCr', _exact(arithmetic.combination), BinaryOperator,
            precedence=FUNCTION_PRECEDENCE),
    *_named('perm', _exact(arithmetic.permutation), arity=2),
    *_named('comb', _exact(arithmetic.combination), arity=2),

    # Roots and powers
    *_named('sqrt √', _precise(transcendental.sqrt)),
    *_named('cbrt ³√', _precise(transcendental.cbrt)),
    *_named('rootn', _precise(transcendental.nth_root), arity=2),
    *_named('exp', _precise(transcendental.exp)),

    # Logarithms
    *_named('ln', _precise(transcendental.ln)),
    *_named('log log10', _precise(transcendental.log10)),
    *_named('log2', _precise(transcendental.log2)),
    *_named('logbase', _precise(transcendental.log_base), arity=2),

    # Trigonometry
    *_named('sin', _angular(transcendental.sin)),
    *_named('cos', _angular(transcendental.cos)),
    *_named('tan', _angular(transcendental.tan)),
    *_named('cot', _angular(transcendental.cot)),
    *_named('asin sin⁻¹', _angular(transcendental.asin)),
    *_named('acos cos⁻¹', _angular(transcendental.acos)),
    *_named('atan tan⁻¹', _angular(transcendental.atan)),
    *_named('acot cot⁻¹', _angular(transcendental.acot)),
    *_named('atan2 tan2⁻¹', _angular(transcendental.atan2), arity=2),

    # Hyperbolic
    *_named('sinh', _precise(transcendental.sinh)),
    *_named('cosh', _precise(transcendental.cosh)),
    *_named('tanh', _precise(transcendental.tanh)),
    *_named('coth', _precise(transcendental.coth)),
    *_named('asinh sinh⁻¹', _precise(transcendental.asinh)),
    *_named('acosh cosh⁻¹', _precise(transcendental.acosh)),
    *_named('atanh tanh⁻¹', _precise(transcendental.atanh)),
    *_named('acoth coth⁻¹', _precise(transcendental.acoth)),

    # Special functions
    *_named('gamma Γ', _precise(transcendental.gamma)),
    *_named('beta B', _precise(transcendental.beta), arity=2),

    # Rounding and number theory
    *_named('abs', _exact(arithmetic.absolute)),
    *_named('floor', _exact(arithmetic.floor)),
    *_named('ceil', _exact(arithmetic.ceil)),
    *_named('gcd GCD', _exact(arithmetic.gcd), arity=2),
    *_named('lcm LCM', _exact(arithmetic.lcm), arity=2),

    # Randomness
    *_named('RandInt', _exact(arithmetic.random_integer_in_range), arity=2),
    *_named('rand', _precise(arithmetic.random_fraction),
            ZeroArgumentFunction),

    # Series over k
    *_named('sum ∑', series.summation, arity=3,
            text_operands=frozenset({2})),
    *_named('prod ∏', series.product, arity=3,
            text_operands=frozenset({2})),

    # Statistics
    *_named('min', _exact(arithmetic.minimum), arity=UNLIMITED),
    *_named('max', _exact(arithmetic.maximum), arity=UNLIMITED),
    *_named('avg', _collecting(arithmetic.average), arity=UNLIMITED),
    *_named('median', _collecting(arithmetic.median), arity=UNLIMITED),
]

REGISTRY = MappingProxyType({element.symbol: element
                             for element
                             in _ELEMENTS})


def lookup(symbol):
    '''
    Element for symbol, or ProcessingError if there is none.
    '''
    try:
        return REGISTRY[symbol]
    except KeyError:
        raise ProcessingError('Unknown symbol {!r}'.format(symbol),
                              symbol=symbol) from None


def symbols():
    '''
    All registered symbols, longest first.
    '''
    return sorted(REGISTRY, key=lambda symbol: (-len(symbol), symbol))
