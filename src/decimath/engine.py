'''
Lexer, parser and machine put together.
'''

from decimal import Decimal
import logging

from .context import EvaluationContext
from .lexer import Lexer, Token, TokenKind
from .machine import Machine
from .parser import Parser
from .util import CalculationError, UndefinedVariable
from .value import DecimalValue, ZERO

logger = logging.getLogger(__name__)


class Engine:
    '''
    Expression evaluator for one evaluation context.

    Holds no state besides the context and its (stateless) stages, so one
    engine can serve any number of evaluations, from any number of threads.
    '''

    def __init__(self, context=None):
        self.context = context or EvaluationContext()
        self.lexer = Lexer(self.context)
        self.parser = Parser()
        self.machine = Machine(self.context)

    def tokenize(self, expression):
        return self.lexer.tokenize(expression)

    def to_postfix(self, expression):
        return self.parser.to_postfix(self.tokenize(expression))

    def evaluate(self, expression, bindings=None):
        '''
        Value of expression.

        :param bindings: Variable bindings for this call only, on top of the
                         context's.
        '''
        logger.debug('Evaluating %r in %s', expression, self.context)
        if not expression.strip():
            return ZERO
        return self.run(self.to_postfix(expression), bindings)

    def run(self, postfix, bindings=None):
        '''
        Evaluate an already parsed expression.
        '''
        context = self.context.bind(**bindings) \
            if bindings else self.context
        return self.machine.evaluate(self._substitute(postfix, context),
                                     context)

    def _substitute(self, postfix, context):
        '''
        Replace variables by the numbers bound to them.
        '''
        substituted = []
        for token in postfix:
            if token.kind is TokenKind.VARIABLE:
                try:
                    value = context.variables[token.text]
                except KeyError:
                    raise UndefinedVariable(token.text) from None
                token = Token(TokenKind.NUMBER, str(value))
            substituted.append(token)
        return substituted

    def sample(self, expression, variable, points):
        '''
        Yield expression as a float at each point, bound to variable.

        Points where evaluation fails yield None instead.
        '''
        postfix = self.to_postfix(expression)
        for point in points:
            try:
                if isinstance(point, float):
                    point = DecimalValue.from_decimal(Decimal(repr(point)))
                yield float(self.run(postfix, {variable: point}))
            except CalculationError as e:
                logger.debug('No value at %s=%s: %s', variable, point, e)
                yield None


def evaluate(expression, context=None, **bindings):
    '''
    Evaluate expression in context, with extra variable bindings.
    '''
    return Engine(context).evaluate(expression, bindings)


def tokenize(expression, context=None):
    return Engine(context).tokenize(expression)


def to_postfix(expression, context=None):
    return Engine(context).to_postfix(expression)
