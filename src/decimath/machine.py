'''
Stack machine running postfix token sequences.
'''

from collections import deque
import logging

from .context import EvaluationContext
from .elements import lookup
from .lexer import TokenKind
from .util import MalformedExpression, UndefinedVariable
from .value import DecimalValue, PLAIN

logger = logging.getLogger(__name__)


class Machine:
    '''
    Arithmetic stack machine.

    One left-to-right pass, one value stack per run: numbers (and series
    bodies) are pushed, everything else is looked up in the registry and
    applied to the stack. Nothing survives a run, so the same postfix under
    the same context always gives the same value.
    '''

    def __init__(self, context=None):
        self.context = context or EvaluationContext()

    def evaluate(self, postfix, context=None):
        '''
        Run postfix and return the single value it leaves.

        :param context: Overrides the machine's context for this run only.
        '''
        context = context or self.context
        stack = deque()
        for token in postfix:
            self._feed(token, stack, context)
        if len(stack) != 1:
            raise MalformedExpression('Expected one value after evaluation, '
                                      'got {}'.format(len(stack)))
        result = stack.pop()
        if not isinstance(result, DecimalValue):
            raise MalformedExpression('Expression {!r} left in place of a '
                                      'value'.format(result))
        logger.debug('Result: %s', result)
        return result

    def _feed(self, token, stack, context):
        '''
        Push or apply a single token.
        '''
        if token.kind is TokenKind.NUMBER:
            stack.append(DecimalValue.parse(token.text, PLAIN))
        elif token.kind is TokenKind.STRING:
            stack.append(token.text)
        elif token.kind is TokenKind.VARIABLE:
            raise UndefinedVariable(token.text)
        elif token.kind in (TokenKind.OPERATOR, TokenKind.FUNCTION):
            lookup(token.text).apply(stack, context)
        else:
            raise MalformedExpression('Unexpected {} in postfix'
                                      .format(token.text))
