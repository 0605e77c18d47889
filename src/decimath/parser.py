'''
Shunting-yard conversion from infix tokens to postfix.
'''

import logging

from .elements import (UNLIMITED, PostfixUnaryOperator, PrefixUnaryOperator,
                       lookup)
from .lexer import Token, TokenKind
from .util import MalformedExpression, UnbalancedParentheses

logger = logging.getLogger(__name__)

_OPERANDS = {TokenKind.NUMBER, TokenKind.VARIABLE, TokenKind.STRING}


class _Group:
    '''
    Bookkeeping for one open parenthesis.
    '''

    def __init__(self, function=None):
        # Function token owning the parenthesis, if any
        self.function = function
        self.separators = 0
        # Whether the argument since the last separator has anything in it
        self.filled = False

    def arguments(self):
        '''
        Number of arguments seen; MalformedExpression on an empty one.
        '''
        if not self.filled:
            if self.separators:
                raise MalformedExpression('Empty argument')
            return 0
        return self.separators + 1


class Parser:
    '''
    Infix to postfix, by Dijkstra's shunting-yard.

    Holds no state between calls.
    '''

    def to_postfix(self, tokens):
        '''
        Return tokens in postfix order.

        Parentheses and separators are consumed. Unlimited-arity functions are
        preceded by a hidden NUMBER holding their argument count. Parentheses
        still open at the end are closed implicitly.
        '''
        output = []
        operators = []
        groups = []
        for index, token in enumerate(tokens):
            if groups:
                groups[-1].filled = groups[-1].filled or \
                    token.kind not in (TokenKind.SEMICOLON,
                                       TokenKind.RIGHT_PAREN)
            if token.kind in _OPERANDS:
                output.append(token)
            elif token.kind is TokenKind.FUNCTION:
                self._function(token, tokens[index + 1:index + 2])
                operators.append(token)
            elif token.kind is TokenKind.OPERATOR:
                self._operator(token, output, operators)
            elif token.kind is TokenKind.LEFT_PAREN:
                previous = tokens[index - 1] if index else None
                owner = previous \
                    if previous is not None and \
                    previous.kind is TokenKind.FUNCTION else None
                operators.append(token)
                groups.append(_Group(owner))
            elif token.kind is TokenKind.SEMICOLON:
                if not groups:
                    raise UnbalancedParentheses('Separator outside of any '
                                                'parentheses')
                if not groups[-1].filled:
                    raise MalformedExpression('Empty argument')
                self._unwind(output, operators)
                groups[-1].separators += 1
                groups[-1].filled = False
            elif token.kind is TokenKind.RIGHT_PAREN:
                if not groups:
                    raise UnbalancedParentheses('Unmatched )')
                self._close(groups.pop(), output, operators)
            else:
                raise MalformedExpression('Unexpected token {!r}'
                                          .format(token.text))
        while groups:
            self._close(groups.pop(), output, operators)
        while operators:
            output.append(operators.pop())
        logger.debug('Postfix: %s', ' '.join(map(str, output)))
        return output

    def _function(self, token, following):
        element = lookup(token.text)
        if element.arity == 1:
            return
        if not following or following[0].kind is not TokenKind.LEFT_PAREN:
            raise MalformedExpression('{} needs a parenthesized argument list'
                                      .format(token.text))

    def _operator(self, token, output, operators):
        element = lookup(token.text)
        if isinstance(element, PostfixUnaryOperator):
            output.append(token)
            return
        if isinstance(element, PrefixUnaryOperator):
            operators.append(token)
            return
        while operators and \
                operators[-1].kind is not TokenKind.LEFT_PAREN and \
                self._yields(lookup(operators[-1].text), element):
            output.append(operators.pop())
        operators.append(token)

    def _yields(self, top, incoming):
        '''
        Whether the stacked element top goes to output before incoming.
        '''
        return top.precedence > incoming.precedence or \
            top.precedence == incoming.precedence and \
            not incoming.right_associative

    def _unwind(self, output, operators):
        '''
        Pop operators to output down to the nearest (, which is kept.
        '''
        while operators[-1].kind is not TokenKind.LEFT_PAREN:
            output.append(operators.pop())

    def _close(self, group, output, operators):
        self._unwind(output, operators)
        operators.pop()
        arguments = group.arguments()
        if group.function is None:
            if arguments != 1:
                raise MalformedExpression('Parentheses must hold exactly one '
                                          'expression, got {}'
                                          .format(arguments))
            return
        element = lookup(group.function.text)
        if element.arity == UNLIMITED:
            if not arguments:
                raise MalformedExpression('{} needs at least one argument'
                                          .format(element.symbol))
            output.append(Token(TokenKind.NUMBER, str(arguments)))
        elif arguments != element.arity:
            raise MalformedExpression('{} takes {} argument(s), got {}'
                                      .format(element.symbol, element.arity,
                                              arguments))
        output.append(operators.pop())
