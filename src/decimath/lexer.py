'''
Turn expression text into tokens.
'''

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
import logging

import regex

from .context import EvaluationContext
from .elements import (REGISTRY, OPERATORS, Constant, PostfixUnaryOperator,
                       symbols)
from .util import (InvalidCharacter, MalformedExpression,
                   UnbalancedParentheses)
from .value import DecimalValue, FLAGS

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    NUMBER = 'number'
    OPERATOR = 'operator'
    FUNCTION = 'function'
    LEFT_PAREN = 'left_paren'
    RIGHT_PAREN = 'right_paren'
    SEMICOLON = 'semicolon'
    VARIABLE = 'variable'
    # Raw body of a series, evaluated later with k bound
    STRING = 'string'


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    def __str__(self):
        return self.text


LEFT_PAREN = Token(TokenKind.LEFT_PAREN, '(')
RIGHT_PAREN = Token(TokenKind.RIGHT_PAREN, ')')
SEPARATOR = Token(TokenKind.SEMICOLON, ';')
MULTIPLY = Token(TokenKind.OPERATOR, '*')
NEGATE = Token(TokenKind.OPERATOR, 'neg')

SIGNS = '+-'
BAR = '|'
# Names matched regardless of case
CASELESS = {symbol
            for symbol, element
            in REGISTRY.items()
            if isinstance(element, Constant) and symbol.isascii()}

# Kinds that can end a value, and that can start one
_ENDS_VALUE = {TokenKind.NUMBER, TokenKind.VARIABLE, TokenKind.RIGHT_PAREN}
_STARTS_VALUE = {TokenKind.NUMBER, TokenKind.VARIABLE, TokenKind.LEFT_PAREN,
                 TokenKind.FUNCTION}


def separators(profile):
    '''
    Characters separating function arguments under profile.

    Semicolon always, comma too when the profile doesn't write numbers
    with it.
    '''
    if ',' in (profile.decimal_separator, profile.grouping_separator):
        return ';'
    return ';,'


def _symbol_pattern(symbol):
    if symbol in CASELESS:
        return r'(?i:' + regex.escape(symbol) + r')'
    return regex.escape(symbol)


@lru_cache(maxsize=None)
def lexeme_pattern(profile):
    '''
    Compiled regular expression for a single lexeme under profile.
    '''
    # Longest first: first alternative matching wins
    symbol = r'|'.join(_symbol_pattern(symbol)
                       for symbol
                       in symbols()
                       if symbol not in SIGNS)
    lexeme = r'(?<number>' + profile.numeral_pattern + r')|' \
             r'(?<symbol>' + symbol + r')|' \
             r'(?<sign>[' + regex.escape(SIGNS) + r'])|' \
             r'(?<variable>\p{L}+)|' \
             r'(?<left>\()|' \
             r'(?<right>\))|' \
             r'(?<separator>[' + regex.escape(separators(profile)) + r'])|' \
             r'(?<bar>' + regex.escape(BAR) + r')'
    return regex.compile(lexeme, flags=FLAGS)


@lru_cache(maxsize=None)
def numeral_pattern(profile):
    return regex.compile(profile.numeral_pattern, flags=FLAGS)


def _ends_value(token):
    return token.kind in _ENDS_VALUE or \
        (token.kind is TokenKind.OPERATOR and
         isinstance(REGISTRY.get(token.text), PostfixUnaryOperator))


def _unary_position(previous):
    '''
    Whether a sign after previous (None at the start) is unary.
    '''
    return previous is None or not _ends_value(previous)


class Lexer:
    '''
    Lexer for the infix expression grammar, bound to an evaluation context.

    Whitespace is dropped before anything else, so '2 3' is 23. Numerals
    follow the context's formatting profile. Constants come out as NUMBER
    tokens computed at the context's precision. Runs of signs collapse by
    parity, a unary minus that doesn't start a numeral becomes the prefix
    operator neg, and multiplication is made explicit wherever juxtaposition
    implies it.
    '''

    def __init__(self, context=None):
        self.context = context or EvaluationContext()
        self.pattern = lexeme_pattern(self.context.profile)
        self.numeral = numeral_pattern(self.context.profile)
        self.separators = separators(self.context.profile)

    def tokenize(self, expression):
        '''
        Return the token list for expression.

        Empty or blank expressions give an empty list. Unmatched parentheses
        are left for the parser to judge.
        '''
        positions = [index
                     for index, character
                     in enumerate(expression)
                     if not character.isspace()]
        text = ''.join(expression[index] for index in positions)
        tokens = []
        self._scan(text, 0, len(text), positions, tokens)
        tokens = self._multiply(self._unary(self._merge(tokens)))
        logger.debug('Tokens of %r: %s', expression,
                     ' '.join(map(str, tokens)))
        return tokens

    def _scan(self, text, start, stop, positions, tokens):
        index = start
        open_bars = 0
        after_numeral = False
        while index < stop:
            previous = tokens[-1] if tokens else None
            character = text[index]
            if character in SIGNS and _unary_position(previous):
                numeral = self.numeral.match(text, index + 1, stop)
                if numeral is not None:
                    self._numeral(character + numeral.group(0), tokens)
                    index = numeral.end()
                    after_numeral = True
                    continue
            match = self.pattern.match(text, index, stop)
            if match is None:
                raise InvalidCharacter(character, positions[index])
            groups = {key: value
                      for key, value
                      in match.groupdict().items()
                      if value}
            if 'number' in groups:
                if after_numeral:
                    raise MalformedExpression('Numeral {!r} directly follows '
                                              'another one at position {}'
                                              .format(groups['number'],
                                                      positions[index]))
                self._numeral(groups['number'], tokens)
                index = match.end()
                after_numeral = True
                continue
            after_numeral = False
            if 'symbol' in groups:
                index = self._symbol(groups['symbol'], text, match.end(),
                                     stop, positions, tokens)
                continue
            if 'sign' in groups:
                tokens.append(Token(TokenKind.OPERATOR, groups['sign']))
            elif 'variable' in groups:
                tokens.append(Token(TokenKind.VARIABLE, groups['variable']))
            elif 'left' in groups:
                tokens.append(LEFT_PAREN)
            elif 'right' in groups:
                tokens.append(RIGHT_PAREN)
            elif 'separator' in groups:
                tokens.append(SEPARATOR)
            elif open_bars and previous is not None and \
                    _ends_value(previous):
                tokens.append(RIGHT_PAREN)
                open_bars -= 1
            else:
                tokens.extend([Token(TokenKind.FUNCTION, 'abs'), LEFT_PAREN])
                open_bars += 1
            index = match.end()

    def _numeral(self, numeral, tokens):
        value = DecimalValue.parse(numeral, self.context.profile)
        tokens.append(Token(TokenKind.NUMBER, str(value)))

    def _symbol(self, symbol, text, end, stop, positions, tokens):
        '''
        Emit the tokens for a matched symbol, return where scanning resumes.
        '''
        element = REGISTRY.get(symbol) or REGISTRY[symbol.lower()]
        if isinstance(element, Constant):
            tokens.append(Token(TokenKind.NUMBER,
                                str(element.value(self.context))))
        elif isinstance(element, PostfixUnaryOperator):
            if not tokens or not _ends_value(tokens[-1]):
                raise MalformedExpression('{} must follow a value, at '
                                          'position {}'
                                          .format(symbol,
                                                  positions[end - 1]))
            tokens.append(Token(TokenKind.OPERATOR, element.symbol))
        elif isinstance(element, OPERATORS):
            tokens.append(Token(TokenKind.OPERATOR, element.symbol))
        elif element.text_operands:
            return self._series(element, text, end, stop, positions, tokens)
        else:
            tokens.append(Token(TokenKind.FUNCTION, element.symbol))
        return end

    def _series(self, element, text, end, stop, positions, tokens):
        '''
        Tokenize a series call: bounds normally, body verbatim.
        '''
        if end >= stop or text[end] != '(':
            raise MalformedExpression('{} needs a parenthesized argument list'
                                      .format(element.symbol))
        depth = 0
        arguments = [end + 1]
        closing = None
        for index in range(end, stop):
            character = text[index]
            if character == '(':
                depth += 1
            elif character == ')':
                depth -= 1
                if not depth:
                    closing = index
                    break
            elif depth == 1 and character in self.separators:
                arguments.append(index + 1)
        if closing is None:
            raise UnbalancedParentheses('Unmatched ( after {}'
                                        .format(element.symbol))
        if len(arguments) != element.arity:
            raise MalformedExpression('{} takes {} arguments, got {}'
                                      .format(element.symbol, element.arity,
                                              len(arguments)))
        arguments.append(closing + 1)
        tokens.extend([Token(TokenKind.FUNCTION, element.symbol),
                       LEFT_PAREN])
        for argument, (first, after) in enumerate(zip(arguments,
                                                      arguments[1:])):
            if argument in element.text_operands:
                tokens.append(Token(TokenKind.STRING, text[first:after - 1]))
            else:
                self._scan(text, first, after - 1, positions, tokens)
            tokens.append(SEPARATOR if after <= closing else RIGHT_PAREN)
        return closing + 1

    def _merge(self, tokens):
        '''
        Collapse runs of + and - operators: odd minus count is -, else +.
        '''
        merged = []
        for token in tokens:
            if _is_sign(token) and merged and _is_sign(merged[-1]):
                negative = (merged[-1].text == '-') != (token.text == '-')
                merged[-1] = Token(TokenKind.OPERATOR,
                                   '-' if negative else '+')
            else:
                merged.append(token)
        return merged

    def _unary(self, tokens):
        '''
        Turn unary minus into neg, drop unary plus.
        '''
        resolved = []
        for token in tokens:
            if _is_sign(token) and \
               _unary_position(resolved[-1] if resolved else None):
                if token.text == '-':
                    resolved.append(NEGATE)
            else:
                resolved.append(token)
        return resolved

    def _multiply(self, tokens):
        '''
        Insert * wherever two adjacent tokens imply multiplication.
        '''
        explicit = []
        for token in tokens:
            if explicit and _ends_value(explicit[-1]) and \
               token.kind in _STARTS_VALUE:
                explicit.append(MULTIPLY)
            explicit.append(token)
        return explicit


def _is_sign(token):
    return token.kind is TokenKind.OPERATOR and token.text in SIGNS
