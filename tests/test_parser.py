'''
Shunting-yard parser tests
'''

from decimath.lexer import Lexer, Token, TokenKind
from decimath.parser import Parser
from decimath.util import MalformedExpression, UnbalancedParentheses

from pytest import raises


def postfix(expression):
    tokens = Lexer().tokenize(expression)
    return [token.text for token in Parser().to_postfix(tokens)]


def test_precedence():
    assert postfix('3+4*2') == ['3', '4', '2', '*', '+']
    assert postfix('(3+4)*2') == ['3', '4', '+', '2', '*']
    assert postfix('2*3^2') == ['2', '3', '2', '^', '*']
    assert postfix('10%4+1') == ['10', '4', '%', '1', '+']


def test_associativity():
    assert postfix('10-4-3') == ['10', '4', '-', '3', '-']
    assert postfix('8/4/2') == ['8', '4', '/', '2', '/']
    assert postfix('2^3^2') == ['2', '3', '2', '^', '^']


def test_prefix_and_postfix_operators():
    assert postfix('-x^2') == ['x', '2', '^', 'neg']
    assert postfix('-x*2') == ['x', 'neg', '2', '*']
    assert postfix('2^-x') == ['2', 'x', 'neg', '^']
    assert postfix('2+3!') == ['2', '3', '!', '+']
    assert postfix('2^3!') == ['2', '3', '!', '^']
    assert postfix('(1+2)!') == ['1', '2', '+', '!']


def test_functions():
    assert postfix('sin(30)+1') == ['30', 'sin', '1', '+']
    assert postfix('sin30+1') == ['30', 'sin', '1', '+']
    assert postfix('rootn(8;3)') == ['8', '3', 'rootn']
    assert postfix('atan2(1+1;2*3)') == ['1', '1', '+', '2', '3', '*',
                                         'atan2']
    assert postfix('rand()') == ['rand']
    assert postfix('sum(1;3;k)') == ['1', '3', 'k', 'sum']


def test_unlimited_functions_get_a_count():
    assert postfix('max(1;2;3)') == ['1', '2', '3', '3', 'max']
    assert postfix('min(7)') == ['7', '1', 'min']
    assert postfix('avg(max(1;2);3)') == ['1', '2', '2', 'max', '3', '2',
                                          'avg']
    counted = Parser().to_postfix(Lexer().tokenize('max(1;2)'))
    assert counted[2] == Token(TokenKind.NUMBER, '2')


def test_argument_count_mismatch():
    with raises(MalformedExpression):
        postfix('sin(1;2)')
    with raises(MalformedExpression):
        postfix('sin()')
    with raises(MalformedExpression):
        postfix('rootn(8)')
    with raises(MalformedExpression):
        postfix('max()')
    with raises(MalformedExpression):
        postfix('max(1;)')
    with raises(MalformedExpression):
        postfix('max(;1)')
    with raises(MalformedExpression):
        postfix('rand(1)')


def test_functions_needing_parentheses():
    with raises(MalformedExpression):
        postfix('max 1')
    with raises(MalformedExpression):
        postfix('rand')


def test_plain_parentheses():
    with raises(MalformedExpression):
        postfix('()')
    with raises(MalformedExpression):
        postfix('(1;2)')


def test_unbalanced():
    with raises(UnbalancedParentheses):
        postfix('1)')
    with raises(UnbalancedParentheses):
        postfix('(1))')
    with raises(UnbalancedParentheses):
        postfix('1;2')


def test_leftover_open_parenthesis_is_tolerated():
    assert postfix('(1+2') == ['1', '2', '+']
    assert postfix('2*(3+4') == ['2', '3', '4', '+', '*']
    assert postfix('max(1;2') == ['1', '2', '2', 'max']


def test_empty():
    assert Parser().to_postfix([]) == []
