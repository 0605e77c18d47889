from decimal import Decimal

from pytest import Item, fixture

from decimath.context import AngleMode, EvaluationContext, PrecisionContext
from decimath.value import DecimalValue


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    # Not bothering with make-style output that you can feed into a Vim
    # quickfix list and iterate over.
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          # Get rid of full-diff, -vv for full diff, etc.
          '\n'.join(str(expl).splitlines()[:-2]))


def D(text):
    '''
    Shorthand for a DecimalValue in plain notation.
    '''
    return DecimalValue.parse(text)


def close(value, expected, digits=25):
    '''
    Whether value is within 10 ** -digits of the expected decimal text.
    '''
    return abs(value.to_decimal() - Decimal(expected)) < \
        Decimal(10) ** -digits


@fixture
def precision():
    return PrecisionContext(30)


@fixture
def context(precision):
    return EvaluationContext(precision)


@fixture
def radians(precision):
    return EvaluationContext(precision, AngleMode.RADIANS)
