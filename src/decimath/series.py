'''
Bound-variable series: sum and product of an expression over k.
'''

import logging

from . import arithmetic
from .util import InvalidArgument
from .value import ZERO, ONE

logger = logging.getLogger(__name__)

# Name the body expression sees the running index under
INDEX = 'k'


def _bound(value, what):
    if not value.is_integer():
        raise InvalidArgument('{} bound of a series must be an integer, got {}'
                              .format(what, value))
    return int(value)


def _series(start, end, body, context, combine, identity):
    # Engine depends on the element registry, which depends on this module
    from .engine import Engine
    first = _bound(start, 'Lower')
    last = _bound(end, 'Upper')
    engine = Engine(context)
    postfix = engine.to_postfix(body)
    logger.debug('Series of %r over %s=%d..%d', body, INDEX, first, last)
    result = identity
    for k in range(first, last + 1):
        result = combine(result, engine.run(postfix, {INDEX: k}))
    return result


def summation(start, end, body, *, context):
    '''
    Sum of body for every integer k in [start, end]; 0 when start > end.
    '''
    return _series(start, end, body, context, arithmetic.add, ZERO)


def product(start, end, body, *, context):
    '''
    Product of body for every integer k in [start, end]; 1 when start > end.
    '''
    return _series(start, end, body, context, arithmetic.multiply, ONE)
