from functools import wraps
import decimal


class CalculationError(Exception):
    '''
    Root of every failure the engine reports.

    ``category`` is stable and meant for programs; the message is for people.
    '''
    category = 'CALCULATION_ERROR'

    def __init__(self, message=None):
        super().__init__(message or self.category)


class InvalidCharacter(CalculationError):
    category = 'INVALID_CHARACTER'

    def __init__(self, character, position):
        super().__init__('Invalid character {!r} at position {}'
                         .format(character, position))
        self.character = character
        self.position = position


class UnbalancedParentheses(CalculationError):
    category = 'UNBALANCED_PARENTHESES'


class MalformedExpression(CalculationError):
    category = 'MALFORMED_EXPRESSION'


class ProcessingError(CalculationError):
    category = 'PROCESSING_ERROR'

    def __init__(self, message, symbol=None, expected=None, actual=None):
        super().__init__(message)
        self.symbol = symbol
        self.expected = expected
        self.actual = actual


class InvalidArgument(CalculationError):
    category = 'INVALID_ARGUMENT'


class DivisionByZero(CalculationError):
    category = 'DIVISION_BY_ZERO'


class NumericDomainError(CalculationError):
    category = 'NUMERIC_DOMAIN_ERROR'


class UndefinedVariable(CalculationError):
    category = 'UNDEFINED_VARIABLE'

    def __init__(self, name):
        super().__init__('Variable {!r} is not defined'.format(name))
        self.name = name


class CyclicVariableReference(CalculationError):
    '''
    Raised by variable-resolution layers built on top of the engine.

    The engine itself only substitutes plain decimal bindings.
    '''
    category = 'CYCLIC_VARIABLE_REFERENCE'


def wrap_user_errors(fmt):
    '''
    Decorator that turns stray decimal signals into calculation errors.

    Passes through CalculationErrors. The format string is given the
    decorated function's positional arguments.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalculationError:
                raise
            except decimal.DivisionByZero as e:
                raise DivisionByZero(fmt.format(*args, **kwargs)) from e
            except (decimal.InvalidOperation, decimal.Overflow,
                    OverflowError, MemoryError) as e:
                raise InvalidArgument(fmt.format(*args, **kwargs)) from e
        return wrapper
    return decorator
