from os import isatty
import sys
from sys import stdin, stdout, exit
from argparse import (ArgumentParser, ArgumentTypeError, REMAINDER,
                      OPTIONAL)
import logging

from prompt_toolkit import PromptSession

from .context import (AngleMode, EvaluationContext, PrecisionContext,
                      RoundingRule)
from .engine import Engine
from .lexer import lexeme_pattern
from .util import CalculationError
from .value import PROFILES, DEFAULT_PROFILE, formatting_profile

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=None,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


def _binding(text):
    '''
    NAME=VALUE command line binding.
    '''
    name, equals, value = text.partition('=')
    if not equals or not name.strip().isalpha():
        raise ArgumentTypeError('Expected NAME=VALUE, got {!r}'.format(text))
    return name.strip(), value.strip()


class CLI:
    '''
    Command line interface to the expression engine.
    '''

    DEFAULT_PROMPT = '> '

    def _context(self):
        '''
        Evaluation context described by the command line arguments.
        '''
        try:
            precision = PrecisionContext(self.args.precision,
                                         RoundingRule(self.args.rounding))
            return EvaluationContext(precision,
                                     AngleMode(self.args.angle),
                                     formatting_profile(self.args.profile),
                                     dict(self.args.bindings or ()))
        except CalculationError as e:
            self.argument_parser.error(e.args[0])

    def dumper(self):
        '''
        Dump tokens and postfix for every expression.
        '''
        engine = Engine(self._context())
        print('<kind>:<text>...')
        for line in self.args.expressions:
            try:
                tokens = engine.tokenize(line)
                postfix = engine.parser.to_postfix(tokens)
            except CalculationError as e:
                print(e.args[0], file=sys.stderr)
                self.failures += 1
                continue
            print('tokens',
                  *('{}:{}'.format(token.kind.name, token.text)
                    for token
                    in tokens),
                  sep='\t')
            print('postfix',
                  *('{}:{}'.format(token.kind.name, token.text)
                    for token
                    in postfix),
                  sep='\t')

    def executor(self):
        '''
        Evaluate every expression, printing each result.
        '''
        context = self._context()
        engine = Engine(context)
        for line in self.args.expressions:
            if not line.strip():
                continue
            try:
                result = engine.evaluate(line)
            # Skip to the next line; the engine holds nothing to clean up
            except CalculationError as e:
                print(e.args[0], file=sys.stderr)
                self.failures += 1
                continue
            print(result.format(context.profile))

    def raw_grammar(self):
        '''
        Print the lexeme regular expression for the active profile.
        '''
        print(lexeme_pattern(formatting_profile(self.args.profile)).pattern)

    def _prompting_input(self):
        '''
        Source of expression lines when none were given with -e.

        An interactive prompt when -p was passed or when both stdin and
        stdout are terminals; stdin itself, line by line, otherwise.
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            description='Arbitrary precision decimal calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument(
            '-k', '--precision',
            type=int,
            default=PrecisionContext.DEFAULT_SIGNIFICANT_DIGITS,
            help='significant digits of inexact results')
        self.argument_parser.add_argument(
            '-r', '--rounding',
            choices=[rule.value for rule in RoundingRule],
            default=PrecisionContext.DEFAULT_ROUNDING.value)
        self.argument_parser.add_argument(
            '-a', '--angle',
            choices=[mode.value for mode in AngleMode],
            default=EvaluationContext.DEFAULT_ANGLE_MODE.value)
        self.argument_parser.add_argument(
            '-l', '--profile',
            choices=sorted(PROFILES),
            default=DEFAULT_PROFILE.name,
            help='number formatting convention')
        self.argument_parser.add_argument(
            '-d', '--define',
            type=_binding,
            action='append',
            dest='bindings',
            metavar='NAME=VALUE')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Returns the number of expressions that failed.
        '''
        self.args = self.argument_parser.parse_args(args)
        self.failures = 0
        if self.args.verbose:
            logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
        return self.failures
