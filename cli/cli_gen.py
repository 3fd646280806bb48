#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import importlib
import inspect
import itertools
import logging
import os
import pkgutil
import sys

import ci.log
# to overwrite cli_gen.py log level, call
# "configure_default_logging(force=True, stdout_level=logging.DEBUG)" in specific module cli
ci.log.configure_default_logging(force=True)

import ci.util  # noqa: E402

FORMATTER_CLASS = argparse.RawDescriptionHelpFormatter

logger = logging.getLogger(__name__)


def main(argv=None):
    '''
    Creates a command line parser (using argparse) for each python module found in this
    package (except for _this_ module). For each module, a sub-command named as the
    module name (or its `__cmd_name__`) is added. Each public function defined in a given
    module is again added as a sub-sub-command. Based on the function signature, optional
    arguments are added. This parser is then used to parse the given ARGV. Provided that
    parsing succeeds, the thus specified function is executed.
    '''
    parser = create_parser()

    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        parser.print_usage()
        sys.exit(1)

    parsed = parser.parse_args(argv)

    if parsed.verbose:
        ci.log.configure_default_logging(force=True, stdout_level=logging.DEBUG)

    if not hasattr(parsed, 'func'):
        parser.print_usage()
        sys.exit(1)

    try:
        return parsed.func(parsed)
    except ci.util.Failure as f:
        logger.error(str(f))
        sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pipeline-cli',
        formatter_class=FORMATTER_CLASS,
    )
    add_global_args(parser)
    sub_command_parsers = parser.add_subparsers()

    cli_module_dir = os.path.dirname(os.path.abspath(os.path.realpath(__file__)))
    own_module_name = os.path.splitext(os.path.basename(__file__))[0]
    for _, module_name, _ in pkgutil.iter_modules([cli_module_dir]):
        # skip own module name
        if module_name == own_module_name:
            continue
        add_module(module_name, sub_command_parsers)

    return parser


def add_global_args(parser):
    parser.add_argument('--verbose', action='store_true')


def add_module(module_name, parser):
    module = importlib.import_module(f'{__package__ or "cli"}.{module_name}')

    if hasattr(module, '__cmd_name__'):
        cmd_name = module.__cmd_name__
    else:
        cmd_name = module_name

    module_parser = parser.add_parser(
        cmd_name,
        description=inspect.getdoc(module),
        formatter_class=FORMATTER_CLASS,
    )
    module_parser.set_defaults(
      func=display_usage_function(module_parser),
    )

    function_parsers = module_parser.add_subparsers()

    for fname, function in inspect.getmembers(module, predicate=inspect.isfunction):
        if fname.startswith('_'):
            continue # skip "private" functions
        if function.__module__ != module.__name__:
            continue # skip imported functions
        function_docstring = inspect.getdoc(function)
        function_parser = function_parsers.add_parser(
            fname.replace('_', '-'),
            description=function_docstring,
            formatter_class=FORMATTER_CLASS,
        )
        fspec = inspect.getfullargspec(function)
        function_parser.set_defaults(func=run_function(function))

        # defaults are filled "from the end", so reverse both argnames and defaults
        for argname, default in reversed(list(
            itertools.zip_longest(
              reversed(fspec.args),
              reversed(fspec.defaults or []),
              fillvalue=NotImplemented # workaround to be able to discriminate from None
            )
          )):
            cl_arg = '--' + argname.replace('_', '-')
            annotation = fspec.annotations.get(argname, None)
            argtype = None
            action = None
            kwargs = {}
            if annotation:
                # handle type-specific actions (lists, booleans, ..)
                if type(annotation) == type: # primitives (str, bool, int, ..)
                    argtype = annotation
                    if annotation == bool:
                        action = 'store_true'
                        argtype = None # type must not be set for store_true/store_false actions
                elif type(annotation) == list:
                    # e.g. `[str]`: option may be passed multiple times
                    action = 'append'

            if default is not NotImplemented:
                required = False
            else:
                required = True
                default = None # set back to None to not have argparser behave strangely :-)

            # add_argument does not allow 'type' as a parameter in some cases;
            # workaround this by omitting it in all cases where it is None anyway
            if argtype is not None:
                kwargs['type'] = argtype

            if action:
                kwargs['action'] = action

            if default:
                kwargs['help'] = '(default: %(default)s)'

            function_parser.add_argument(
              cl_arg,
              required=required,
              default=default,
              dest=argname,
              **kwargs
            )


def run_function(function):
    def function_runner(args):
        fspec = inspect.getfullargspec(function)
        function_args = [getattr(args, argname) for argname in fspec.args]
        return function(*function_args)
    return function_runner


def display_usage_function(parser):
    def display_usage(_):
        parser.print_usage()
    return display_usage


if __name__ == '__main__':
    main()
