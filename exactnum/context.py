#
# Per-thread configuration of the exact numeric types
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import threading

import attr

from .formats import FloatFormat, Float32

__all__ = ('Context', 'DefaultContext', 'get_context', 'set_context', 'local_context')


@attr.s(slots=True, kw_only=True, eq=False, repr=False)
class Context:
    '''Carries the defaults applied when an operation is not told otherwise.'''

    # The format of values built by GenericFloat.from_int() when none is given
    float_format = attr.ib(default=Float32,
                           validator=attr.validators.instance_of(FloatFormat))

    def copy(self):
        '''Return a copy of the context.'''
        return attr.evolve(self)

    def __repr__(self):
        return f'<Context float_format={self.float_format!r}>'


DefaultContext = Context()
tls = threading.local()


def get_context():
    try:
        return tls.context
    except AttributeError:
        tls.context = DefaultContext.copy()
        return tls.context


def set_context(context):
    '''Sets the current thread's context to context (not a copy of it).'''
    if not isinstance(context, Context):
        raise TypeError('context must be a Context instance')
    tls.context = context


class LocalContext:
    '''A context manager that will set the current context for the active thread to a copy of
    context on entry to the with-statement and restore the previous context on exit.  If
    no context is specified a copy of the current context is taken instead.
    '''

    def __init__(self, context=None):
        self.saved_context = None
        self.context_to_set = context

    def __enter__(self):
        self.saved_context = get_context()
        context = (self.context_to_set or self.saved_context).copy()
        set_context(context)
        return context

    def __exit__(self, etype, value, traceback):
        set_context(self.saved_context)


local_context = LocalContext
