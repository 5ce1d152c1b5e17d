#
# Exact arbitrary-precision binary and decimal floating-point values
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

from .errors import *
from .formats import *
from .context import *
from .generic_float import *
from .decimal_value import *

__version__ = '1.0.0'

__all__ = (errors.__all__ + formats.__all__ + context.__all__ + generic_float.__all__
           + decimal_value.__all__)
