# evalfilter
# Boolean filter scripts run against host-supplied objects.
__version__ = "0.1.0"

from .errors import FilterError
from .runtime import Interpreter, Outcome, CONTINUE, Terminate, run
from .types import Value, ValueType, from_native
import evalfilter.runtime_statements  # Install statement executors
