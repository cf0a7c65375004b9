__title__ = 'cmdapp'
__author__ = 'Ethan Uppal'
__license__ = 'MIT'
__version__ = "0.0.0"

from .behaviors import *
from .options import *
from .results import *
from .scanner import *
from .verifier import *
from .dispatcher import *
from .apps import *
from .faults import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the behavior grammar
__all__ += behaviors.__all__  # type: ignore[attr-defined]
# Load the exposed API of the options and registry
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parse results
__all__ += results.__all__  # type: ignore[attr-defined]
# Load the exposed API of the scanner
__all__ += scanner.__all__  # type: ignore[attr-defined]
# Load the exposed API of the verifier
__all__ += verifier.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the applications
__all__ += apps.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
