__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argot'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .utils import *
from .faults import *
from .options import *
from .elements import *
from .schema import *
from .cache import *
from .validation import *
from .matcher import *
from .helptext import *
from .scopes import *
from .parser import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

__all__ += utils.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += options.__all__  # type: ignore[attr-defined]
__all__ += elements.__all__  # type: ignore[attr-defined]
__all__ += schema.__all__  # type: ignore[attr-defined]
__all__ += cache.__all__  # type: ignore[attr-defined]
__all__ += validation.__all__  # type: ignore[attr-defined]
__all__ += matcher.__all__  # type: ignore[attr-defined]
__all__ += helptext.__all__  # type: ignore[attr-defined]
__all__ += scopes.__all__  # type: ignore[attr-defined]
__all__ += parser.__all__  # type: ignore[attr-defined]
