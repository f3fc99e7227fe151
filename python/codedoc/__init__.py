from importlib.metadata import PackageNotFoundError, version

from codedoc.config import Settings, load_settings
from codedoc.engine import HighlightEngine
from codedoc.parser.extract import get_code_instances
from codedoc.parser.instance import CodeInstance

try:
    __version__ = version("codedoc")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "HighlightEngine",
    "CodeInstance",
    "Settings",
    "get_code_instances",
    "load_settings",
    "__version__",
]
