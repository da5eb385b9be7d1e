import os
from importlib.metadata import PackageNotFoundError, version

__location__ = os.path.dirname(os.path.realpath(__file__))

try:
    __version__ = version("sfpermset")
except PackageNotFoundError:
    __version__ = "unknown"
