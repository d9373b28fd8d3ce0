"""Extract a React component and the code it reaches into a standalone tree."""
from .config import __version__
