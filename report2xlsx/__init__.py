"""Top-level package for report2xlsx."""
from .report2xlsx import REPORT2XLSX
from .config import LayoutConfig, ConfigError
from .locator import StructuralError

__version__ = '0.1.0'
