"""
photostamp - Prefix photos with their capture date and gather them in one folder.

Each file gets a best-guess capture timestamp, taken from its EXIF
DateTimeOriginal tag or, failing that, from the naming scheme of the device
or messaging app that produced it, and is moved to
<output>/<YYYYMMDD-HHMMSS>_<original name>.
"""

__version__ = "1.0.0"


# Public API
from .cli import main
from .config import Config
from .core import PhotoStamper
from .extractors import FILENAME_RULES, ExtractorRule, extract_date_from_filename
from .metadata import MetadataReading, MetadataStatus, read_date_time_original
from .outcome import Outcome, OutcomeKind
from .renamer import Renamer, format_prefix, target_name
from .resolver import DateResolver, FilenameStrategy, MetadataStrategy

__all__ = [ "main", "Config", "PhotoStamper", "FILENAME_RULES", "ExtractorRule",
            "extract_date_from_filename", "MetadataReading", "MetadataStatus",
            "read_date_time_original", "Outcome", "OutcomeKind", "Renamer", "format_prefix",
            "target_name", "DateResolver", "FilenameStrategy", "MetadataStrategy" ]
