"""Flag services: the reader, the batch writer and the table component that ties them together."""

from .flag_manager import FlagManager
from .flag_reader import FlagReader, Subscription
from .flag_writer import FlagWriter, partition

__all__ = ["FlagManager", "FlagReader", "Subscription", "FlagWriter", "partition"]
