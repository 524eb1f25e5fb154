"""
Simulator exceptions.

The calculation core is total over valid inputs; these cover reference-data
lookups and comparison history handling.
"""

from typing import Optional


class EnergySimError(Exception):
    """Base exception for simulator errors"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class DeviceNotFoundError(EnergySimError):
    """Raised when a device id is not in the catalog or device list"""
    pass


class FuelNotFoundError(EnergySimError):
    """Raised when an alternative fuel kind is unknown"""
    pass


class ComparisonNotFoundError(EnergySimError):
    """Raised when a saved comparison id does not exist"""
    pass


class HistoryImportError(EnergySimError):
    """Raised when a comparison history payload cannot be imported"""
    pass
