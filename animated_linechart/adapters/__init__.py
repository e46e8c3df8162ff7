from .normalize import RawSeries, normalize_series, to_posix_seconds

__all__ = ["RawSeries", "normalize_series", "to_posix_seconds"]
