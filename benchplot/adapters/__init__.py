from benchplot.adapters.normalize import normalize_series

__all__ = ["normalize_series"]
