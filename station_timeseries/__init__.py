"""Station temperature time series extracted from gridded reanalysis data"""

__version__ = "0.1.0"
