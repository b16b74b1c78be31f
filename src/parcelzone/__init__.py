"""parcelzone — address to parcel, zoning district, height/bulk and zoning rules."""

__version__ = "1.0.0"
