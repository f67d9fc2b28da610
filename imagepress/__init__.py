"""
ImagePress Image Compression Application

This package implements image compression for a web API and a desktop
embedded process sharing one conversion pipeline:
- JPEG, PNG and WebP decode and encode (Pillow)
- Quality, target dimensions and aspect-ratio aware resizing
- Single images returned as data URIs
- Batches packaged into a ZIP archive, all-or-nothing
"""
__version__ = "1.0.0"

# Export the app instance
from imagepress.api import app

__all__ = ['app', '__version__']
