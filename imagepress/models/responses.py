"""
Response models for the compression API.

Field names are snake_case in Python and camelCase on the wire, matching
what the web and desktop front ends expect.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base class serializing fields with camelCase aliases"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DimensionsModel(BaseModel):
    width: int = Field(..., description="Width in pixels")
    height: int = Field(..., description="Height in pixels")


class CompressionResponse(CamelModel):
    """Response model for a single compressed image"""
    success: bool = Field(True, description="Always true for a successful compression")
    original_size: int = Field(..., description="Size of the original file in bytes")
    compressed_size: int = Field(..., description="Size of the compressed file in bytes")
    compression_ratio: str = Field(..., description="Size reduction, e.g. '60.0%'")
    original_dimensions: DimensionsModel = Field(..., description="Decoded source dimensions")
    compressed_dimensions: DimensionsModel = Field(..., description="Dimensions of the encoded output")
    compressed_image: str = Field(..., description="Encoded image as a base64 data URI")


class BatchItemResponse(CamelModel):
    """Result model for a single file in batch compression"""
    original_name: str = Field(..., description="Original filename")
    compressed_name: str = Field(..., description="Entry name inside the ZIP archive")
    original_size: int = Field(..., description="Size of the original file in bytes")
    compressed_size: int = Field(..., description="Size of the compressed file in bytes")
    compression_ratio: str = Field(..., description="Size reduction, e.g. '60.0%'")
    original_dimensions: DimensionsModel
    compressed_dimensions: DimensionsModel


class BatchCompressionResponse(CamelModel):
    """Response model for batch compression results"""
    success: bool = Field(True, description="Always true for a successful batch")
    results: List[BatchItemResponse] = Field(..., description="Per-file results in upload order")
    zip_file: str = Field(..., description="ZIP archive as a base64 data URI")
    zip_size: int = Field(..., description="Size of the ZIP archive in bytes")
    total_original_size: int = Field(..., description="Total size of all original files in bytes")
    total_compressed_size: int = Field(..., description="Total size of all compressed files in bytes")


class ErrorResponse(BaseModel):
    """Body returned for every failed request"""
    error: str = Field(..., description="User-facing error message")
