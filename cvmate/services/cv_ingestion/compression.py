"""Lossless compression of the original upload for storage."""

import gzip
import logging
import zlib

from .errors import CompressionError, DecompressionError

logger = logging.getLogger(__name__)


class FileCompressionService:
    """gzip at the highest compression level."""

    level = 9

    def compress(self, data: bytes) -> bytes:
        try:
            return gzip.compress(data, compresslevel=self.level)
        except (TypeError, ValueError, zlib.error) as exc:
            logger.error(f"File compression failed: {exc}")
            raise CompressionError("File could not be compressed") from exc

    def decompress(self, data: bytes) -> bytes:
        if not data:
            raise DecompressionError("No compressed data stored")
        try:
            return gzip.decompress(data)
        except (TypeError, OSError, EOFError, zlib.error) as exc:
            logger.error(f"File decompression failed: {exc}")
            raise DecompressionError("Compressed file could not be opened") from exc

    @staticmethod
    def compression_ratio(original_size: int, compressed_size: int) -> float:
        """compressed / original; 0 for an empty original."""
        if original_size <= 0:
            return 0.0
        return compressed_size / original_size

    @staticmethod
    def space_savings_percent(original_size: int, compressed_size: int) -> float:
        if original_size <= 0:
            return 0.0
        return (original_size - compressed_size) / original_size * 100
