"""
Archivist: background job dispatch and pluggable file storage.

Contains the job descriptor decoder and factory, and the storage adapter
contract with local and S3 implementations.
"""

__version__ = "0.1.0"
