"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/config.py
Central constants for the scan engine: read sizes, report location, status texts.
"""


class ScanConfig:
    HEADER_SIZE = 256                 # bytes summed for the header checksum
    READ_CHUNK_SIZE = 1024 * 1024     # streaming block for full digests
    REPORT_NAME = "duplicates.log"    # relative to the working directory
    POLL_INTERVAL = 0.1               # seconds between caller polls

    STATUS_SCANNING = "Scanning..."
    STATUS_CHECKSUMS = "Calculate Checksums..."
    STATUS_CONFIRMING = "Check for duplicates..."
