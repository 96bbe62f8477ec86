from dupscan.core.models import DigestAlgorithm, ScanMode

SCAN_MODE_ALIASES = {
    "content": ScanMode.CONTENT_HASH,
    "hash": ScanMode.CONTENT_HASH,
    "metadata": ScanMode.METADATA_KEY,
    "tags": ScanMode.METADATA_KEY,
}

SCAN_MODE_CHOICES = list(SCAN_MODE_ALIASES.keys())

SCAN_MODE_HELP_TEXT = (
    "Scan mode:\n"
    "  content (hash)   : Size + Extension → Header Checksum → Full Digest\n"
    "  metadata (tags)  : Duration + Title → Artist/Album/Title/Duration (audio files)\n"
    "Example:\n"
    "  %(prog)s -i ~/Music --mode metadata"
)

DIGEST_ALIASES = {
    "blake2b": DigestAlgorithm.BLAKE2B,
    "xxhash": DigestAlgorithm.XXHASH,
}

DIGEST_CHOICES = list(DIGEST_ALIASES.keys())

DIGEST_HELP_TEXT = (
    "Full-content digest used in content mode:\n"
    "  blake2b : collision resistant (default)\n"
    "  xxhash  : faster, not collision resistant\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - find duplicates in Downloads folder
  %(prog)s -i ~/Downloads

  Only look at images, write the report somewhere else
  %(prog)s -i ~/Pictures --disable-group audio video document archive source --report ~/dupes.log

  Find the same recordings across formats (mp3 vs flac)
  %(prog)s -i ~/Music --mode metadata

  Move duplicates to trash, keeping the file closest to the root (with confirmation prompt)
  %(prog)s -i ~/Downloads --keep-one

  Same as above but without confirmation (for scripts)
  %(prog)s -i ~/Downloads --keep-one --force

  Show every known extension and whether it is scanned
  %(prog)s --list-types
"""
