"""Helper utilities shared across axiom_governance components."""

from .checksum import compute_directory_checksums, fingerprint_payload, verify_checksums

__all__ = ["compute_directory_checksums", "fingerprint_payload", "verify_checksums"]
