"""Building blocks shared by every application service."""
