"""git-file-history source tree."""
