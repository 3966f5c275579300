"""Textual front end for regview."""
