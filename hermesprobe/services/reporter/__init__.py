"""Classification reporter service."""

from .service import NONE_TOKEN, describe_file_type, format_report

__all__ = ["NONE_TOKEN", "describe_file_type", "format_report"]
