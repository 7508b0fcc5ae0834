from .loader import load_content, parse_document, serialize
from .validation import input_errors, is_valid_json, is_valid_url, validate_document

__all__ = ["load_content", "parse_document", "serialize", "input_errors", "is_valid_json", "is_valid_url", "validate_document"]
