# formstamp/utils/file_utils.py

import os
from typing import Tuple, Optional

from formstamp.core.config import settings


def validate_file(filename: Optional[str], size: int) -> Tuple[bool, Optional[str]]:
    """
    Validates an uploaded file's type and size based on application settings.

    Args:
        filename: Original name of the uploaded file.
        size: Size of the uploaded content in bytes.

    Returns:
        A tuple containing a boolean (True if valid) and an optional error message string.
    """
    if not filename:
        return False, "No file"

    allowed_types = {ext.strip().lower() for ext in settings.allowed_file_types.split(',')}
    file_ext = os.path.splitext(filename)[1].lower().lstrip('.')

    if not file_ext:
        return False, "File must have an extension."

    if file_ext not in allowed_types:
        return False, f"File type '.{file_ext}' is not allowed. The allowed types are: {', '.join(sorted(allowed_types))}."

    if size == 0:
        return False, "File is empty."

    # allowed_file_size is in Kilobytes
    max_size_in_bytes = settings.allowed_file_size * 1024
    if size > max_size_in_bytes:
        return False, f"File size of {size / 1024:.2f} KB exceeds the maximum allowed size of {settings.allowed_file_size} KB."

    return True, None
