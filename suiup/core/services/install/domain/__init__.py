"""
L1 Domain — pure functions: validation, spec parsing, size formatting.

No subprocess calls, no network calls.  The only filesystem touch is
the write probe in ``validate_path_writable``.
"""

from suiup.core.services.install.domain.component_spec import (  # noqa: F401
    parse_binary_spec,
    parse_component,
)
from suiup.core.services.install.domain.size_format import (  # noqa: F401
    format_file_size,
    to_mb,
)
from suiup.core.services.install.domain.validation import (  # noqa: F401
    validate_binary_name,
    validate_cache_days,
    validate_cache_size,
    validate_github_token,
    validate_network,
    validate_number_range,
    validate_path_exists,
    validate_path_writable,
    validate_url,
    validate_version_format,
)
