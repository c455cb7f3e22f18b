"""Short code generation utilities."""

import secrets
import string
from typing import Optional

from .common.validators import SHORTCODE_MIN_LENGTH, SHORTCODE_MAX_LENGTH, is_well_formed


class ShortCodeGenerator:
    """Generate random short codes for URLs."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    def __init__(self, default_length: int = 6):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes (3-10)
        """
        if not SHORTCODE_MIN_LENGTH <= default_length <= SHORTCODE_MAX_LENGTH:
            raise ValueError(
                f"default_length must be between {SHORTCODE_MIN_LENGTH} "
                f"and {SHORTCODE_MAX_LENGTH}"
            )
        self.default_length = default_length

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Characters are drawn uniformly from [A-Za-z0-9].

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.BASE62_CHARS) for _ in range(length))

    @staticmethod
    def is_valid_format(code: str) -> bool:
        """Check if code is a well-formed shortcode."""
        return is_well_formed(code)
