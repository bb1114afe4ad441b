"""src/weburl/config.py

Parser and package configuration.
"""

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_MAX_INPUT_LENGTH = 2**32 - 1


@dataclass(frozen=True)
class ParserOptions:
    """
    Parser configuration.

    Attributes:
        max_input_length: Longest input accepted by the parser, in code points.
            ``None`` disables the check.
    """

    max_input_length: Optional[int] = DEFAULT_MAX_INPUT_LENGTH

    @classmethod
    def unlimited(cls) -> "ParserOptions":
        """Create options without an input length limit."""
        return cls(max_input_length=None)


@dataclass(frozen=True)
class PackageOptions:
    """
    Operation table configuration.

    Attributes:
        fragment_none_clears_query: Reproduce the legacy behaviour where
            setting ``fragment`` or ``hash`` to ``None`` removed the query
            instead of the fragment.
        parser: Options used by the ``Url`` constructor operation.
    """

    fragment_none_clears_query: bool = False
    parser: ParserOptions = field(default_factory=ParserOptions)
