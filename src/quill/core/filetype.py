"""
Language profiles: which lexical categories are highlighted for a file type.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Tuple, Final

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighlightingOptions:
    """Enabled highlight categories and keyword sets for a language."""
    numbers: bool = False
    strings: bool = False
    characters: bool = False
    comments: bool = False
    multiline_comments: bool = False
    primary_keywords: Tuple[str, ...] = ()
    secondary_keywords: Tuple[str, ...] = ()


RUST_OPTIONS: Final[HighlightingOptions] = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords=(
        "as", "break", "const", "continue", "crate", "else", "enum", "extern",
        "false", "fn", "for", "if", "impl", "in", "let", "loop", "match", "mod",
        "move", "mut", "pub", "ref", "return", "self", "Self", "static", "struct",
        "super", "trait", "true", "type", "unsafe", "use", "where", "while", "dyn",
        "abstract", "become", "box", "do", "final", "macro", "override", "priv",
        "typeof", "unsized", "virtual", "yield", "async", "await", "try",
    ),
    secondary_keywords=(
        "bool", "char", "i8", "i16", "i32", "i64", "i128", "isize", "u8", "u16",
        "u32", "u64", "u128", "usize", "f32", "f64", "str", "String",
    ),
)

C_OPTIONS: Final[HighlightingOptions] = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords=(
        "auto", "break", "case", "continue", "default", "do", "else", "enum",
        "extern", "for", "goto", "if", "register", "return", "sizeof", "static",
        "struct", "switch", "typedef", "union", "volatile", "while", "NULL",
        "const", "inline", "restrict",
    ),
    secondary_keywords=(
        "int", "long", "double", "float", "char", "unsigned", "signed", "void",
        "short", "size_t", "bool",
    ),
)

CPP_OPTIONS: Final[HighlightingOptions] = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords=C_OPTIONS.primary_keywords + (
        "class", "namespace", "template", "typename", "public", "private",
        "protected", "virtual", "override", "new", "delete", "this", "using",
        "try", "catch", "throw", "true", "false", "nullptr", "constexpr",
        "operator", "friend", "explicit", "mutable",
    ),
    secondary_keywords=C_OPTIONS.secondary_keywords + (
        "auto", "wchar_t", "std", "string",
    ),
)

GO_OPTIONS: Final[HighlightingOptions] = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords=(
        "break", "case", "chan", "const", "continue", "default", "defer", "else",
        "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
        "map", "package", "range", "return", "select", "struct", "switch", "type",
        "var", "true", "false", "nil",
    ),
    secondary_keywords=(
        "bool", "byte", "complex64", "complex128", "error", "float32", "float64",
        "int", "int8", "int16", "int32", "int64", "rune", "string", "uint",
        "uint8", "uint16", "uint32", "uint64", "uintptr",
    ),
)

JAVA_OPTIONS: Final[HighlightingOptions] = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=True,
    comments=True,
    multiline_comments=True,
    primary_keywords=(
        "abstract", "assert", "break", "case", "catch", "class", "continue",
        "default", "do", "else", "enum", "extends", "final", "finally", "for",
        "if", "implements", "import", "instanceof", "interface", "native", "new",
        "package", "private", "protected", "public", "return", "static", "super",
        "switch", "synchronized", "this", "throw", "throws", "transient", "try",
        "volatile", "while", "true", "false", "null", "var",
    ),
    secondary_keywords=(
        "boolean", "byte", "char", "double", "float", "int", "long", "short",
        "void", "String", "Object",
    ),
)

JAVASCRIPT_OPTIONS: Final[HighlightingOptions] = HighlightingOptions(
    numbers=True,
    strings=True,
    characters=False,
    comments=True,
    multiline_comments=True,
    primary_keywords=(
        "break", "case", "catch", "class", "const", "continue", "debugger",
        "default", "delete", "do", "else", "export", "extends", "finally", "for",
        "function", "if", "import", "in", "instanceof", "let", "new", "return",
        "super", "switch", "this", "throw", "try", "typeof", "var", "void",
        "while", "with", "yield", "async", "await", "of", "static",
    ),
    secondary_keywords=(
        "true", "false", "null", "undefined", "NaN", "Infinity",
    ),
)

# Keyed by Pygments lexer name.
LANGUAGE_PROFILES: Final[Dict[str, Tuple[str, HighlightingOptions]]] = {
    'Rust': ('Rust', RUST_OPTIONS),
    'C': ('C', C_OPTIONS),
    'C++': ('C++', CPP_OPTIONS),
    'Go': ('Go', GO_OPTIONS),
    'Java': ('Java', JAVA_OPTIONS),
    'JavaScript': ('JavaScript', JAVASCRIPT_OPTIONS),
}

NO_FILETYPE: Final[str] = 'No filetype'


@dataclass(frozen=True)
class FileType:
    """A named language profile."""
    name: str = NO_FILETYPE
    hl_opts: HighlightingOptions = HighlightingOptions()

    @classmethod
    def from_filename(cls, file_name: str) -> 'FileType':
        """
        Resolve the language profile for a file from its extension.

        The lookup is case-insensitive. Names without an extension, and
        extensions with no known profile, get the default profile with every
        optional category disabled.

        Args:
            file_name: Path or bare name of the file

        Returns:
            The resolved file type
        """

        base_name = os.path.basename(file_name).lower()
        _, extension = os.path.splitext(base_name)
        if not extension:
            return cls()

        try:
            lexer = get_lexer_for_filename(base_name)
        except ClassNotFound:
            logger.debug("No lexer for %s", file_name)
            return cls()

        profile = LANGUAGE_PROFILES.get(lexer.name)
        if profile is None:
            logger.debug("No highlighting profile for %s (%s)", file_name, lexer.name)
            return cls()

        name, options = profile
        logger.debug("Resolved %s as %s", file_name, name)
        return cls(name, options)
