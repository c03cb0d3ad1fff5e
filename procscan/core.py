"""
Core line-scanning functionality for procfs text files.

Provides the error types, the label-plus-slots field scanner and the
ordered record parser that the per-file collectors build on.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO, Tuple

logger = logging.getLogger(__name__)


class ProcfsError(Exception):
    """Raised when a procfs file cannot be turned into a record."""
    pass


class ProcfsReadError(ProcfsError):
    """Raised when procfs input cannot be read."""
    pass


class TruncatedInputError(ProcfsReadError):
    """Raised when input ends while a required line is still pending."""

    def __init__(self, record: str, missing: str):
        super().__init__(f"{record}: end of input before '{missing}' line")
        self.record = record
        self.missing = missing


class ProcfsFormatError(ProcfsError):
    """Raised when procfs input was read but has an unexpected shape."""
    pass


class LineFormatError(ProcfsFormatError):
    """Raised when a single tagged line does not match its layout."""

    def __init__(self, tag: str, reason: str, line_number: Optional[int] = None,
                 line: Optional[str] = None):
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"{tag}{location}: {reason}")
        self.tag = tag
        self.reason = reason
        self.line_number = line_number
        self.line = line


def parse_int(token: str) -> int:
    """
    Convert a decimal token to a signed integer.

    Args:
        token: Whitespace-free token from a procfs line

    Returns:
        Integer value

    Raises:
        ValueError: If token is not an optionally signed run of ASCII digits
    """
    digits = token[1:] if token[:1] in ("-", "+") else token
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"not an integer: {token!r}")
    return int(token)


def parse_unsigned(token: str) -> int:
    """Convert a decimal token to a non-negative integer."""
    if not (token.isascii() and token.isdigit()):
        raise ValueError(f"not an unsigned integer: {token!r}")
    return int(token)


# Template slot markers and their converters
SLOT_TYPES: Dict[str, Callable[[str], Any]] = {
    "%d": parse_int,
    "%u": parse_unsigned,
    "%s": str,
}


@dataclass(frozen=True)
class FieldScanner:
    """
    Match one labeled line against a whitespace-delimited template.

    The template's first token is the label, e.g. ``"Uid: %d %d %d %d"`` or
    ``"VmRSS: %d kB"``. Slot markers are taken from SLOT_TYPES; every other
    token is a literal that must appear verbatim. Each slot stores its value
    under the matching name in ``targets``.
    """

    template: str
    targets: Tuple[str, ...]

    def __post_init__(self):
        tokens = self.template.split()
        if not tokens:
            raise ValueError("empty field scanner template")
        if tokens[0] in SLOT_TYPES:
            raise ValueError(f"template must start with a label: {self.template!r}")

        slots = sum(1 for token in tokens if token in SLOT_TYPES)
        if slots != len(self.targets):
            raise ValueError(
                f"template {self.template!r} has {slots} slots "
                f"but {len(self.targets)} targets"
            )

    @property
    def label(self) -> str:
        return self.template.split()[0]

    def match(self, line: str) -> Optional[Dict[str, Any]]:
        """
        Extract slot values from a line.

        Args:
            line: One line of text, with or without trailing newline

        Returns:
            Dictionary of target name to value, or None if the line does
            not match. Tokens after the template are ignored.
        """
        expected = self.template.split()
        tokens = line.split()
        if len(tokens) < len(expected):
            return None

        values: List[Any] = []
        for want, got in zip(expected, tokens):
            convert = SLOT_TYPES.get(want)
            if convert is None:
                if want != got:
                    return None
                continue
            try:
                values.append(convert(got))
            except ValueError:
                return None

        return dict(zip(self.targets, values))


class OrderedRecordParser:
    """
    Assemble one flat record from a file whose lines arrive in a known order.

    Each scanner is tried against successive lines until it matches; lines
    that do not match the current scanner are discarded. The parser never
    backtracks, so scanners must be listed in the order the kernel emits
    their lines.
    """

    def __init__(self, scanners: Sequence[FieldScanner], record: str = "record"):
        """
        Initialize parser.

        Args:
            scanners: Field scanners in file order
            record: Record name used in error messages
        """
        self.scanners = tuple(scanners)
        self.record = record

    def _readline(self, stream: TextIO) -> str:
        try:
            return stream.readline()
        except OSError as e:
            raise ProcfsReadError(f"{self.record}: read failed: {e}") from e
        except UnicodeDecodeError as e:
            raise ProcfsFormatError(f"{self.record}: undecodable input: {e}") from e

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        """
        Read the stream once, top to bottom.

        Args:
            stream: Readable text stream positioned at the start of the file

        Returns:
            Dictionary with a value for every scanner target

        Raises:
            TruncatedInputError: If input ends before every scanner matched
            ProcfsReadError: If the stream raises an I/O error
            ProcfsFormatError: If the stream holds undecodable bytes
        """
        values: Dict[str, Any] = {}
        skipped = 0

        for scanner in self.scanners:
            while True:
                line = self._readline(stream)
                if not line:
                    raise TruncatedInputError(self.record, scanner.label)

                matched = scanner.match(line)
                if matched is not None:
                    values.update(matched)
                    break
                skipped += 1

        logger.debug("%s: matched %d fields, skipped %d lines",
                     self.record, len(values), skipped)
        return values
