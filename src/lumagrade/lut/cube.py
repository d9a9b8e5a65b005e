"""Parse, sample and write ``.cube`` 3D LUT files.

The lattice is stored as a ``[b, g, r, 3]`` array so that the file's row
order (red fastest, then green, then blue) is a plain C-order reshape.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from numpy.typing import ArrayLike, NDArray

from lumagrade.constants import DEFAULT_LUT_TITLE, MAX_LUT_SIZE, MIN_LUT_SIZE, UNTITLED_LUT
from lumagrade.lut.kernels import trilinear_numba

logger = logging.getLogger(__name__)

_DATA_LINE = re.compile(r"^[0-9.+\-]")


class LUTParseError(ValueError):
    """Malformed ``.cube`` text.

    Attributes:
        reason: Human-readable reason, e.g. "missing LUT_3D_SIZE"
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True, eq=False)
class CubeLUT:
    """Parsed 3D LUT lattice.

    Attributes:
        title: Title from the TITLE line (or "Untitled LUT")
        table: Lattice [size, size, size, 3] indexed [b, g, r]
        domain_min: DOMAIN_MIN triple as declared in the file
        domain_max: DOMAIN_MAX triple as declared in the file
    """

    title: str
    table: NDArray[np.float64]
    domain_min: tuple[float, float, float] = (0.0, 0.0, 0.0)
    domain_max: tuple[float, float, float] = (1.0, 1.0, 1.0)

    @property
    def size(self) -> int:
        return self.table.shape[0]

    @classmethod
    def identity(cls, size: int, title: str = "Identity") -> CubeLUT:
        """Build a lattice that maps every color to itself.

        :param size: Grid points per axis
        :param title: LUT title
        :raises ValueError: If size is outside the supported range
        """
        validate_lut_size(size)
        axis = np.linspace(0.0, 1.0, size)
        b, g, r = np.meshgrid(axis, axis, axis, indexing="ij")
        return cls(title=title, table=np.stack([r, g, b], axis=-1))

    def apply(self, colors: ArrayLike) -> NDArray[np.float64]:
        """Sample the lattice with trilinear interpolation.

        :param colors: RGB colors [..., 3]; clamped to [0, 1]
        :returns: Mapped colors with the same shape
        """
        colors = np.asarray(colors, dtype=np.float64)
        flat = np.ascontiguousarray(colors.reshape(-1, 3))
        out = np.empty_like(flat)
        trilinear_numba(self.table, flat, out)
        return out.reshape(colors.shape)

    def to_text(self) -> str:
        return format_cube(self.table, self.title)

    def __repr__(self) -> str:
        return f"CubeLUT({self.title!r}, size={self.size})"


def validate_lut_size(size: int) -> int:
    """Check a lattice size.

    :raises ValueError: If size is outside [MIN_LUT_SIZE, MAX_LUT_SIZE]
    """
    if not MIN_LUT_SIZE <= size <= MAX_LUT_SIZE:
        raise ValueError(f"LUT size {size} is outside valid range [{MIN_LUT_SIZE}, {MAX_LUT_SIZE}]")
    return size


def _parse_row(line: str, line_no: int) -> list[float]:
    parts = line.split()
    try:
        row = [float(p) for p in parts]
    except ValueError:
        raise LUTParseError(f"invalid data on line {line_no}") from None
    if len(row) != 3 or not all(np.isfinite(v) for v in row):
        raise LUTParseError(f"invalid data on line {line_no}")
    return row


def _parse_triple(parts: list[str], keyword: str) -> tuple[float, float, float]:
    try:
        r, g, b = (float(p) for p in parts[1:4])
    except ValueError:
        raise LUTParseError(f"invalid {keyword}") from None
    return (r, g, b)


def parse_cube(text: str) -> CubeLUT:
    """Parse ``.cube`` text into a lattice.

    Recognizes TITLE, LUT_3D_SIZE, DOMAIN_MIN/DOMAIN_MAX, ``#`` comments and
    data rows. Other keywords are ignored. Only the [0, 1] domain is
    supported; other domains are logged and sampled as if they were [0, 1].

    :param text: File contents
    :returns: Parsed CubeLUT
    :raises LUTParseError: If LUT_3D_SIZE is missing or invalid, a data row is
        not three finite numbers, or there are fewer than ``size**3 * 3`` data values
    """
    title = UNTITLED_LUT
    size: int | None = None
    domain_min = (0.0, 0.0, 0.0)
    domain_max = (1.0, 1.0, 1.0)
    values: list[float] = []

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("TITLE"):
            quoted = line.split('"')
            title = quoted[1] if len(quoted) > 1 else line[len("TITLE") :].strip()
        elif line.startswith("LUT_3D_SIZE"):
            parts = line.split()
            try:
                size = int(parts[1])
            except (IndexError, ValueError):
                raise LUTParseError("invalid LUT_3D_SIZE") from None
            if size < MIN_LUT_SIZE or size > MAX_LUT_SIZE:
                raise LUTParseError("invalid LUT_3D_SIZE")
        elif line.startswith("DOMAIN_MIN"):
            domain_min = _parse_triple(line.split(), "DOMAIN_MIN")
        elif line.startswith("DOMAIN_MAX"):
            domain_max = _parse_triple(line.split(), "DOMAIN_MAX")
        elif _DATA_LINE.match(line):
            values.extend(_parse_row(line, line_no))

    if size is None:
        raise LUTParseError("missing LUT_3D_SIZE")

    expected = size**3 * 3
    if len(values) < expected:
        raise LUTParseError(f"insufficient data points: expected {expected}, found {len(values)}")
    if len(values) > expected:
        logger.debug("[LUT] Ignoring %d trailing values in '%s'", len(values) - expected, title)

    if domain_min != (0.0, 0.0, 0.0) or domain_max != (1.0, 1.0, 1.0):
        logger.warning(
            "[LUT] '%s' declares domain %s..%s; only 0..1 is supported",
            title,
            domain_min,
            domain_max,
        )

    table = np.asarray(values[:expected], dtype=np.float64).reshape(size, size, size, 3)
    return CubeLUT(title=title, table=table, domain_min=domain_min, domain_max=domain_max)


def format_cube(table: ArrayLike, title: str = DEFAULT_LUT_TITLE) -> str:
    """Write a lattice as ``.cube`` text.

    :param table: Lattice [size, size, size, 3] indexed [b, g, r]
    :param title: Value of the TITLE line
    :returns: Header plus one ``"r g b"`` row per grid point, 6 decimals, red fastest
    """
    table = np.asarray(table, dtype=np.float64)
    size = table.shape[0]
    if table.shape != (size, size, size, 3):
        raise ValueError(f"expected lattice of shape (N, N, N, 3), got {table.shape}")

    lines = [
        f'TITLE "{title}"',
        f"LUT_3D_SIZE {size}",
        "DOMAIN_MIN 0.0 0.0 0.0",
        "DOMAIN_MAX 1.0 1.0 1.0",
    ]
    lines.extend(f"{r:.6f} {g:.6f} {b:.6f}" for r, g, b in table.reshape(-1, 3).tolist())
    return "\n".join(lines) + "\n"


def load_cube(path: str | Path) -> CubeLUT:
    """Read and parse a ``.cube`` file.

    :param path: Path to the file
    :returns: Parsed CubeLUT
    :raises LUTParseError: If the file is malformed
    """
    lut = parse_cube(Path(path).read_text())
    logger.info("[LUT] Loaded '%s' (size %d) from %s", lut.title, lut.size, path)
    return lut


def save_cube(lut: CubeLUT, path: str | Path) -> None:
    """Write a lattice to a ``.cube`` file."""
    Path(path).write_text(lut.to_text())
    logger.info("[LUT] Saved '%s' (size %d) to %s", lut.title, lut.size, path)
