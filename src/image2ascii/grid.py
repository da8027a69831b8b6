import random
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

Predicate = Callable[[int, int, str], bool]


@dataclass(frozen=True)
class CharPosition:
    x: int
    y: int


ORIGIN = CharPosition(0, 0)


class CharGrid:
    """Fixed-size 2-D buffer of single characters, stored row-major.

    Rectangle pastes clip against the grid bounds. Single-cell and single-row
    writes do not: an out-of-range index there is a programming error and
    raises IndexError.
    """

    def __init__(self, width: int, height: int):
        self._width = width
        self._height = height
        self.cells: list[list[str]] = [[" "] * width for _ in range(height)]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "CharGrid":
        """Build a grid from equal-length rows (strings or lists of characters).

        The width is taken from the first row; rows of other lengths are not
        checked for.
        """
        if not rows:
            return cls(0, 0)
        grid = cls(len(rows[0]), len(rows))
        for y in range(grid.height):
            for x in range(grid.width):
                grid.cells[y][x] = rows[y][x]
        return grid

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __getitem__(self, y: int) -> list[str]:
        return self.cells[y]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CharGrid):
            return NotImplemented
        return (self.width, self.height, self.cells) == (other.width, other.height, other.cells)

    def __repr__(self) -> str:
        return f"CharGrid(width={self.width}, height={self.height})"

    def __str__(self) -> str:
        return "\n".join(self.to_lines())

    def to_lines(self) -> list[str]:
        return ["".join(row) for row in self.cells]

    def save(self, path: str | Path) -> None:
        """Write each line followed by a line feed, including the last one."""
        path = Path(path)
        with path.open("w", encoding="utf-8", newline="\n") as f:
            for line in self.to_lines():
                f.write(line)
                f.write("\n")

    def overwrite_rect(self, source: "CharGrid", position: CharPosition, transparent: str | None = None) -> None:
        """Paste ``source`` with its top-left corner at ``position``.

        Cells of ``source`` falling outside this grid are dropped. Cells equal
        to ``transparent`` leave the destination untouched.
        """
        y_start = max(0, position.y)
        y_end = min(self.height, position.y + source.height)
        x_start = max(0, position.x)
        x_end = min(self.width, position.x + source.width)

        for y in range(y_start, y_end):
            src_row = source.cells[y - position.y]
            dst_row = self.cells[y]
            for x in range(x_start, x_end):
                ch = src_row[x - position.x]
                if transparent is not None and ch == transparent:
                    continue
                dst_row[x] = ch

    def overwrite_rect_centered(
        self, source: "CharGrid", position: CharPosition = ORIGIN, transparent: str | None = None
    ) -> None:
        """Paste ``source`` centred on this grid, shifted by ``position``."""
        offset = CharPosition(
            x=position.x + self.width // 2 - source.width // 2,
            y=position.y + self.height // 2 - source.height // 2,
        )
        self.overwrite_rect(source, offset, transparent)

    def copy_from(self, source: "CharGrid") -> None:
        self.overwrite_rect(source, ORIGIN)

    def overwrite_line(self, ch: str, row: int) -> None:
        if not 0 <= row < self.height:
            raise IndexError(f"row {row} out of range for grid of height {self.height}")
        self.cells[row][:] = [ch] * self.width

    def overwrite_char(self, ch: str, position: CharPosition) -> None:
        if not (0 <= position.x < self.width and 0 <= position.y < self.height):
            raise IndexError(f"{position} out of range for {self.width}x{self.height} grid")
        self.cells[position.y][position.x] = ch

    def overwrite_all(self, ch: str) -> None:
        for row in self.cells:
            row[:] = [ch] * self.width

    def overwrite_where(self, ch: str, predicate: Predicate) -> None:
        for y, row in enumerate(self.cells):
            for x, current in enumerate(row):
                if predicate(x, y, current):
                    row[x] = ch

    def overwrite_random_where(
        self, chars: Iterable[str], predicate: Predicate, rng: random.Random | None = None
    ) -> None:
        """Replace each matching cell with an independent uniform pick from ``chars``."""
        choices = list(chars)
        if not choices:
            raise ValueError("chars must not be empty")
        choose = (rng or random).choice
        for y, row in enumerate(self.cells):
            for x, current in enumerate(row):
                if predicate(x, y, current):
                    row[x] = choose(choices)
