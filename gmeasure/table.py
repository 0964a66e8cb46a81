"""Plain-text tables with column sizing, word wrapping, alignment and style markup."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

STYLE_RESET = "{{/}}"


class AlignType(enum.IntEnum):
    """Horizontal alignment of the text inside a cell."""

    LEFT = 0
    CENTER = 1
    RIGHT = 2


class Divider(str):
    """The string drawn, repeated, as the horizontal border below a row."""


@dataclass
class TableStyle:
    """Layout and styling options for a table."""

    padding: int = 1
    vertical_borders: bool = True
    horizontal_borders: bool = True
    max_table_width: int = 120
    max_col_width: int = 40
    enable_text_styling: bool = True


@dataclass
class Cell:
    """A table cell holding one or more lines of text."""

    contents: list[str] = field(default_factory=list)
    style: str = ""
    align: AlignType = AlignType.LEFT

    def width(self) -> tuple[int, int]:
        """Return the widest line and the longest word of the cell."""
        widest = max((len(line) for line in self.contents), default=0)
        longest_word = max(
            (len(word) for line in self.contents for word in line.split(" ")),
            default=0,
        )
        return widest, longest_word

    def _align_line(self, line: str, width: int) -> str:
        gap = width - len(line)
        if gap <= 0:
            return line
        if self.align is AlignType.RIGHT:
            return " " * gap + line
        if self.align is AlignType.CENTER:
            left = gap // 2
            return " " * left + line + " " * (gap - left)
        return line + " " * gap

    @staticmethod
    def _split_word_to_width(word: str, width: int) -> list[str]:
        pieces = []
        chunk = ""
        for char in word:
            chunk += char
            if len(chunk) == width - 1:
                pieces.append(chunk + "-")
                chunk = ""
        return pieces

    def _break_word(self, word: str, width: int, out_lines: list[str]) -> tuple[list[str], int]:
        pieces = self._split_word_to_width(word, width)
        if not pieces:
            raise ValueError(f"column width {width} is too narrow to split {word!r}")
        out_lines.extend(pieces[:-1])
        last = pieces[-1]
        return [last], len(last)

    def _split_to_width(self, line: str, width: int) -> list[str]:
        if len(line) <= width:
            return [line]

        out_lines: list[str] = []
        first, *rest = line.split(" ")
        out_words = [first]
        length = len(first)
        if length > width:
            out_words, length = self._break_word(first, width, out_lines)

        for word in rest:
            if length + len(word) + 1 <= width:
                length += len(word) + 1
                out_words.append(word)
                continue
            out_lines.append(" ".join(out_words))
            out_words = [word]
            length = len(word)
            if length > width:
                out_words, length = self._break_word(word, width, out_lines)

        if out_words:
            out_lines.append(" ".join(out_words))
        return out_lines

    def render(self, width: int, style: str, table_style: TableStyle) -> list[str]:
        """Wrap, align and optionally style the cell's lines to the given width."""
        lines = [
            piece for line in self.contents for piece in self._split_to_width(line, width)
        ]
        lines = [self._align_line(line, width) for line in lines]
        if table_style.enable_text_styling:
            style = style + self.style
            if style:
                lines = [f"{style}{line}{STYLE_RESET}" for line in lines]
        return lines


def cell(contents: str, *args: object) -> Cell:
    """Build a cell; string arguments set its style, AlignType arguments its alignment."""
    result = Cell(contents=contents.split("\n"))
    for arg in args:
        if isinstance(arg, AlignType):
            result.align = arg
        elif isinstance(arg, Divider):
            continue
        elif isinstance(arg, str):
            result.style = arg
    return result


@dataclass
class Row:
    """A table row: its cells, the divider drawn below it and its style."""

    cells: list[Cell] = field(default_factory=list)
    divider: str = "-"
    style: str = ""

    def append_cell(self, *args: Cell) -> Row:
        """Append cells to the row and return the row."""
        self.cells.extend(args)
        return self

    def render(
        self,
        widths: list[int],
        total_width: int,
        table_style: TableStyle,
        is_last_row: bool,
    ) -> str:
        """Render the row, followed by its divider unless it is the last row."""
        if len(self.cells) == 1:
            lines = self.cells[0].render(total_width, self.style, table_style)
            out = "\n".join(lines) + "\n"
        else:
            if len(self.cells) != len(widths):
                raise ValueError("row vs width mismatch")
            rendered = [
                c.render(width, self.style, table_style)
                for c, width in zip(self.cells, widths)
            ]
            height = max((len(lines) for lines in rendered), default=0)
            for lines, width in zip(rendered, widths):
                lines.extend([" " * width] * (height - len(lines)))
            border = " " * table_style.padding
            if table_style.vertical_borders:
                border += "|" + border
            out = "".join(border.join(parts) + "\n" for parts in zip(*rendered))

        if table_style.horizontal_borders and not is_last_row and self.divider:
            out += self.divider * total_width + "\n"
        return out


def row(*args: object) -> Row:
    """Build a row from cells, an optional Divider and an optional style string."""
    result = Row()
    for arg in args:
        if isinstance(arg, Divider):
            result.divider = str(arg)
        elif isinstance(arg, Cell):
            result.cells.append(arg)
        elif isinstance(arg, str):
            result.style = arg
    return result


@dataclass
class Table:
    """A list of rows rendered with a shared column layout."""

    rows: list[Row] = field(default_factory=list)
    table_style: TableStyle = field(default_factory=TableStyle)

    def append_row(self, row: Row) -> Table:
        """Append a row and return the table."""
        self.rows.append(row)
        return self

    def render(self) -> str:
        """Render the whole table as text."""
        total_width, widths = self._compute_widths()
        last = len(self.rows) - 1
        return "".join(
            r.render(widths, total_width, self.table_style, index == last)
            for index, r in enumerate(self.rows)
        )

    def _compute_widths(self) -> tuple[int, list[int]]:
        style = self.table_style
        n_col = max((len(r.cells) for r in self.rows), default=0)

        border_width = style.padding
        if style.vertical_borders:
            border_width += 1 + style.padding
        total_border = border_width * (n_col - 1)

        widths = [0] * n_col
        min_widths = [0] * n_col
        for r in self.rows:
            for index, c in enumerate(r.cells):
                width, min_width = c.width()
                widths[index] = max(widths[index], width)
                min_widths[index] = max(min_widths[index], min_width)

        if sum(widths) + total_border <= style.max_table_width:
            return sum(widths) + total_border, widths

        widths = [min(w, style.max_col_width) for w in widths]
        min_widths = [min(w, style.max_col_width) for w in min_widths]

        if sum(widths) + total_border <= style.max_table_width:
            return sum(widths) + total_border, widths

        if sum(min_widths) + total_border >= style.max_table_width:
            return sum(min_widths) + total_border, min_widths

        # Scale columns down proportionally, never below their longest word.
        for _ in range(101):
            if sum(widths) + total_border <= style.max_table_width:
                break
            budget = style.max_table_width - total_border
            baseline = sum(widths)
            widths = [
                max((w * budget) // baseline, floor) for w, floor in zip(widths, min_widths)
            ]

        return sum(widths) + total_border, widths