"""
Viewport navigation over the account list.

The navigator decides which slice of the store is visible and which row
is selected. It never draws anything; screens ask it for the visible range
and the cursor row and render them.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ViewState:
    """Snapshot of the visible window."""

    window_start: int
    cursor_index: int
    window_size: int

    @property
    def selected(self) -> int:
        return self.window_start + self.cursor_index


class ViewportNavigator:
    """Bounded, scrolling selection over a collection of ``count`` records."""

    def __init__(self, count: int = 0, height: int = 0,
                 fixed_ui_rows: int = 6, max_rows: int = 40):
        self.fixed_ui_rows = fixed_ui_rows
        self.max_rows = max_rows
        self.count = max(0, count)
        self.height = height
        self.window_start = 0
        self.cursor_index = 0
        self.window_size = self._window_size_for(height)
        self._normalize()

    @classmethod
    def from_config(cls, config, count: int = 0, height: int = 0) -> "ViewportNavigator":
        """Create a navigator using the presentation limits of a LedgerConfig."""
        return cls(count, height, fixed_ui_rows=config.fixed_ui_rows, max_rows=config.max_rows)

    def _window_size_for(self, height: int) -> int:
        return max(0, min(height - self.fixed_ui_rows, self.max_rows))

    @property
    def state(self) -> ViewState:
        return ViewState(self.window_start, self.cursor_index, self.window_size)

    @property
    def selected(self) -> Optional[int]:
        """Global index of the selected record, or None for an empty store."""
        if not self.count:
            return None
        return self.window_start + self.cursor_index

    def _active(self) -> bool:
        return self.count > 0 and self.window_size > 0

    def _normalize(self):
        """Re-establish the window invariants while keeping the selection."""
        if not self.count:
            self.window_start = 0
            self.cursor_index = 0
            return

        selected = min(max(self.window_start + self.cursor_index, 0), self.count - 1)
        if not self.window_size:
            self.window_start = selected
            self.cursor_index = 0
            return

        # The last window is always a full one
        last_start = max(0, self.count - self.window_size)
        start = min(max(self.window_start, 0), last_start)
        if selected < start:
            start = selected
        elif selected >= start + self.window_size:
            start = selected - self.window_size + 1
        self.window_start = start
        self.cursor_index = selected - start

    def move_down(self):
        """Select the next record, wrapping to the first after the last."""
        if not self._active():
            return
        if self.window_start + self.cursor_index >= self.count - 1:
            self.window_start = 0
            self.cursor_index = 0
        elif self.cursor_index == self.window_size - 1:
            self.window_start += 1
        else:
            self.cursor_index += 1

    def move_up(self):
        """Select the previous record, wrapping to the last after the first."""
        if not self._active():
            return
        if self.cursor_index > 0:
            self.cursor_index -= 1
        elif self.window_start > 0:
            self.window_start -= 1
        elif self.count <= self.window_size:
            self.cursor_index = self.count - 1
        else:
            self.window_start = self.count - self.window_size
            self.cursor_index = self.window_size - 1

    def resize(self, height: int):
        """Recompute the window for a new terminal height."""
        self.height = height
        self.window_size = self._window_size_for(height)
        self._normalize()

    def sync(self, count: int):
        """Adjust to a store that grew or shrank."""
        self.count = max(0, count)
        self._normalize()

    def jump_to(self, index: int):
        """Select a record by global index, scrolling only if it is hidden."""
        if not self.count:
            return
        index = min(max(index, 0), self.count - 1)
        self.cursor_index = index - self.window_start
        if self.cursor_index < 0:
            self.window_start = index
            self.cursor_index = 0
        self._normalize()

    def select_confirmed(self) -> Optional[int]:
        """Return the index the operator chose."""
        return self.selected

    def visible_range(self) -> range:
        """Indices of the records to render, top to bottom."""
        end = min(self.count, self.window_start + self.window_size)
        return range(self.window_start, end)
