from __future__ import annotations

import math
from typing import List, Optional, Tuple

from .drawing import ACCENT_BGR, draw_rounded_box, draw_text, text_width
from .types import OverlayPosition, Rect2
from .utils import percent_to_px


LABEL = "SUBJECT IDENTIFIED"
LABEL_SCALE = 0.75
CAPTION_SCALE = 0.6
PADDING_PX = 20
LABEL_HEIGHT_PX = 34


class OverlayView:
    """
    The on-screen annotation box: anchored by percentage offsets, sized by its content.

    Width follows the longest of the label and the wrapped caption lines (up to
    `caption_width_px` of caption), height follows the number of caption lines.
    """

    def __init__(self, line_height_px: int = 24, caption_width_px: int = 360, label: str = LABEL) -> None:
        self.line_height_px = line_height_px
        self.caption_width_px = caption_width_px
        self.label = label
        self.position: Optional[OverlayPosition] = None
        self.caption = ""

    @property
    def visible(self) -> bool:
        return self.position is not None

    def show_at(self, position: OverlayPosition) -> None:
        self.position = position

    def hide(self) -> None:
        self.position = None

    def set_caption(self, text: str) -> None:
        self.caption = text

    def wrap(self, text: str) -> List[str]:
        """Greedy word wrap to `caption_width_px`; a single over-long word gets a line of its own."""
        lines: List[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            if current and text_width(candidate, CAPTION_SCALE) > self.caption_width_px:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines

    def caption_height(self, text: str) -> int:
        return len(self.wrap(text)) * self.line_height_px

    def line_count(self, text: str) -> int:
        return math.ceil(self.caption_height(text) / self.line_height_px)

    def box_size(self) -> Tuple[int, int]:
        lines = self.wrap(self.caption)
        content_w = max([text_width(self.label, LABEL_SCALE, 2)] + [text_width(s, CAPTION_SCALE) for s in lines])
        w = content_w + 2 * PADDING_PX
        h = LABEL_HEIGHT_PX + len(lines) * self.line_height_px + 2 * PADDING_PX
        return w, h

    def box_rect(self, frame_w: int, frame_h: int) -> Optional[Rect2]:
        if self.position is None:
            return None
        x = percent_to_px(self.position.left_percent, frame_w)
        y = percent_to_px(self.position.top_percent, frame_h)
        w, h = self.box_size()
        return (x, y, w, h)

    def draw(self, frame):
        """Draw onto the mirrored display frame."""
        h, w = frame.shape[:2]
        rect = self.box_rect(w, h)
        if rect is None:
            return frame
        x, y, _, _ = rect
        draw_rounded_box(frame, rect)
        draw_text(frame, self.label, (x + PADDING_PX, y + PADDING_PX + 22), ACCENT_BGR, LABEL_SCALE, 2)
        baseline = y + PADDING_PX + LABEL_HEIGHT_PX + 18
        for i, line in enumerate(self.wrap(self.caption)):
            draw_text(frame, line, (x + PADDING_PX, baseline + i * self.line_height_px), (255, 255, 255), CAPTION_SCALE, 1)
        return frame
