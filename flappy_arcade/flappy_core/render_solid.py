"""
Solid Renderer
==============

Fast numpy-based renderer that draws pipes as solid rectangles and the bird
as a filled circle. Uses OpenCV for score text when available.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence
import numpy as np

# Try to import cv2 for text rendering
try:
    import cv2
    CV2_AVAILABLE = True
except ImportError:
    CV2_AVAILABLE = False


class SolidRenderer:
    """
    Renders the game state to an RGB array.

    Uses numpy for fast CPU-based rendering without pygame.
    """

    def __init__(self, show_score: bool = True):
        """
        Initialize renderer.

        Args:
            show_score: Whether to draw the score text.
        """
        self._show_score = show_score

        self._bg_color = np.array([125, 192, 255], dtype=np.uint8)
        self._pipe_color = np.array([60, 170, 73], dtype=np.uint8)
        self._pipe_edge_color = np.array([43, 120, 57], dtype=np.uint8)
        self._bird_color = np.array([255, 219, 94], dtype=np.uint8)
        self._bird_dead_color = np.array([200, 60, 60], dtype=np.uint8)
        self._letterbox_color = np.array([20, 20, 25], dtype=np.uint8)

        self._text_color = (255, 255, 255)
        self._text_shadow = (40, 40, 50)

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._letterbox_color

        viewport_width = render_data["viewport_width"]
        viewport_height = render_data["viewport_height"]
        if viewport_width <= 0 or viewport_height <= 0:
            return img

        # Uniform scale, centered
        scale = min(width / viewport_width, height / viewport_height)
        offset_x = (width - viewport_width * scale) / 2
        offset_y = (height - viewport_height * scale) / 2

        sky = (0.0, 0.0, viewport_width, viewport_height)
        self._fill_rect(img, sky, scale, offset_x, offset_y, self._bg_color)

        for pipe in render_data["pipes"]:
            for rect in (pipe["top_rect"], pipe["bottom_rect"]):
                self._fill_rect(img, rect, scale, offset_x, offset_y, self._pipe_color)
                self._outline_rect(img, rect, scale, offset_x, offset_y, self._pipe_edge_color)

        cx = int(render_data["bird_x"] * scale + offset_x)
        cy = int(render_data["bird_y"] * scale + offset_y)
        radius = max(1, int(render_data["bird_radius"] * scale))
        color = self._bird_dead_color if render_data.get("is_over") else self._bird_color
        self._draw_circle(img, cx, cy, radius, color)

        if self._show_score:
            self._draw_score(img, render_data.get("score", 0), width)

        return img

    def _to_pixels(
        self,
        rect: Sequence[float],
        scale: float,
        offset_x: float,
        offset_y: float,
        img: np.ndarray
    ):
        """Convert a viewport rect to clipped (x0, y0, x1, y1) image indices."""
        height, width = img.shape[:2]
        left, top, right, bottom = rect
        x0 = max(0, int(left * scale + offset_x))
        y0 = max(0, int(top * scale + offset_y))
        x1 = min(width, int(right * scale + offset_x))
        y1 = min(height, int(bottom * scale + offset_y))
        return x0, y0, x1, y1

    def _fill_rect(self, img, rect, scale, offset_x, offset_y, color) -> None:
        x0, y0, x1, y1 = self._to_pixels(rect, scale, offset_x, offset_y, img)
        if x0 >= x1 or y0 >= y1:
            return
        img[y0:y1, x0:x1] = color

    def _outline_rect(self, img, rect, scale, offset_x, offset_y, color) -> None:
        x0, y0, x1, y1 = self._to_pixels(rect, scale, offset_x, offset_y, img)
        if x0 >= x1 or y0 >= y1:
            return
        img[y0:y1, x0:x0 + 1] = color
        img[y0:y1, x1 - 1:x1] = color

    def _draw_score(self, img: np.ndarray, score: int, width: int) -> None:
        """Draw score centered at the top of the image."""
        if not CV2_AVAILABLE:
            return

        text = str(score)
        font = cv2.FONT_HERSHEY_SIMPLEX
        font_scale = 0.8
        thickness = 2

        text_size = cv2.getTextSize(text, font, font_scale, thickness)[0]
        x = (width - text_size[0]) // 2
        cv2.putText(img, text, (x + 2, 32), font, font_scale, self._text_shadow, thickness + 1)
        cv2.putText(img, text, (x, 30), font, font_scale, self._text_color, thickness)

    def _draw_circle(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray
    ) -> None:
        """Draw a filled circle using numpy."""
        height, width = img.shape[:2]

        # Calculate bounding box
        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)

        if y_min >= y_max or x_min >= x_max:
            return

        y_coords = np.arange(y_min, y_max)
        x_coords = np.arange(x_min, x_max)
        yy, xx = np.meshgrid(y_coords, x_coords, indexing='ij')

        mask = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius ** 2
        img[y_min:y_max, x_min:x_max][mask] = color

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
