"""
Sticker canvas widget.

Paints the stickers of a StickerBoard and forwards mouse input to it.
All interaction logic lives in the board; this widget only converts Qt
events to canvas points and draws the current state.
"""

import logging
from typing import Dict, Optional

from PyQt6.QtCore import Qt, QPointF, QRectF, QThread, pyqtSignal
from PyQt6.QtGui import QPainter, QPixmap, QPen, QColor, QBrush, QMouseEvent, QFont
from PyQt6.QtWidgets import QWidget

from models import Point, Sticker
from services.rendering import Handle, project, handle_positions, HANDLE_RADIUS
from services.sticker_board import StickerBoard
from services.image_probe import fetch_image_bytes, ImageLoadError
from .theme import HANDLE_FILL, HANDLE_BORDER, DELETE_FILL

logger = logging.getLogger(__name__)


HANDLE_CURSORS = {
    Handle.BODY: Qt.CursorShape.OpenHandCursor,
    Handle.ROTATE: Qt.CursorShape.CrossCursor,
    Handle.DELETE: Qt.CursorShape.PointingHandCursor,
    Handle.RESIZE_NW: Qt.CursorShape.SizeFDiagCursor,
    Handle.RESIZE_SE: Qt.CursorShape.SizeFDiagCursor,
    Handle.RESIZE_NE: Qt.CursorShape.SizeBDiagCursor,
    Handle.RESIZE_SW: Qt.CursorShape.SizeBDiagCursor,
}


class ImageFetchWorker(QThread):
    """Downloads one sticker image off the UI thread."""

    fetched = pyqtSignal(str, bytes)  # url, image bytes
    failed = pyqtSignal(str, str)  # url, reason

    def __init__(self, url: str, parent=None):
        super().__init__(parent)
        self.url = url

    def run(self):
        try:
            data = fetch_image_bytes(self.url)
        except ImageLoadError as e:
            self.failed.emit(self.url, str(e))
            return
        self.fetched.emit(self.url, data)


class StickerCanvas(QWidget):
    """
    Transparent layer on which stickers are drawn and manipulated.

    Signals:
        boardChanged: Emitted after any sticker or selection change
    """

    boardChanged = pyqtSignal()

    def __init__(self, board: StickerBoard, parent=None):
        super().__init__(parent)
        self._board = board
        self._pixmaps: Dict[str, QPixmap] = {}
        self._failed_urls = set()
        self._fetchers: Dict[str, ImageFetchWorker] = {}

        self.setMouseTracking(True)
        self.setMinimumSize(400, 300)
        self._board.add_listener(self._on_board_changed)

    @property
    def board(self) -> StickerBoard:
        return self._board

    def register_image(self, url: str, data: bytes):
        """Cache image bytes already fetched for a URL."""
        pixmap = QPixmap()
        if pixmap.loadFromData(data):
            self._pixmaps[url] = pixmap
            self._failed_urls.discard(url)

    def _on_board_changed(self):
        self.update()
        self.boardChanged.emit()

    def _pixmap_for(self, url: str) -> Optional[QPixmap]:
        """Cached pixmap for a URL; starts a download the first time one is missing."""
        pixmap = self._pixmaps.get(url)
        if pixmap is None and url not in self._failed_urls and url not in self._fetchers:
            self._start_fetch(url)
        return pixmap

    def _start_fetch(self, url: str):
        worker = ImageFetchWorker(url, self)
        worker.fetched.connect(self._on_image_fetched)
        worker.failed.connect(self._on_image_failed)
        worker.finished.connect(lambda: self._fetchers.pop(url, None))
        worker.finished.connect(worker.deleteLater)
        self._fetchers[url] = worker
        worker.start()

    def _on_image_fetched(self, url: str, data: bytes):
        self.register_image(url, data)
        if url not in self._pixmaps:
            logger.warning(f"Sticker image could not be decoded: {url[:80]}")
            self._failed_urls.add(url)
        self.update()

    def _on_image_failed(self, url: str, reason: str):
        logger.warning(f"Sticker image unavailable: {reason}")
        self._failed_urls.add(url)
        self.update()

    def wait_for_fetches(self, msecs: int):
        """Give running downloads a chance to finish before the widget goes away."""
        for worker in list(self._fetchers.values()):
            worker.wait(msecs)

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)

        selection = self._board.selection
        for sticker in self._board.paint_order():
            self._paint_sticker(
                painter, sticker,
                active=selection.is_active(sticker.id),
                editing=selection.is_editing(sticker.id),
            )
        painter.end()

    def _paint_sticker(self, painter: QPainter, sticker: Sticker, active: bool, editing: bool):
        placement = project(sticker.transform)
        center = placement.center
        rect = QRectF(-placement.width / 2, -placement.height / 2,
                      placement.width, placement.height)

        painter.save()
        painter.translate(center.x, center.y)
        painter.rotate(placement.rotation)
        painter.scale(placement.scale, placement.scale)

        pixmap = self._pixmap_for(sticker.url)
        if pixmap is not None:
            painter.drawPixmap(rect, pixmap, QRectF(pixmap.rect()))
        else:
            painter.setPen(QPen(QColor("#9CA3AF"), 1, Qt.PenStyle.DashLine))
            painter.setBrush(QBrush(QColor(243, 244, 246, 160)))
            painter.drawRect(rect)
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, "?")

        if active:
            style = Qt.PenStyle.SolidLine if editing else Qt.PenStyle.DashLine
            painter.setPen(QPen(QColor(HANDLE_BORDER), 1.5, style))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(rect)

        if editing:
            self._paint_handles(painter, sticker)

        painter.restore()

    def _paint_handles(self, painter: QPainter, sticker: Sticker):
        positions = handle_positions(sticker.size)

        # Stem from the top edge to the rotate handle
        top = QPointF(0.0, -sticker.size.height / 2)
        rotate = positions[Handle.ROTATE]
        painter.setPen(QPen(QColor(HANDLE_BORDER), 1.5))
        painter.drawLine(top, QPointF(rotate.x, rotate.y + HANDLE_RADIUS))

        for handle, pos in positions.items():
            center = QPointF(pos.x, pos.y)
            if handle is Handle.DELETE:
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QBrush(QColor(DELETE_FILL)))
                painter.drawEllipse(center, HANDLE_RADIUS, HANDLE_RADIUS)
                painter.setPen(QPen(QColor("white"), 2))
                d = HANDLE_RADIUS / 2
                painter.drawLine(QPointF(pos.x - d, pos.y - d), QPointF(pos.x + d, pos.y + d))
                painter.drawLine(QPointF(pos.x - d, pos.y + d), QPointF(pos.x + d, pos.y - d))
            else:
                radius = HANDLE_RADIUS if handle is Handle.ROTATE else HANDLE_RADIUS * 0.75
                painter.setPen(QPen(QColor(HANDLE_BORDER), 2))
                painter.setBrush(QBrush(QColor(HANDLE_FILL)))
                painter.drawEllipse(center, radius, radius)
                if handle is Handle.ROTATE:
                    font = QFont()
                    font.setPointSize(8)
                    painter.setFont(font)
                    painter.drawText(
                        QRectF(pos.x - HANDLE_RADIUS, pos.y - HANDLE_RADIUS,
                               HANDLE_RADIUS * 2, HANDLE_RADIUS * 2),
                        Qt.AlignmentFlag.AlignCenter, "↻",
                    )

    # ------------------------------------------------------------------
    # Mouse input
    # ------------------------------------------------------------------

    @staticmethod
    def _point(event: QMouseEvent) -> Point:
        pos = event.position()
        return Point(pos.x(), pos.y())

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._board.press(self._point(event))
            if self._board.engine.has_session:
                self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        point = self._point(event)
        if event.buttons() & Qt.MouseButton.LeftButton:
            self._board.move(point)
        else:
            self._update_hover_cursor(point)
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            point = self._point(event)
            self._board.release(point)
            self._update_hover_cursor(point)
            event.accept()
        else:
            super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        self._board.leave()
        self.unsetCursor()
        super().leaveEvent(event)

    def _update_hover_cursor(self, point: Point):
        hit = self._board.sticker_at(point)
        if hit is None:
            self.unsetCursor()
        else:
            self.setCursor(HANDLE_CURSORS[hit[1]])
