import logging

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import QTimer, QElapsedTimer, QPointF
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QPainterPath

from animvis.errors import TransientRenderSkip

logger = logging.getLogger(__name__)


def to_painter_path(commands):
    path = QPainterPath()
    for op, *c in commands:
        if op == "M":
            path.moveTo(c[0], c[1])
        elif op == "L":
            path.lineTo(c[0], c[1])
        elif op == "C":
            path.cubicTo(c[0], c[1], c[2], c[3], c[4], c[5])
    return path


class FluidWidget(QWidget):
    def __init__(self, renderer, parent=None):
        super().__init__(parent)
        self.renderer = renderer
        self.paths = []

        # Rendering settings
        self.line_color = QColor("#3b7a57")
        self.line_color.setAlphaF(0.4)
        self.obstacle_fill = QColor("#f3f3f3")
        self.obstacle_stroke = QColor("#a3b6a1")
        self.bg_color = QColor("#121212")

        # Monotonic clock for the field's time axis
        self.clock = QElapsedTimer()
        self.clock.start()

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.animate)
        self.timer.start(16)

        self.setMinimumSize(200, 100)

    def animate(self):
        t = self.clock.elapsed() / 1000
        try:
            self.paths = [to_painter_path(cmds) for cmds in self.renderer.paths(t)]
        except TransientRenderSkip as e:
            logger.debug("Skipping fluid frame: %s", e)
            return
        self.update()

    def resizeEvent(self, event):
        self.renderer.resize(self.width(), self.height())
        super().resizeEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), self.bg_color)

        painter.setPen(QPen(self.line_color, 1.1))
        painter.setBrush(QBrush())
        for path in self.paths:
            painter.drawPath(path)

        obstacle = self.renderer.obstacle
        painter.setPen(QPen(self.obstacle_stroke, 2))
        painter.setBrush(QBrush(self.obstacle_fill))
        painter.drawEllipse(QPointF(obstacle.cx, obstacle.cy), obstacle.radius, obstacle.radius)
