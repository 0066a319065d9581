from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import QTimer, QPointF
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush, QPainterPath, QRadialGradient

# Gradient stops (inner, outer)
GRADIENTS = {
    "gray": ("#bbbbbb", "#444444"),
    "white": ("#ffffff", "#cccccc"),
    "red": ("#ff6666", "#b30000"),
}

# x, y, radius, gradient, stroke
ATOMS = [
    (0, 0, 10, "gray", "#666666"),
    (0, -20, 8, "white", "#999999"),
    (18, 10, 8, "white", "#999999"),
    (-18, 10, 8, "white", "#999999"),
    (0, 22, 8, "red", "#990000"),
]

BONDS = [(0, 1), (0, 2), (0, 3), (0, 4)]

# Model spans roughly [-60, 60] on both axes
VIEW_EXTENT = 120


class MoleculeWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.angle = 0.0
        self.step_degrees = 0.3
        self.bond_color = QColor("#999999")
        self.bg_color = QColor("#121212")

        self.timer = QTimer(self)
        self.timer.timeout.connect(self.rotate)
        self.timer.start(16)

        self.setMinimumSize(150, 150)

    def rotate(self):
        self.angle = (self.angle + self.step_degrees) % 360
        self.update()

    def bond_path(self, source, target):
        sx, sy = ATOMS[source][:2]
        tx, ty = ATOMS[target][:2]
        mx = (sx + tx) / 2
        my = (sy + ty) / 2 + (10 if tx > sx else -10)
        path = QPainterPath(QPointF(sx, sy))
        path.quadTo(mx, my, tx, ty)
        return path

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), self.bg_color)

        # Fit the model into 70% of the shorter side
        scale = 0.7 * min(self.width(), self.height()) / VIEW_EXTENT
        painter.translate(self.width() / 2, self.height() / 2)
        painter.scale(scale, scale)
        painter.rotate(self.angle)

        painter.setPen(QPen(self.bond_color, 3))
        painter.setBrush(QBrush())
        for source, target in BONDS:
            painter.drawPath(self.bond_path(source, target))

        for x, y, r, gradient, stroke in ATOMS:
            inner, outer = GRADIENTS[gradient]
            grad = QRadialGradient(QPointF(x, y), r)
            grad.setColorAt(0.0, QColor(inner))
            grad.setColorAt(1.0, QColor(outer))
            painter.setPen(QPen(QColor(stroke), 1.5))
            painter.setBrush(QBrush(grad))
            painter.drawEllipse(QPointF(x, y), r, r)
