import logging

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import QTimer, Qt, QPointF, pyqtSignal
from PyQt6.QtGui import QPainter, QColor, QPen, QBrush

from animvis.errors import TransientRenderSkip

logger = logging.getLogger(__name__)

# Ordinal palette, assigned to groups in order of first appearance
CATEGORY10 = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
]


class GraphWidget(QWidget):
    nodeDragged = pyqtSignal(str)

    def __init__(self, engine, parent=None):
        super().__init__(parent)
        self.engine = engine

        # Rendering settings
        self.node_radius = 12
        self.edge_color = QColor("#999999")
        self.edge_color.setAlphaF(0.6)
        self.node_stroke = QColor("#ffffff")
        self.bg_color = QColor("#121212")
        self.group_colors = {}

        # Interaction
        self.dragging_key = None

        # Physics Timer
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.physics_loop)
        self.timer.start(16)  # ~60 FPS

        self.setMouseTracking(True)
        self.setMinimumSize(200, 200)

    def set_engine(self, engine):
        self.engine = engine
        self.dragging_key = None
        self.group_colors = {}
        self.engine.resize(self.width(), self.height())
        self.update()

    def physics_loop(self):
        if self.engine.active:
            try:
                self.engine.step()
            except TransientRenderSkip as e:
                logger.debug("Skipping graph frame: %s", e)
                return
        self.update()

    def color_for(self, group):
        if group not in self.group_colors:
            self.group_colors[group] = QColor(CATEGORY10[len(self.group_colors) % len(CATEGORY10)])
        return self.group_colors[group]

    def resizeEvent(self, event):
        self.engine.resize(self.width(), self.height())
        super().resizeEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), self.bg_color)

        # Draw Edges
        painter.setPen(QPen(self.edge_color, 2))
        for _, _, x1, y1, x2, y2 in self.engine.link_segments():
            painter.drawLine(QPointF(x1, y1), QPointF(x2, y2))

        # Draw Nodes
        painter.setPen(QPen(self.node_stroke, 1.5))
        for node in self.engine.nodes.values():
            painter.setBrush(QBrush(self.color_for(node.group)))
            painter.drawEllipse(QPointF(node.x, node.y), self.node_radius, self.node_radius)

    def node_at(self, pos):
        for node in self.engine.nodes.values():
            dx = pos.x() - node.x
            dy = pos.y() - node.y
            if dx * dx + dy * dy <= self.node_radius * self.node_radius:
                return node
        return None

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        node = self.node_at(event.position())
        if node is not None:
            self.dragging_key = node.key
            self.engine.drag_start(node.key, owner=self)
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            self.nodeDragged.emit(str(node.key))

    def mouseMoveEvent(self, event):
        if self.dragging_key is not None:
            pos = event.position()
            self.engine.drag_move(self.dragging_key, pos.x(), pos.y(), owner=self)

    def mouseReleaseEvent(self, event):
        if self.dragging_key is not None:
            self.engine.drag_end(self.dragging_key, owner=self)
            self.dragging_key = None
        self.setCursor(Qt.CursorShape.ArrowCursor)
