import json
import logging
import sys

from PyQt6.QtWidgets import QApplication, QMainWindow, QFileDialog, QMessageBox, QSplitter
from PyQt6.QtGui import QAction, QPalette, QColor
from PyQt6.QtCore import Qt

from animvis.errors import ConfigurationError
from animvis.fluid_field import FluidFieldRenderer
from animvis.graph_engine import GraphLayoutEngine, demo_graph
from animvis.ui.fluid_widget import FluidWidget
from animvis.ui.graph_widget import GraphWidget
from animvis.ui.molecule_widget import MoleculeWidget
from animvis.ui.preferences import PreferencesDialog

logger = logging.getLogger(__name__)

# Fallback size until the containers are laid out
DEFAULT_SIZE = (250, 250)


def load_graph_file(path, width, height):
    """Reads a node-link JSON file into a layout engine."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"{path} is not valid UTF-8 JSON: {e}") from e
    return GraphLayoutEngine.from_node_link(data, width, height)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("AnimVis - Animated Scenes")
        self.resize(1200, 450)

        # State
        self.current_theme = "Dark"

        # Setup Logic
        self.engine = GraphLayoutEngine.from_networkx(demo_graph(), *DEFAULT_SIZE)
        self.renderer = FluidFieldRenderer(*DEFAULT_SIZE, line_count=10)

        # Setup UI
        self.init_ui()
        self.setup_theme(self.current_theme)

    def init_ui(self):
        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.setCentralWidget(self.splitter)

        self.graph_widget = GraphWidget(self.engine)
        self.graph_widget.nodeDragged.connect(self.on_node_dragged)
        self.molecule_widget = MoleculeWidget()
        self.fluid_widget = FluidWidget(self.renderer)

        self.splitter.addWidget(self.graph_widget)
        self.splitter.addWidget(self.molecule_widget)
        self.splitter.addWidget(self.fluid_widget)
        self.splitter.setStretchFactor(0, 40)
        self.splitter.setStretchFactor(1, 20)
        self.splitter.setStretchFactor(2, 40)

        self.create_menu()

    def create_menu(self):
        menu = self.menuBar()
        menu.clear()

        file_menu = menu.addMenu("&File")

        open_action = QAction("Open Graph...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_file_dialog)
        file_menu.addAction(open_action)

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        edit_menu = menu.addMenu("&Edit")
        pref_action = QAction("Preferences", self)
        pref_action.triggered.connect(self.open_preferences)
        edit_menu.addAction(pref_action)

        view_menu = menu.addMenu("&View")
        reheat_action = QAction("Reheat Layout", self)
        reheat_action.triggered.connect(self.reheat_layout)
        view_menu.addAction(reheat_action)

    def on_node_dragged(self, key):
        self.statusBar().showMessage(f"Dragging node {key}", 2000)

    def reheat_layout(self):
        self.engine.reheat()

    def open_preferences(self):
        dlg = PreferencesDialog(self, len(self.renderer.lines), self.current_theme)
        dlg.settings_applied.connect(self.apply_preferences)
        dlg.exec()

    def apply_preferences(self, line_count, theme):
        if line_count != len(self.renderer.lines):
            self.renderer.set_line_count(line_count)
            logger.info("Fluid field now has %d lines", line_count)

        if theme != self.current_theme:
            self.setup_theme(theme)
            self.current_theme = theme

    def setup_theme(self, theme_name):
        app = QApplication.instance()
        app.setStyle("Fusion")

        palette = QPalette()
        if theme_name == "Dark":
            palette.setColor(QPalette.ColorRole.Window, QColor(53, 53, 53))
            palette.setColor(QPalette.ColorRole.WindowText, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.Base, QColor(25, 25, 25))
            palette.setColor(QPalette.ColorRole.Text, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.Button, QColor(53, 53, 53))
            palette.setColor(QPalette.ColorRole.ButtonText, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.Highlight, QColor(42, 130, 218))
            palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.black)
            bg = QColor("#121212")
        else:
            palette.setColor(QPalette.ColorRole.Window, QColor(240, 240, 240))
            palette.setColor(QPalette.ColorRole.WindowText, Qt.GlobalColor.black)
            palette.setColor(QPalette.ColorRole.Base, Qt.GlobalColor.white)
            palette.setColor(QPalette.ColorRole.Text, Qt.GlobalColor.black)
            palette.setColor(QPalette.ColorRole.Button, QColor(240, 240, 240))
            palette.setColor(QPalette.ColorRole.ButtonText, Qt.GlobalColor.black)
            palette.setColor(QPalette.ColorRole.Highlight, QColor(76, 163, 224))
            palette.setColor(QPalette.ColorRole.HighlightedText, Qt.GlobalColor.white)
            bg = QColor("#ffffff")

        app.setPalette(palette)

        # Scene backgrounds
        for widget in (self.graph_widget, self.molecule_widget, self.fluid_widget):
            widget.bg_color = bg
            widget.update()

    def open_file_dialog(self):
        fname, _ = QFileDialog.getOpenFileName(self, "Open Graph", "", "Node-link JSON (*.json);;All Files (*)")
        if fname:
            self.load_graph(fname)

    def load_graph(self, path):
        try:
            engine = load_graph_file(path, self.graph_widget.width(), self.graph_widget.height())
        except (ConfigurationError, OSError) as e:
            QMessageBox.critical(self, "Error", f"Could not load graph:\n{e}")
            return

        self.engine = engine
        self.graph_widget.set_engine(engine)
        logger.info("Loaded %s (%d nodes, %d links)", path, len(engine.nodes), len(engine.links))


def main():
    logging.basicConfig(level=logging.INFO)
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
