from PyQt6.QtWidgets import QDialog, QVBoxLayout, QHBoxLayout, QLabel, QComboBox, QPushButton, QSpinBox
from PyQt6.QtCore import pyqtSignal


class PreferencesDialog(QDialog):
    settings_applied = pyqtSignal(int, str)  # line count, theme

    def __init__(self, parent=None, current_lines=10, current_theme="Dark"):
        super().__init__(parent)
        self.setWindowTitle("Preferences")
        self.resize(300, 150)

        self.layout = QVBoxLayout(self)

        # Flow lines
        lines_layout = QHBoxLayout()
        lines_layout.addWidget(QLabel("Flow lines"))
        self.lines_spin = QSpinBox()
        self.lines_spin.setRange(1, 60)
        self.lines_spin.setValue(current_lines)
        lines_layout.addWidget(self.lines_spin)
        self.layout.addLayout(lines_layout)

        # Theme
        theme_layout = QHBoxLayout()
        theme_layout.addWidget(QLabel("Theme"))
        self.theme_combo = QComboBox()
        self.theme_combo.addItems(["Dark", "Light"])
        self.theme_combo.setCurrentIndex(0 if current_theme == "Dark" else 1)
        theme_layout.addWidget(self.theme_combo)
        self.layout.addLayout(theme_layout)

        # Buttons
        btn_layout = QHBoxLayout()
        self.btn_save = QPushButton("Save")
        self.btn_save.clicked.connect(self.on_save)
        self.btn_cancel = QPushButton("Cancel")
        self.btn_cancel.clicked.connect(self.close)

        btn_layout.addStretch()
        btn_layout.addWidget(self.btn_cancel)
        btn_layout.addWidget(self.btn_save)
        self.layout.addLayout(btn_layout)

    def on_save(self):
        self.settings_applied.emit(self.lines_spin.value(), self.theme_combo.currentText())
        self.accept()
