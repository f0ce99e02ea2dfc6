from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QLabel,
    QLineEdit,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from illien.core.entries import Entry, is_blank_title


class NewEntryDialog(QDialog):
    """Asks for a title; Create stays disabled while the title is blank."""

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("New Entry")
        self.setModal(True)
        self.resize(420, 120)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Entry title:"))

        self.input = QLineEdit()
        self.input.setPlaceholderText("e.g. Trip notes")
        layout.addWidget(self.input)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.create_button = self.buttons.button(QDialogButtonBox.Ok)
        self.create_button.setText("Create")
        self.create_button.setEnabled(False)
        self.buttons.accepted.connect(self._accept_if_valid)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

        self.input.textChanged.connect(self._on_text_changed)
        self.input.returnPressed.connect(self._accept_if_valid)
        self.input.setFocus()

    def _on_text_changed(self, text: str) -> None:
        self.create_button.setEnabled(not is_blank_title(text))

    def _accept_if_valid(self) -> None:
        if not is_blank_title(self.title()):
            self.accept()

    def title(self) -> str:
        return self.input.text().strip()


def ask_new_entry_title(parent: QWidget) -> str | None:
    dlg = NewEntryDialog(parent)
    if dlg.exec() == QDialog.Accepted:
        return dlg.title()
    return None


def confirm_delete(parent: QWidget, entry: Entry) -> bool:
    answer = QMessageBox.question(
        parent,
        "Delete Entry",
        f"Delete “{entry.title}”? This cannot be undone.",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No,
    )
    return answer == QMessageBox.Yes


def choose_directory(parent: QWidget, current: str | None = None) -> str | None:
    path = QFileDialog.getExistingDirectory(parent, "Select Journal Directory", current or "")
    return path or None
