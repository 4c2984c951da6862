"""Main application window: map form fields onto a PDF and regenerate filled documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QFileDialog,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QToolBar,
)

from formfiller.config import Settings
from formfiller.model.document import PdfDocument
from formfiller.model.field import FormField
from formfiller.model.form import FormDefinition
from formfiller.pdf.assembler import regenerate_document
from formfiller.pdf.loader import PdfLoadError, load_pdf
from formfiller.pdf.writer import PdfWriteError
from formfiller.state.session import TemplateSession
from formfiller.storage.records import RecordDecodeError, decode_form, decode_submission, decode_template, encode_template
from formfiller.viewer.editor import MarkerEditor
from formfiller.viewer.template_view import TemplateView

logger = logging.getLogger(__name__)

JSON_FILTER = "JSON Files (*.json)"
PDF_FILTER = "PDF Files (*.pdf)"


class MainWindow(QMainWindow):
    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("FormFiller")
        self.resize(1300, 850)

        self._settings = settings or Settings()
        self._form: FormDefinition | None = None
        self._document: PdfDocument | None = None
        self._session: TemplateSession | None = None
        self._editor = MarkerEditor(TemplateSession(form=FormDefinition(id="", name=""), document_ref=""))

        self.field_list = QListWidget()
        self.field_list.currentRowChanged.connect(self._on_field_selected)

        self.template_view = TemplateView(self._editor, scale=self._settings.render_scale)
        self.template_view.markers_changed.connect(self._refresh_field_list)

        splitter = QSplitter()
        splitter.addWidget(self.field_list)
        splitter.addWidget(self.template_view)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 4)
        self.setCentralWidget(splitter)

        self._build_toolbar()
        self.statusBar().showMessage("Ready")

    @property
    def session(self) -> TemplateSession | None:
        return self._session

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        open_form_action = QAction("Open Form", self)
        open_form_action.triggered.connect(self.open_form)
        toolbar.addAction(open_form_action)

        open_pdf_action = QAction("Open PDF", self)
        open_pdf_action.triggered.connect(self.open_pdf)
        toolbar.addAction(open_pdf_action)

        open_template_action = QAction("Open Template", self)
        open_template_action.triggered.connect(self.open_template)
        toolbar.addAction(open_template_action)

        save_action = QAction("Save Template", self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.triggered.connect(self.save_template)
        toolbar.addAction(save_action)

        toolbar.addSeparator()

        up_action = QAction("Move Up", self)
        up_action.triggered.connect(lambda: self._move_selected_field(-1))
        toolbar.addAction(up_action)

        down_action = QAction("Move Down", self)
        down_action.triggered.connect(lambda: self._move_selected_field(1))
        toolbar.addAction(down_action)

        self._delete_field_action = QAction("Delete Field", self)
        self._delete_field_action.triggered.connect(self.delete_selected_field)
        toolbar.addAction(self._delete_field_action)

        toolbar.addSeparator()

        self._generate_action = QAction("Generate Document", self)
        self._generate_action.triggered.connect(self.generate_document)
        toolbar.addAction(self._generate_action)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._close_document()
        super().closeEvent(event)

    def open_form(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Open Form", str(Path.home()), JSON_FILTER)
        if not file_path:
            return
        try:
            form = decode_form(Path(file_path).read_bytes())
        except (RecordDecodeError, OSError) as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        self._form = form
        self._close_document()
        self._refresh_field_list()
        self.statusBar().showMessage(f"Form: {form.name} ({len(form.fields)} field(s))")

    def open_pdf(self) -> None:
        if self._form is None:
            QMessageBox.information(self, "No Form", "Open a form first.")
            return
        file_path, _ = QFileDialog.getOpenFileName(self, "Open PDF", str(Path.home()), PDF_FILTER)
        if not file_path:
            return
        session = TemplateSession(
            form=self._form,
            document_ref=file_path,
            original_file_name=Path(file_path).name,
        )
        self._start_session(session)

    def open_template(self) -> None:
        if self._form is None:
            QMessageBox.information(self, "No Form", "Open the template's form first.")
            return
        file_path, _ = QFileDialog.getOpenFileName(self, "Open Template", str(Path.home()), JSON_FILTER)
        if not file_path:
            return
        try:
            template = decode_template(Path(file_path).read_bytes())
        except (RecordDecodeError, OSError) as exc:
            QMessageBox.critical(self, "Open Failed", str(exc))
            return
        if template.form_id and template.form_id != self._form.id:
            QMessageBox.warning(self, "Form Mismatch", "This template was mapped against a different form.")
        self._start_session(TemplateSession.from_template(template, self._form))

    def save_template(self) -> None:
        if self._session is None:
            QMessageBox.information(self, "No Template", "Open a PDF first.")
            return

        default_name = Path(self._session.original_file_name or "template").with_suffix(".json").name
        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Template",
            str(Path.home() / default_name),
            JSON_FILTER,
        )
        if not output_path:
            return

        template = self._session.to_template()
        try:
            with open(output_path, "w", encoding="utf-8") as handle:
                json.dump(encode_template(template), handle, indent=2)
        except OSError as exc:
            QMessageBox.critical(self, "Save Failed", str(exc))
            return
        self.statusBar().showMessage(f"Saved: {output_path} ({len(template.positions)} position(s))")

    def generate_document(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Open Submission", str(Path.home()), JSON_FILTER)
        if not file_path:
            return

        self._generate_action.setEnabled(False)
        try:
            submission = decode_submission(Path(file_path).read_bytes())
            filled = regenerate_document(submission, self._settings)
        except (RecordDecodeError, PdfLoadError, PdfWriteError, OSError) as exc:
            logger.error("Error generating filled PDF: %s", exc)
            QMessageBox.critical(
                self,
                "Generation Failed",
                "Could not generate document. Please try again.",
            )
            return
        finally:
            self._generate_action.setEnabled(True)

        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Filled PDF",
            str(Path.home() / filled.file_name),
            PDF_FILTER,
        )
        if not output_path:
            return
        try:
            Path(output_path).write_bytes(filled.data)
        except OSError as exc:
            QMessageBox.critical(self, "Save Failed", str(exc))
            return
        self.statusBar().showMessage(f"Saved: {output_path}")

    def delete_selected_field(self) -> None:
        if self._form is None:
            return
        field = self._current_field()
        if field is None:
            self.statusBar().showMessage("No selected field to delete.")
            return
        try:
            if self._session is not None:
                self._session.delete_field(field.id)
            else:
                self._form.remove_field(field.id)
        except ValueError as exc:
            QMessageBox.information(self, "Delete Field", str(exc))
            return
        self._editor.select_field(None)
        self._refresh_field_list()
        self.template_view.refresh()
        self.statusBar().showMessage(f"Deleted field: {field.name}")

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Delete:
            self.delete_selected_field()
            event.accept()
            return
        super().keyPressEvent(event)

    def _start_session(self, session: TemplateSession) -> None:
        self._close_document()
        try:
            self._document = load_pdf(session.document_ref, timeout=self._settings.fetch_timeout)
        except PdfLoadError as exc:
            logger.error("Error loading PDF: %s", exc)
            self.template_view.show_error(str(exc))
            QMessageBox.critical(self, "Open Failed", str(exc))
            return

        if not session.page_width_pt or not session.page_height_pt:
            session.page_width_pt, session.page_height_pt = self._document.page_size(0)
        self._session = session
        self._editor = MarkerEditor(session)
        self.template_view.set_editor(self._editor)
        self.template_view.show_document(self._document)
        self._refresh_field_list()
        self._on_field_selected(self.field_list.currentRow())
        self.statusBar().showMessage(f"Loaded: {session.document_ref} ({self._document.page_count} page(s))")

    def _move_selected_field(self, step: int) -> None:
        field = self._current_field()
        if self._form is None or field is None:
            return
        moved = self._form.move_up(field.id) if step < 0 else self._form.move_down(field.id)
        if moved:
            self._refresh_field_list()
            self.field_list.setCurrentRow(field.order_position)

    def _current_field(self) -> FormField | None:
        if self._form is None:
            return None
        row = self.field_list.currentRow()
        if row < 0 or row >= len(self._form.fields):
            return None
        return self._form.fields[row]

    def _on_field_selected(self, row: int) -> None:
        if self._form is None or row < 0 or row >= len(self._form.fields):
            self._editor.select_field(None)
            return
        field = self._form.fields[row]
        self._editor.select_field(field)
        self.statusBar().showMessage(f"Click a page to place: {field.name}")

    def _refresh_field_list(self) -> None:
        row = self.field_list.currentRow()
        self.field_list.blockSignals(True)
        self.field_list.clear()
        if self._form is not None:
            for field in self._form.fields:
                count = self._session.placements(field.id) if self._session is not None else 0
                label = f"{field.name} ({count})" if count else field.name
                self.field_list.addItem(QListWidgetItem(label))
            self._delete_field_action.setEnabled(len(self._form.fields) > 1)
        self.field_list.setCurrentRow(min(row, self.field_list.count() - 1))
        self.field_list.blockSignals(False)

    def _close_document(self) -> None:
        if self._document is not None:
            self._document.close()
            self._document = None
        self._session = None
        self._editor = MarkerEditor(TemplateSession(form=self._form or FormDefinition(id="", name=""), document_ref=""))
        self.template_view.set_editor(self._editor)
