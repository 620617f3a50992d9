"""Role management view.

A thin Qt shell around the disclosure coordinator:

1. Renders the employee header, the role list and the two detail panels
2. Forwards row clicks, backdrop clicks, escape and button presses to the
   coordinator and the removal use case
3. Subscribes to coordinator/store events and repaints only what they name

The view never toggles panel visibility or record flags on its own.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any, Callable

from PySide6.QtCore import QDate, QEvent, QObject, Qt, QTimer
from PySide6.QtGui import QFont, QIntValidator, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QCheckBox,
    QComboBox,
    QDateEdit,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from ..domain.validation import END_FIELD, START_FIELD, UTILIZATION_FIELD, RoleDraft, validate_role_draft
from ..events import (
    CommitRejected,
    NestedPanelHidden,
    NestedPanelShown,
    PrimaryPanelHidden,
    PrimaryPanelShown,
    RecordsRemoved,
    RemoveAffordanceChanged,
    RowsInvalidated,
    SelectionModeChanged,
    StatusMessage,
)
from ..models.disclosure import SelectionMode
from .panel_content import ROLE_INFO_TITLE, PanelContent

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ...services.settings import Settings
    from ..application.removal_ops import RemovalRequest
    from ..bootstrap import AppComponents
    from ..models.records import RoleRecord

LOGGER = logging.getLogger(__name__)

WINDOW_TITLE = "StaffDesk - Roles"
MSG_ADD_ROLE = "Add role functionality would be implemented here"
RECORD_ID_ROLE = Qt.ItemDataRole.UserRole
# QDateEdit cannot hold "no date"; its minimum date is rendered blank instead
_NULL_DATE = QDate(1900, 1, 1)
_DATE_DISPLAY_FORMAT = "dd.MM.yyyy"
_MODE_LABELS = (("Multi", SelectionMode.MULTI), ("Single", SelectionMode.SINGLE))


class MessageBoxConfirmer:
    """Asks for removal confirmation with a modal message box."""

    def __init__(self, *, parent_provider: Callable[[], QWidget | None]) -> None:
        self._parent_provider = parent_provider

    def confirm_removal(self, request: RemovalRequest) -> bool:
        answer = QMessageBox.question(
            self._parent_provider(),
            "Remove roles",
            f"{request.summary}\n\nRemove these roles?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return answer == QMessageBox.StandardButton.Yes


class _BackdropFilter(QObject):
    """Reports mouse presses that land on a widget's empty background."""

    def __init__(self, is_backdrop: Callable[[Any], bool], callback: Callable[[], Any], parent: QObject) -> None:
        super().__init__(parent)
        self._is_backdrop = is_backdrop
        self._callback = callback

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802 - Qt override
        if event.type() == QEvent.Type.MouseButtonPress and self._is_backdrop(event):
            self._callback()
        return False


class RoleManagementView(QWidget):
    """Master list with a primary role form and a nested information panel."""

    def __init__(
        self,
        components: AppComponents,
        *,
        settings: Settings | None = None,
        parent: QWidget | None = None,
    ) -> None:
        """Initialize the view.

        Args:
            components: Wired domain and application components.
            settings: Optional settings for panel widths.
            parent: Optional Qt parent widget.
        """
        super().__init__(parent)
        self._bus = components.event_bus
        self._store = components.record_store
        self._coordinator = components.coordinator
        self._removal = components.removal
        self._service = components.role_service
        self._settings = settings

        self._items: dict[str, QListWidgetItem] = {}
        self._rendering = False
        self._toggled_by_indicator: str | None = None
        self._status_timer = QTimer(self)
        self._status_timer.setSingleShot(True)
        self._status_timer.timeout.connect(self._clear_status)

        self.setWindowTitle(WINDOW_TITLE)
        self._build_ui()
        self._populate_list()
        self._subscribe()

    # ------------------------------------------------------------------
    # Widget accessors
    # ------------------------------------------------------------------

    @property
    def list_widget(self) -> QListWidget:
        return self._list

    @property
    def primary_panel(self) -> QFrame:
        return self._primary

    @property
    def nested_panel(self) -> QFrame:
        return self._nested

    @property
    def add_button(self) -> QPushButton:
        return self._add_button

    @property
    def remove_button(self) -> QPushButton:
        return self._remove_button

    @property
    def mode_combo(self) -> QComboBox:
        return self._mode_combo

    @property
    def status_label(self) -> QLabel:
        return self._status_label

    @property
    def primary_title(self) -> QLabel:
        return self._primary_title

    @property
    def nested_title(self) -> QLabel:
        return self._nested_title

    @property
    def start_edit(self) -> QDateEdit:
        return self._start_edit

    @property
    def end_edit(self) -> QDateEdit:
        return self._end_edit

    @property
    def utilization_edit(self) -> QLineEdit:
        return self._utilization_edit

    @property
    def show_more_button(self) -> QPushButton:
        return self._show_more_button

    @property
    def save_button(self) -> QPushButton:
        return self._save_button

    @property
    def cancel_button(self) -> QPushButton:
        return self._cancel_button

    def item_for(self, record_id: str) -> QListWidgetItem | None:
        return self._items.get(record_id)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.addWidget(self._build_employee_header())

        splitter = QSplitter(Qt.Orientation.Horizontal, self)
        splitter.setChildrenCollapsible(False)
        splitter.addWidget(self._build_master())
        splitter.addWidget(self._build_primary_panel())
        splitter.addWidget(self._build_nested_panel())
        root.addWidget(splitter, 1)
        self._splitter = splitter

        self._status_label = QLabel("")
        self._status_label.setObjectName("sd-status")
        root.addWidget(self._status_label)

        # Escape in the list closes whatever is on top; inside a panel it closes that panel
        self._add_escape_shortcut(self._master, self._coordinator.handle_escape)
        self._add_escape_shortcut(self._primary, self._coordinator.dismiss_primary)
        self._add_escape_shortcut(self._nested, self._coordinator.dismiss_nested)

        self._primary.hide()
        self._nested.hide()

    def _build_employee_header(self) -> QWidget:
        employee = self._service.current_employee
        header = QFrame(self)
        header.setObjectName("sd-employee-header")
        layout = QHBoxLayout(header)

        avatar = QLabel(employee.initials)
        avatar.setObjectName("sd-avatar")
        avatar.setAlignment(Qt.AlignmentFlag.AlignCenter)
        avatar.setFixedSize(40, 40)
        layout.addWidget(avatar)

        name = QLabel(employee.full_name)
        name_font = QFont(name.font())
        name_font.setBold(True)
        name.setFont(name_font)
        details = QVBoxLayout()
        details.addWidget(name)
        details.addWidget(QLabel(f"Personal no {employee.personal_number}"))
        layout.addLayout(details)

        badge = QLabel(employee.status)
        badge.setObjectName("sd-status-badge")
        layout.addWidget(badge)
        layout.addStretch(1)
        return header

    def _build_master(self) -> QWidget:
        master = QWidget(self)
        layout = QVBoxLayout(master)
        layout.setContentsMargins(0, 0, 0, 0)

        title = QLabel("Roles")
        title_font = QFont(title.font())
        title_font.setPointSize(title_font.pointSize() + 4)
        title_font.setBold(True)
        title.setFont(title_font)
        layout.addWidget(title)
        layout.addWidget(QLabel("Which roles should this person be assigned to?"))

        toolbar = QHBoxLayout()
        toolbar.addWidget(QLabel("Assigned roles"))
        toolbar.addStretch(1)
        self._add_button = QPushButton("Add role")
        self._add_button.clicked.connect(self._on_add_clicked)
        toolbar.addWidget(self._add_button)
        self._mode_combo = QComboBox()
        for label, mode in _MODE_LABELS:
            self._mode_combo.addItem(label, mode.value)
        self._sync_mode_combo(self._coordinator.selection_mode)
        self._mode_combo.currentIndexChanged.connect(self._on_mode_combo_changed)
        toolbar.addWidget(self._mode_combo)
        self._remove_button = QPushButton("Remove selected")
        self._remove_button.setEnabled(self._coordinator.remove_enabled)
        self._remove_button.clicked.connect(self._on_remove_clicked)
        toolbar.addWidget(self._remove_button)
        layout.addLayout(toolbar)

        self._list = QListWidget()
        self._list.setSelectionMode(QListWidget.SelectionMode.NoSelection)
        self._list.itemClicked.connect(self._on_item_clicked)
        self._list.itemChanged.connect(self._on_item_changed)
        self._list.viewport().installEventFilter(
            _BackdropFilter(
                lambda event: self._list.itemAt(event.position().toPoint()) is None,
                self._coordinator.handle_backdrop_click,
                self,
            )
        )
        layout.addWidget(self._list, 1)

        if self._settings is not None:
            master.setMinimumWidth(self._settings.master_width // 2)
        self._master = master
        return master

    def _build_primary_panel(self) -> QFrame:
        panel = QFrame(self)
        panel.setObjectName("sd-primary-panel")
        panel.setFrameShape(QFrame.Shape.StyledPanel)
        layout = QVBoxLayout(panel)

        header = QHBoxLayout()
        self._primary_title = QLabel("")
        title_font = QFont(self._primary_title.font())
        title_font.setBold(True)
        self._primary_title.setFont(title_font)
        header.addWidget(self._primary_title)
        header.addStretch(1)
        close_button = QPushButton("Close")
        close_button.clicked.connect(self._coordinator.dismiss_primary)
        header.addWidget(close_button)
        layout.addLayout(header)

        form = QFormLayout()
        self._start_edit = self._create_date_edit()
        self._end_edit = self._create_date_edit()
        dates = QHBoxLayout()
        dates.addWidget(self._start_edit)
        dates.addWidget(self._end_edit)
        form.addRow("Start / End", dates)

        self._utilization_edit = QLineEdit()
        self._utilization_edit.setValidator(QIntValidator(-9999, 9999, self._utilization_edit))
        self._utilization_edit.setPlaceholderText("0-100")
        form.addRow("Utilisation rate", self._utilization_edit)

        self._reason_combo = QComboBox()
        self._reason_combo.addItems(list(self._service.available_reasons()))
        form.addRow("Reason", self._reason_combo)

        self._head_office_check = QCheckBox("Head office")
        self._team_lead_check = QCheckBox("Team lead")
        flags = QHBoxLayout()
        flags.addWidget(self._head_office_check)
        flags.addWidget(self._team_lead_check)
        form.addRow(flags)
        layout.addLayout(form)

        card = QFrame(panel)
        card.setObjectName("sd-role-info")
        card.setFrameShape(QFrame.Shape.StyledPanel)
        card_layout = QVBoxLayout(card)
        card_title = QLabel(ROLE_INFO_TITLE)
        card_layout.addWidget(card_title)
        self._info_fields = QLabel("")
        card_layout.addWidget(self._info_fields)
        self._info_body = QLabel("")
        self._info_body.setWordWrap(True)
        card_layout.addWidget(self._info_body)
        self._show_more_button = QPushButton("Show more")
        self._show_more_button.clicked.connect(self._coordinator.reveal_nested)
        card_layout.addWidget(self._show_more_button)
        layout.addWidget(card)
        layout.addStretch(1)

        footer = QHBoxLayout()
        footer.addStretch(1)
        self._cancel_button = QPushButton("Cancel")
        self._cancel_button.clicked.connect(self._coordinator.cancel)
        footer.addWidget(self._cancel_button)
        self._save_button = QPushButton("Save and close")
        self._save_button.setDefault(True)
        self._save_button.clicked.connect(self._on_save_clicked)
        footer.addWidget(self._save_button)
        layout.addLayout(footer)

        # A press on the form background while the nested panel is open closes it
        panel.installEventFilter(
            _BackdropFilter(
                lambda _event: self._coordinator.state.nested_open,
                self._coordinator.handle_nested_backdrop_click,
                self,
            )
        )

        if self._settings is not None:
            panel.setMinimumWidth(self._settings.detail_min_width)
        self._primary = panel
        return panel

    def _build_nested_panel(self) -> QFrame:
        panel = QFrame(self)
        panel.setObjectName("sd-nested-panel")
        panel.setFrameShape(QFrame.Shape.StyledPanel)
        layout = QVBoxLayout(panel)

        header = QHBoxLayout()
        self._nested_title = QLabel("")
        header.addWidget(self._nested_title)
        header.addStretch(1)
        close_button = QPushButton("Close")
        close_button.clicked.connect(self._coordinator.dismiss_nested)
        header.addWidget(close_button)
        layout.addLayout(header)

        self._nested_fields = QFormLayout()
        layout.addLayout(self._nested_fields)
        self._nested_body = QLabel("")
        self._nested_body.setWordWrap(True)
        layout.addWidget(self._nested_body)
        layout.addStretch(1)

        if self._settings is not None:
            panel.setMinimumWidth(self._settings.nested_min_width)
        self._nested = panel
        return panel

    def _create_date_edit(self) -> QDateEdit:
        edit = QDateEdit()
        edit.setCalendarPopup(True)
        edit.setDisplayFormat(_DATE_DISPLAY_FORMAT)
        edit.setMinimumDate(_NULL_DATE)
        edit.setSpecialValueText(" ")
        edit.setDate(_NULL_DATE)
        return edit

    def _add_escape_shortcut(self, widget: QWidget, callback: Callable[[], Any]) -> None:
        shortcut = QShortcut(QKeySequence(Qt.Key.Key_Escape), widget)
        shortcut.setContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)
        shortcut.activated.connect(callback)

    def _subscribe(self) -> None:
        bus = self._bus
        bus.subscribe(PrimaryPanelShown, self._on_primary_shown)
        bus.subscribe(PrimaryPanelHidden, self._on_primary_hidden)
        bus.subscribe(NestedPanelShown, self._on_nested_shown)
        bus.subscribe(NestedPanelHidden, self._on_nested_hidden)
        bus.subscribe(RowsInvalidated, self._on_rows_invalidated)
        bus.subscribe(RecordsRemoved, self._on_records_removed)
        bus.subscribe(RemoveAffordanceChanged, self._on_remove_affordance_changed)
        bus.subscribe(SelectionModeChanged, self._on_selection_mode_changed)
        bus.subscribe(CommitRejected, self._on_commit_rejected)
        bus.subscribe(StatusMessage, self._on_status_message)

    # ------------------------------------------------------------------
    # List rendering
    # ------------------------------------------------------------------

    def _populate_list(self) -> None:
        self._rendering = True
        try:
            self._list.clear()
            self._items.clear()
            for record in self._store:
                item = QListWidgetItem()
                item.setData(RECORD_ID_ROLE, record.record_id)
                self._list.addItem(item)
                self._items[record.record_id] = item
                self._render_item(item, record)
        finally:
            self._rendering = False

    def _render_item(self, item: QListWidgetItem, record: RoleRecord) -> None:
        item.setText(f"{record.name}\n{record.date_range}  {record.status()}")
        font = QFont(item.font())
        font.setBold(record.active)
        item.setFont(font)
        flags = Qt.ItemFlag.ItemIsEnabled
        if self._coordinator.selection_mode is SelectionMode.MULTI:
            item.setFlags(flags | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(Qt.CheckState.Checked if record.selected else Qt.CheckState.Unchecked)
        else:
            item.setFlags(flags)
            # Clearing the check-state role removes the indicator entirely
            item.setData(Qt.ItemDataRole.CheckStateRole, None)
        if record.active or (record.selected and self._coordinator.selection_mode is SelectionMode.SINGLE):
            item.setBackground(self.palette().highlight().color().lighter(160))
        else:
            item.setBackground(self.palette().base())

    def _refresh_rows(self, record_ids: tuple[str, ...] | list[str]) -> None:
        self._rendering = True
        try:
            for record_id in record_ids:
                item = self._items.get(record_id)
                if item is None or record_id not in self._store:
                    continue
                self._render_item(item, self._store.get(record_id))
        finally:
            self._rendering = False

    # ------------------------------------------------------------------
    # User input
    # ------------------------------------------------------------------

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        record_id = item.data(RECORD_ID_ROLE)
        if record_id is None:
            return
        if self._toggled_by_indicator == record_id:
            # The click landed on the check indicator and was already handled
            self._toggled_by_indicator = None
            return
        toggle = bool(
            self._coordinator.selection_mode is SelectionMode.MULTI
            and _control_held()
        )
        self._coordinator.handle_row_click(record_id, toggle=toggle)

    def _on_item_changed(self, item: QListWidgetItem) -> None:
        if self._rendering or self._coordinator.selection_mode is not SelectionMode.MULTI:
            return
        record_id = item.data(RECORD_ID_ROLE)
        if record_id is None or record_id not in self._store:
            return
        checked = item.checkState() == Qt.CheckState.Checked
        if checked == self._store.get(record_id).selected:
            return
        self._toggled_by_indicator = record_id
        QTimer.singleShot(0, self._clear_toggle_marker)
        self._coordinator.handle_row_click(record_id, toggle=True)

    def _clear_toggle_marker(self) -> None:
        self._toggled_by_indicator = None

    def _on_mode_combo_changed(self, index: int) -> None:
        value = self._mode_combo.itemData(index)
        if value is None or value == self._coordinator.selection_mode.value:
            return
        self._coordinator.set_selection_mode(value)

    def _on_add_clicked(self) -> None:
        # Role creation is not implemented; the button only shows a notice
        self._bus.publish(StatusMessage(message=MSG_ADD_ROLE))

    def _on_remove_clicked(self) -> None:
        result = self._removal.execute()
        LOGGER.debug("Removal finished: %s", result.message)

    def _on_save_clicked(self) -> None:
        draft = self._read_draft()
        self._coordinator.commit(lambda: validate_role_draft(draft), draft.apply_to)

    def _read_draft(self) -> RoleDraft:
        text = self._utilization_edit.text().strip()
        try:
            utilization = int(text) if text else None
        except ValueError:
            utilization = None
        reason = self._reason_combo.currentText() or None
        return RoleDraft(
            start_date=_to_date(self._start_edit.date()),
            end_date=_to_date(self._end_edit.date()),
            utilization_rate=utilization,
            reason=reason,
            head_office=self._head_office_check.isChecked(),
            team_lead=self._team_lead_check.isChecked(),
        )

    def _write_draft(self, draft: RoleDraft) -> None:
        self._start_edit.setDate(_to_qdate(draft.start_date))
        self._end_edit.setDate(_to_qdate(draft.end_date))
        self._utilization_edit.setText("" if draft.utilization_rate is None else str(draft.utilization_rate))
        if draft.reason is not None and self._reason_combo.findText(draft.reason) < 0:
            self._reason_combo.addItem(draft.reason)
        self._reason_combo.setCurrentIndex(-1 if draft.reason is None else self._reason_combo.findText(draft.reason))
        self._head_office_check.setChecked(draft.head_office)
        self._team_lead_check.setChecked(draft.team_lead)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_primary_shown(self, event: PrimaryPanelShown) -> None:
        content: PanelContent = event.content
        self._primary_title.setText(content.title)
        self._info_fields.setText("\n".join(f"{label}: {value}" for label, value in content.fields))
        self._info_body.setText(content.body)
        if content.draft is not None:
            self._write_draft(content.draft)
        self._primary.show()
        item = self._items.get(event.record_id)
        if item is not None:
            self._list.scrollToItem(item)

    def _on_primary_hidden(self, event: PrimaryPanelHidden) -> None:
        self._nested.hide()
        self._primary.hide()

    def _on_nested_shown(self, event: NestedPanelShown) -> None:
        content: PanelContent = event.content
        self._nested_title.setText(content.title)
        while self._nested_fields.rowCount():
            self._nested_fields.removeRow(0)
        for label, value in content.fields:
            self._nested_fields.addRow(label, QLabel(value))
        self._nested_body.setText(content.body)
        self._nested.show()

    def _on_nested_hidden(self, event: NestedPanelHidden) -> None:
        self._nested.hide()

    def _on_rows_invalidated(self, event: RowsInvalidated) -> None:
        self._refresh_rows(event.record_ids)

    def _on_records_removed(self, event: RecordsRemoved) -> None:
        for record_id in event.record_ids:
            item = self._items.pop(record_id, None)
            if item is not None:
                self._list.takeItem(self._list.row(item))

    def _on_remove_affordance_changed(self, event: RemoveAffordanceChanged) -> None:
        self._remove_button.setEnabled(event.enabled)

    def _on_selection_mode_changed(self, event: SelectionModeChanged) -> None:
        mode = SelectionMode.parse(event.mode)
        self._sync_mode_combo(mode)
        # Every row gains or loses its check indicator
        self._refresh_rows(list(self._items))

    def _on_commit_rejected(self, event: CommitRejected) -> None:
        widget = {
            START_FIELD: self._start_edit,
            END_FIELD: self._end_edit,
            UTILIZATION_FIELD: self._utilization_edit,
        }.get(event.field)
        if widget is not None:
            widget.setToolTip(event.message)
            widget.setFocus(Qt.FocusReason.OtherFocusReason)

    def _on_status_message(self, event: StatusMessage) -> None:
        self._status_label.setText(event.message)
        if event.timeout_ms > 0:
            self._status_timer.start(event.timeout_ms)
        else:
            self._status_timer.stop()

    def _clear_status(self) -> None:
        self._status_label.setText("")

    def _sync_mode_combo(self, mode: SelectionMode) -> None:
        index = self._mode_combo.findData(mode.value)
        if index < 0 or index == self._mode_combo.currentIndex():
            return
        self._mode_combo.blockSignals(True)
        try:
            self._mode_combo.setCurrentIndex(index)
        finally:
            self._mode_combo.blockSignals(False)


def _control_held() -> bool:
    return bool(QApplication.keyboardModifiers() & Qt.KeyboardModifier.ControlModifier)


def _to_date(value: QDate) -> date | None:
    if not value.isValid() or value == _NULL_DATE:
        return None
    return date(value.year(), value.month(), value.day())


def _to_qdate(value: date | None) -> QDate:
    if value is None:
        return _NULL_DATE
    return QDate(value.year, value.month, value.day)


__all__ = ["MSG_ADD_ROLE", "MessageBoxConfirmer", "RoleManagementView", "WINDOW_TITLE"]
