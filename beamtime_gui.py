#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SE-SPS Run Time Estimator GUI (PyQt5)
- Form with the seven run parameters, estimate recomputed on every change
- Central panel (default) or floating window (--window)
- Settings as YAML (Ctrl+O / Ctrl+S), last state kept in QSettings
"""

import math
import os
import sys
from typing import Dict, List, Optional, Union

from PyQt5 import QtCore
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QAbstractSpinBox, QAction, QApplication, QDockWidget, QDoubleSpinBox, QFileDialog, QGridLayout,
    QLabel, QMainWindow, QMessageBox, QSpinBox, QStyle, QToolBar, QWidget
)

from beamtime_core import (
    DEFAULT_PARAMETERS,
    PARAMETER_LIMITS,
    ParameterError,
    RunEstimate,
    RunParameters,
    SettingsError,
    clamp_parameters,
    dump_settings,
    estimate,
    format_estimate,
    load_settings,
    read_settings,
    save_settings,
)

WINDOW_TITLE = "SE-SPS Run Time Estimator"

# Upper bound for unbounded fields, spin boxes need a finite maximum
SPIN_MAX = 1e12

# ==========================
# Field layout
# ==========================

# name -> (label, prefix, suffix, step, decimals, tooltip)
FIELD_SPECS: Dict[str, tuple] = {
    "cross_section": ("Cross Section:", "", " µb/sr", 1.0, 6, ""),
    "target_density": ("Target Density:", "", " µg/cm^2", 1.0, 6, ""),
    "target_molar_mass": ("Target Molar Mass:", "", " g/mol", 1.0, 6, ""),
    "beam_current": ("Beam Current:", "", " nA", 1.0, 6, "Beam current on target."),
    "beam_charge_state": ("Z Beam:", "Z = ", "", 1, 0, "Proton number of the beam."),
    "solid_angle": (
        "Slit Settings:", "", " msr", 0.1, 4,
        "Solid angle of the SE-SPS. Typical value is 4.62 msr. "
        "The SE-SPS has a max solid angle of 12.8 msr.",
    ),
    "desired_counts": (
        "Desired Counts:", "", " counts", 1.0, 0,
        "The desired number of counts in the peak of interest.",
    ),
}


def _finite_max(value: float) -> float:
    return value if math.isfinite(value) else SPIN_MAX


# ==========================
# Form widget
# ==========================

class RunTimeWidget(QWidget):
    """Two-column form for the run parameters plus the estimated time."""

    parametersChanged = pyqtSignal(object)

    def __init__(self, params: RunParameters = DEFAULT_PARAMETERS, parent=None):
        super().__init__(parent)
        self.setObjectName("RunTimeWidget")
        self._estimate: Optional[RunEstimate] = None
        # exact values; the spin boxes only display them
        self._params = DEFAULT_PARAMETERS

        grid = QGridLayout(self)
        grid.setHorizontalSpacing(8)
        grid.setVerticalSpacing(4)

        self.fields: Dict[str, Union[QSpinBox, QDoubleSpinBox]] = {}
        for row, (name, (label, prefix, suffix, step, decimals, tooltip)) in enumerate(FIELD_SPECS.items()):
            low, high = PARAMETER_LIMITS[name]
            if name == "beam_charge_state":
                # int32 range suffices; counts go through a double spin box for i64
                spin: Union[QSpinBox, QDoubleSpinBox] = QSpinBox()
                spin.setRange(int(low), int(high))
            else:
                spin = QDoubleSpinBox()
                spin.setDecimals(decimals)
                spin.setRange(float(low), _finite_max(float(high)))
            spin.setSingleStep(step)
            spin.setPrefix(prefix)
            spin.setSuffix(suffix)
            spin.setAccelerated(True)
            spin.setButtonSymbols(QAbstractSpinBox.UpDownArrows)
            lbl = QLabel(label)
            if tooltip:
                lbl.setToolTip(tooltip)
                spin.setToolTip(tooltip)
            grid.addWidget(lbl, row, 0, Qt.AlignRight | Qt.AlignVCenter)
            grid.addWidget(spin, row, 1)
            self.fields[name] = spin

        result_row = len(FIELD_SPECS)
        grid.addWidget(QLabel("Estimated Time:"), result_row, 0, Qt.AlignRight | Qt.AlignVCenter)
        self.lbl_result = QLabel("")
        self.lbl_result.setObjectName("EstimateLabel")
        self.lbl_result.setTextInteractionFlags(Qt.TextSelectableByMouse)
        grid.addWidget(self.lbl_result, result_row, 1)
        grid.setRowStretch(result_row + 1, 1)

        self.set_parameters(params)
        for name, spin in self.fields.items():
            spin.valueChanged.connect(lambda value, n=name: self._on_value_changed(n, value))

    def parameters(self) -> RunParameters:
        return self._params

    def set_parameters(self, params: RunParameters) -> None:
        self._params = clamp_parameters(params)
        for name, spin in self.fields.items():
            block = spin.blockSignals(True)
            spin.setValue(getattr(self._params, name))
            spin.blockSignals(block)
        self._recalculate()

    def estimate(self) -> Optional[RunEstimate]:
        return self._estimate

    def result_text(self) -> str:
        return self.lbl_result.text()

    def _on_value_changed(self, name: str, value) -> None:
        if name in ("beam_charge_state", "desired_counts"):
            value = min(int(round(value)), int(PARAMETER_LIMITS[name][1]))
        else:
            value = float(value)
        self._params = self._params.replace(**{name: value})
        self._recalculate()
        self.parametersChanged.emit(self._params)

    def _recalculate(self) -> None:
        self._estimate = estimate(self._params)
        self.lbl_result.setText(format_estimate(self._estimate))


# ==========================
# Main Window
# ==========================

class MainWindow(QMainWindow):
    def __init__(self, window: bool = False, settings: Optional[QtCore.QSettings] = None):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(420, 300)
        self.window_mode = window
        self.settings = settings if settings is not None else QtCore.QSettings("SE-SPS", "RunTimeEstimator")
        self._restore_failed = False

        self.form = RunTimeWidget(self._restore_parameters(), self)
        self.form.parametersChanged.connect(self._on_parameters_changed)

        if window:
            self.dock = QDockWidget(WINDOW_TITLE, self)
            self.dock.setObjectName("RunTimeDock")
            self.dock.setWidget(self.form)
            self.dock.setFeatures(QDockWidget.DockWidgetMovable | QDockWidget.DockWidgetFloatable)
            self.addDockWidget(Qt.LeftDockWidgetArea, self.dock)
            self.dock.setFloating(True)
            self.setCentralWidget(QWidget(self))
        else:
            self.dock = None
            self.setCentralWidget(self.form)

        self._build_toolbar()
        self._restore_geometry()
        if not self._restore_failed:
            self.statusBar().showMessage("Ready", 3000)

    def _build_toolbar(self) -> None:
        tb = QToolBar("Main", self)
        tb.setObjectName("MainToolbar")
        tb.setMovable(False)
        self.addToolBar(tb)

        act_open = QAction("Open", self)
        act_open.setIcon(self.style().standardIcon(QStyle.SP_DialogOpenButton))
        act_open.setShortcut("Ctrl+O")
        act_open.setToolTip("Load run parameters from YAML (Ctrl+O)")
        act_open.triggered.connect(self._action_import_yaml)
        tb.addAction(act_open)

        act_save = QAction("Save", self)
        act_save.setIcon(self.style().standardIcon(QStyle.SP_DialogSaveButton))
        act_save.setShortcut("Ctrl+S")
        act_save.setToolTip("Save run parameters as YAML (Ctrl+S)")
        act_save.triggered.connect(self._action_export_yaml)
        tb.addAction(act_save)

        tb.addSeparator()
        act_reset = QAction("Defaults", self)
        act_reset.setIcon(self.style().standardIcon(QStyle.SP_BrowserReload))
        act_reset.setToolTip("Restore default run parameters")
        act_reset.triggered.connect(self._action_restore_defaults)
        tb.addAction(act_reset)

    # ----- settings -----
    def _restore_parameters(self) -> RunParameters:
        stored = self.settings.value("run/parameters", "", type=str)
        if not stored:
            return DEFAULT_PARAMETERS
        try:
            params, _ = load_settings(stored)
            return params
        except (SettingsError, ParameterError) as e:
            print(f"MainWindow._restore_parameters(): Ignoring stored parameters. Error: {e}")
            self._restore_failed = True
            self.statusBar().showMessage("Stored parameters were invalid, using defaults", 3000)
            return DEFAULT_PARAMETERS

    def _restore_geometry(self) -> None:
        geo = self.settings.value("win/geo", type=QtCore.QByteArray)
        state = self.settings.value("win/state", type=QtCore.QByteArray)
        if geo:
            self.restoreGeometry(geo)
        if state:
            self.restoreState(state)

    def _store_parameters(self) -> None:
        self.settings.setValue("run/parameters", dump_settings(self.form.parameters(), self.window_mode))

    def _on_parameters_changed(self, _params: RunParameters) -> None:
        self._store_parameters()

    def closeEvent(self, e):
        self.settings.setValue("win/geo", self.saveGeometry())
        self.settings.setValue("win/state", self.saveState())
        self._store_parameters()
        super().closeEvent(e)

    # ----- export/import -----
    def _action_export_yaml(self):
        path, _ = QFileDialog.getSaveFileName(self, "Save settings", "beamtime_settings.yaml", "YAML (*.yaml *.yml)")
        if not path: return
        try:
            save_settings(path, self.form.parameters(), self.window_mode)
            self.statusBar().showMessage(f"Saved {os.path.basename(path)}", 2000)
        except OSError as e:
            QMessageBox.critical(self, "Save failed", str(e))

    def _action_import_yaml(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open settings", "", "YAML (*.yaml *.yml)")
        if not path: return
        self.load_file(path)

    def load_file(self, path: str) -> bool:
        try:
            params, _ = read_settings(path)
        except (OSError, SettingsError, ParameterError) as e:
            QMessageBox.critical(self, "Open failed", str(e))
            return False
        self.form.set_parameters(params)
        self._store_parameters()
        self.statusBar().showMessage(f"Loaded {os.path.basename(path)}", 2000)
        return True

    def _action_restore_defaults(self):
        self.form.set_parameters(DEFAULT_PARAMETERS)
        self._store_parameters()
        self.statusBar().showMessage("Restored defaults", 1500)


# ==========================
# Selftests
# ==========================

def _assert_equal(actual, expected, label):
    if actual != expected:
        raise AssertionError(f"{label}: expected {expected}, got {actual}")

def run_selftests() -> None:
    default = estimate(DEFAULT_PARAMETERS)
    _assert_equal(format_estimate(default), "69000 s | 19.17 h | 0.80 d", "default scenario")
    _assert_equal(default.time_hours, default.time_seconds / 3600.0, "hours derived from seconds")
    _assert_equal(default.time_days, default.time_hours / 24.0, "days derived from hours")
    doubled = estimate(DEFAULT_PARAMETERS.replace(desired_counts=2000))
    _assert_equal(doubled.time_seconds, 2.0 * default.time_seconds, "counts scaling")
    no_beam = estimate(DEFAULT_PARAMETERS.replace(beam_current=0.0))
    _assert_equal(format_estimate(no_beam), "∞ s | ∞ h | ∞ d", "zero beam current")
    no_counts = estimate(DEFAULT_PARAMETERS.replace(desired_counts=0))
    _assert_equal(no_counts.time_seconds, 0.0, "zero counts")
    params, window = load_settings(dump_settings(DEFAULT_PARAMETERS, True))
    _assert_equal((params, window), (DEFAULT_PARAMETERS, True), "settings round trip")
    print("Selftests OK (estimate, formatting, settings).")

# ==========================
# main
# ==========================

def main(argv: Optional[List[str]] = None) -> None:
    argv = list(sys.argv if argv is None else argv)
    if "--selftest" in argv:
        run_selftests()
        sys.exit(0)
    window = "--window" in argv
    app = QApplication([a for a in argv if a != "--window"])
    win = MainWindow(window=window)
    files = [a for a in argv[1:] if not a.startswith("--")]
    if files:
        win.load_file(files[0])
    win.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
