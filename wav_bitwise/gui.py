"""Tkinter desktop GUI for WAV Bitwise.

WHY: Sound designers want to audition bit-crush and mask settings without
a terminal. The GUI wraps the same core as the CLI behind file pickers,
an operation menu, a value spinner, and a progress bar.

HOW: A single BitwiseApp class builds the window. Clicking Process starts
one background thread that calls core.processor.process_wav_file() with
a QueueReporter. Progress and the final result flow back to the main
thread as immutable messages on a queue.Queue, drained every 100 ms by
tkinter's .after() mechanism. Cancel sets a threading.Event the
pipeline checks once per window.

RULES:
- tkinter widgets are ONLY touched from the main thread
- The message queue is the ONLY channel from worker to UI; it is drained
  before each run so leftovers from the last worker are never shown
- At most one worker runs at a time; Process is disabled while it runs
- The operand spinner range follows the operation (0-7, 0-255, or disabled)
- File info is refreshed whenever the input path changes
- A failed run leaves any partial output on disk and says so
"""

from __future__ import annotations

import logging
import queue
import threading
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Optional, Tuple

from wav_bitwise import config
from wav_bitwise.core.operations import (
    OPERATIONS,
    OperationSpec,
    OperationTag,
    lookup_operation,
    make_operation,
)
from wav_bitwise.core.processor import inspect_wav_file, process_wav_file
from wav_bitwise.errors import PARTIAL_OUTPUT_KINDS, UnknownOperationError, WavBitwiseError
from wav_bitwise.reporters.base import percent
from wav_bitwise.reporters.queued import DONE_MSG, ERROR_MSG, PROGRESS_MSG, QueueReporter

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE = "WAV File Bitwise Operations"
_WINDOW_MIN_WIDTH = 520
_WINDOW_MIN_HEIGHT = 380
_PAD = 8
_POLL_MS = 100

_WAV_FILETYPES = [
    ("WAV files", " ".join("*{}".format(e) for e in sorted(config.SUPPORTED_EXTENSIONS))),
    ("All files", "*.*"),
]


# ---------------------------------------------------------------------------
# Helpers (no widgets, safe to call from tests)
# ---------------------------------------------------------------------------

def operand_settings(operation_name: str) -> Tuple[str, int, int, bool]:
    """Label, spinner bounds, and enabled state for an operation.

    Returns:
        (label text, low, high, enabled)
    """
    template = lookup_operation(operation_name)
    if template.operand_range is None:
        return "Value (ignored):", 0, 0, False
    low, high = template.operand_range
    if template.tag in (OperationTag.RIGHT_SHIFT, OperationTag.LEFT_SHIFT):
        return "Shift value ({}-{}):".format(low, high), low, high, True
    return "Value ({}-{}):".format(low, high), low, high, True


def describe_file(path: Path) -> str:
    """Human-readable summary of a WAV file for the info panel."""
    try:
        descriptor, region = inspect_wav_file(path)
    except WavBitwiseError as e:
        return "Error: {}".format(e)

    lines = [
        "Channels: {}".format(descriptor.channels),
        "Sample rate: {} Hz".format(descriptor.sample_rate),
        "Bits per sample: {}".format(descriptor.bits_per_sample),
        "Data size: {} bytes".format(region.length),
    ]
    if not descriptor.is_pcm:
        lines.append("Warning: not PCM (format {}), cannot process".format(descriptor.audio_format))
    return "\n".join(lines)


def resolve_output_path(input_path: Path, operation_name: str) -> Path:
    """Suggest an output path next to the input, avoiding existing files.

    ``song.wav`` + ``xor`` → ``song-xor.wav``, then ``song-xor-2.wav``
    and so on when that name is taken.
    """
    suffix = input_path.suffix or ".wav"
    base = input_path.with_name("{}-{}{}".format(input_path.stem, operation_name, suffix))
    if not base.exists():
        return base

    counter = 2
    while True:
        candidate = input_path.with_name(
            "{}-{}-{}{}".format(input_path.stem, operation_name, counter, suffix)
        )
        if not candidate.exists():
            return candidate
        counter += 1


def drain_messages(messages: queue.Queue) -> int:
    """Discard everything left in the worker queue; return how many."""
    dropped = 0
    while True:
        try:
            messages.get_nowait()
        except queue.Empty:
            return dropped
        dropped += 1


# ---------------------------------------------------------------------------
# Main GUI Application
# ---------------------------------------------------------------------------

class BitwiseApp:
    """Main tkinter application window.

    The worker thread communicates only through self._messages; every
    widget update happens in _poll_messages() on the main thread.
    """

    def __init__(self, root: tk.Tk) -> None:
        self._root = root
        self._root.title(_WINDOW_TITLE)
        self._root.minsize(_WINDOW_MIN_WIDTH, _WINDOW_MIN_HEIGHT)

        # Thread communication
        self._messages: queue.Queue = queue.Queue()
        self._cancel_event = threading.Event()
        self._worker_thread: Optional[threading.Thread] = None
        self._output_path: Optional[Path] = None

        self._build_ui()

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        """Build the main window layout."""
        main = ttk.Frame(self._root, padding=_PAD)
        main.pack(fill=tk.BOTH, expand=True)
        main.columnconfigure(1, weight=1)

        # --- Files ---
        ttk.Label(main, text="Input WAV File:").grid(row=0, column=0, sticky=tk.W)
        self._input_var = tk.StringVar()
        self._input_var.trace_add("write", lambda *_: self._on_input_changed())
        ttk.Entry(main, textvariable=self._input_var).grid(
            row=0, column=1, sticky=tk.EW, padx=_PAD
        )
        self._input_btn = ttk.Button(main, text="Browse...", command=self._browse_input)
        self._input_btn.grid(row=0, column=2)

        ttk.Label(main, text="Output WAV File:").grid(row=1, column=0, sticky=tk.W, pady=(_PAD, 0))
        self._output_var = tk.StringVar()
        ttk.Entry(main, textvariable=self._output_var).grid(
            row=1, column=1, sticky=tk.EW, padx=_PAD, pady=(_PAD, 0)
        )
        self._output_btn = ttk.Button(main, text="Browse...", command=self._browse_output)
        self._output_btn.grid(row=1, column=2, pady=(_PAD, 0))

        # --- File info ---
        info_frame = ttk.LabelFrame(main, text="File Info", padding=_PAD)
        info_frame.grid(row=2, column=0, columnspan=3, sticky=tk.EW, pady=(_PAD, 0))
        self._info_label = ttk.Label(info_frame, text="No file selected", justify=tk.LEFT)
        self._info_label.pack(anchor=tk.W)

        # --- Operation ---
        op_frame = ttk.Frame(main)
        op_frame.grid(row=3, column=0, columnspan=3, sticky=tk.EW, pady=(_PAD, 0))

        ttk.Label(op_frame, text="Operation:").pack(side=tk.LEFT)
        default_op = self._default_operation()
        self._operation_var = tk.StringVar(value=default_op)
        self._operation_combo = ttk.Combobox(
            op_frame,
            textvariable=self._operation_var,
            values=list(OPERATIONS),
            state="readonly",
            width=8,
        )
        self._operation_combo.pack(side=tk.LEFT, padx=(4, 16))
        self._operation_combo.bind("<<ComboboxSelected>>", lambda _e: self._on_operation_changed())

        self._value_label = ttk.Label(op_frame, text="")
        self._value_label.pack(side=tk.LEFT)
        self._value_var = tk.IntVar(value=1)
        self._value_spin = ttk.Spinbox(
            op_frame, textvariable=self._value_var, from_=0, to=7, increment=1, width=6
        )
        self._value_spin.pack(side=tk.LEFT, padx=(4, 0))

        # --- Actions ---
        btn_frame = ttk.Frame(main)
        btn_frame.grid(row=4, column=0, columnspan=3, pady=(_PAD, 0))
        self._process_btn = ttk.Button(
            btn_frame, text="Process WAV File", command=self._start_processing
        )
        self._process_btn.pack(side=tk.LEFT)
        self._cancel_btn = ttk.Button(
            btn_frame, text="Cancel", command=self._cancel_processing, state=tk.DISABLED
        )
        self._cancel_btn.pack(side=tk.LEFT, padx=(_PAD, 0))

        # --- Progress ---
        self._progress_var = tk.DoubleVar(value=0.0)
        self._progress_bar = ttk.Progressbar(
            main, variable=self._progress_var, maximum=100.0, mode="determinate"
        )
        self._progress_bar.grid(row=5, column=0, columnspan=3, sticky=tk.EW, pady=(_PAD, 0))
        self._progress_text = ttk.Label(main, text="")
        self._progress_text.grid(row=6, column=0, columnspan=3)

        self._status_label = ttk.Label(main, text="Ready")
        self._status_label.grid(row=7, column=0, columnspan=3, sticky=tk.W, pady=(_PAD, 0))

        self._on_operation_changed()

    @staticmethod
    def _default_operation() -> str:
        try:
            return lookup_operation(config.DEFAULT_OPERATION).name
        except UnknownOperationError:
            logger.warning("Ignoring unknown default operation %r", config.DEFAULT_OPERATION)
            return "right"

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_operation_changed(self) -> None:
        """Adjust the value spinner to the selected operation's range."""
        label, low, high, enabled = operand_settings(self._operation_var.get())
        self._value_label.configure(text=label)
        self._value_spin.configure(from_=low, to=high)
        self._value_spin.configure(state=tk.NORMAL if enabled else tk.DISABLED)
        try:
            value = self._value_var.get()
        except tk.TclError:
            value = low
        if enabled and not low <= value <= high:
            self._value_var.set(min(max(value, low), high))

    def _on_input_changed(self) -> None:
        """Refresh the file info panel for the current input path."""
        text = self._input_var.get().strip()
        if not text:
            self._info_label.configure(text="No file selected")
            return
        path = Path(text)
        if not path.is_file():
            self._info_label.configure(text="Error: cannot open file")
            return
        self._info_label.configure(text=describe_file(path))

    def _browse_input(self) -> None:
        path = filedialog.askopenfilename(title="Open WAV File", filetypes=_WAV_FILETYPES)
        if not path:
            return
        self._input_var.set(path)
        if not self._output_var.get().strip():
            suggested = resolve_output_path(Path(path), self._operation_var.get())
            self._output_var.set(str(suggested))

    def _browse_output(self) -> None:
        # asksaveasfilename confirms overwrites itself
        path = filedialog.asksaveasfilename(
            title="Save WAV File",
            filetypes=_WAV_FILETYPES,
            defaultextension=".wav",
        )
        if path:
            self._output_var.set(path)

    # ------------------------------------------------------------------
    # Processing control
    # ------------------------------------------------------------------

    def _start_processing(self) -> None:
        """Validate the form and start the worker thread."""
        if self._worker_thread is not None and self._worker_thread.is_alive():
            return

        input_text = self._input_var.get().strip()
        output_text = self._output_var.get().strip()
        if not input_text or not output_text:
            self._status_label.configure(text="Error: please select input and output files")
            return

        try:
            value = int(self._value_var.get())
        except (tk.TclError, ValueError):
            self._status_label.configure(text="Error: value must be a whole number")
            return
        operation = make_operation(self._operation_var.get(), value)

        # A previous worker may have posted after its terminal message
        stale = drain_messages(self._messages)
        if stale:
            logger.debug("Dropped %d stale worker messages", stale)

        self._output_path = Path(output_text)
        self._cancel_event.clear()
        self._set_processing_state()

        self._worker_thread = threading.Thread(
            target=self._run_worker,
            args=(Path(input_text), self._output_path, operation),
            daemon=True,
        )
        self._worker_thread.start()
        self._root.after(_POLL_MS, self._poll_messages)

    def _run_worker(self, input_path: Path, output_path: Path, operation: OperationSpec) -> None:
        """Background thread body.

        NEVER touch tkinter widgets here; everything goes through the
        queue. Errors are delivered by the reporter's finished() call.
        """
        reporter = QueueReporter(self._messages)
        try:
            process_wav_file(
                input_path,
                output_path,
                operation,
                reporter=reporter,
                cancel_event=self._cancel_event,
            )
        except WavBitwiseError:
            logger.debug("Worker finished with an error", exc_info=True)
        except Exception as e:
            logger.exception("Unexpected failure while processing %s", input_path)
            self._messages.put((ERROR_MSG, e))

    def _cancel_processing(self) -> None:
        self._cancel_event.set()
        self._cancel_btn.configure(state=tk.DISABLED)
        self._status_label.configure(text="Cancelling...")

    def _set_processing_state(self) -> None:
        self._process_btn.configure(state=tk.DISABLED)
        self._input_btn.configure(state=tk.DISABLED)
        self._output_btn.configure(state=tk.DISABLED)
        self._cancel_btn.configure(state=tk.NORMAL)
        self._progress_var.set(0.0)
        self._progress_text.configure(text="Starting...")
        self._status_label.configure(text="Processing...")

    def _set_idle_state(self) -> None:
        self._process_btn.configure(state=tk.NORMAL)
        self._input_btn.configure(state=tk.NORMAL)
        self._output_btn.configure(state=tk.NORMAL)
        self._cancel_btn.configure(state=tk.DISABLED)

    # ------------------------------------------------------------------
    # Message handling (main thread)
    # ------------------------------------------------------------------

    def _poll_messages(self) -> None:
        """Drain the worker queue and update widgets."""
        try:
            while True:
                msg_type, payload = self._messages.get_nowait()
                if msg_type == PROGRESS_MSG:
                    processed, total = payload
                    pct = percent(processed, total)
                    self._progress_var.set(pct)
                    self._progress_text.configure(text="{:.1f}%".format(pct))
                elif msg_type == DONE_MSG:
                    self._progress_var.set(100.0)
                    self._progress_text.configure(text="100.0%")
                    self._status_label.configure(
                        text="Done! Result saved to {}".format(self._output_path)
                    )
                    self._set_idle_state()
                    return
                elif msg_type == ERROR_MSG:
                    self._show_error(payload)
                    self._set_idle_state()
                    return
        except queue.Empty:
            pass

        self._root.after(_POLL_MS, self._poll_messages)

    def _show_error(self, error: Exception) -> None:
        text = "Error: {}".format(error)
        self._status_label.configure(text=text)
        self._progress_text.configure(text="Failed")
        partial = isinstance(error, WavBitwiseError) and error.kind in PARTIAL_OUTPUT_KINDS
        if partial and self._output_path is not None and self._output_path.exists():
            text += "\n\nA partial output file was left at:\n{}".format(self._output_path)
        messagebox.showerror("Processing Error", text)


def main() -> None:
    """Launch the GUI."""
    config.configure_logging()
    root = tk.Tk()
    BitwiseApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
