"""Package entry point for ``python -m wav_bitwise``.

WHY: Users run the tool as ``python -m wav_bitwise in.wav out.wav -r 3``
for CLI mode, or ``python -m wav_bitwise --gui`` for the desktop GUI.

HOW: Checks sys.argv for the ``--gui`` flag. If present, launches the
Tkinter GUI. Otherwise, delegates to the CLI's main() function.

RULES:
- ``--gui`` flag launches the Tkinter GUI
- Without ``--gui``, falls through to the CLI
- tkinter is imported only in GUI mode, so the CLI works without Tk
"""

import sys

if __name__ == "__main__":
    if "--gui" in sys.argv:
        from wav_bitwise.gui import main as gui_main
        gui_main()
    else:
        from wav_bitwise.cli import main
        main()
