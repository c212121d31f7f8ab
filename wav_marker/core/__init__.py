"""Container scanning, label parsing, marker synthesis, and assembly.

WHY: The core package is the whole conversion, free of any CLI concerns,
so it can be driven from tests or another application.

HOW: ir.py defines the data structures; scanner.py, labels.py,
markers.py and assembler.py are the four pipeline stages; reader.py
reads markers back; endian.py and errors.py are shared by all of them.
"""
