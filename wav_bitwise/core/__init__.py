"""Container parsing, validation, and streaming transform.

WHY: The core package is the only part of the tool with real invariants:
container well-formedness, byte-exact header preservation, bounded
memory use, and partial-I/O detection. Front-ends stay thin on top of it.

HOW: operations.py is the catalog of byte transforms, riff.py walks the
container, validator.py admits or refuses a run, pipeline.py streams the
payload, processor.py wires them together for the front-ends.

RULES:
- No printing, no widgets; results are return values, errors are raised
- Format-agnostic front-ends: no CLI or GUI logic here
"""
