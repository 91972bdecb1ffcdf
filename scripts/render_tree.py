"""Render a JSON document tree into a .docx file.

Run (after `pip install -e .`):  python scripts/render_tree.py path/to/tree.json [output-dir]

Relative document labels in the tree are resolved against output-dir
(default: the OUTPUT_DIR setting).
"""

import sys
from pathlib import Path

from docdecl.core.emitter import DocumentEmitter
from docdecl.core.emitter.docx_backend import DocxBackend
from docdecl.core.tree_loader import load_tree
from docdecl.main import _setup_logging


def render_tree(tree_path: Path, output_dir: Path | None = None) -> None:
    tree = load_tree(tree_path)
    emitter = DocumentEmitter(DocxBackend(), output_dir=output_dir)
    document = emitter.emit(tree)
    print(f"Rendered {tree_path} -> {document.name or '(unsaved)'}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    _setup_logging()
    out = Path(sys.argv[2]) if len(sys.argv) > 2 else None
    render_tree(Path(sys.argv[1]), out)
