import logging
import logging.handlers
from pathlib import Path

from docdecl.config import settings
from docdecl.core.emitter import DocumentEmitter
from docdecl.core.emitter.backend import DocumentBackend, DocumentHandle
from docdecl.core.nodes import Node
from docdecl.core.tree_loader import load_tree


def _setup_logging() -> None:
    """Configure root logger with console + rotating file handlers.

    Guarded against duplicate handlers when imported more than once.
    """
    root = logging.getLogger()

    if getattr(root, "_docdecl_configured", False):
        return
    root._docdecl_configured = True  # type: ignore[attr-defined]

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root.setLevel(level)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    # File handler: rotate at 5 MB, keep 3 backups
    log_path = Path(settings.LOG_FILE)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_h = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8",
    )
    file_h.setLevel(level)
    file_h.setFormatter(fmt)
    root.addHandler(file_h)


logger = logging.getLogger(__name__)


def build_document(tree: Node, backend: DocumentBackend | None = None) -> DocumentHandle:
    """Emit *tree* through *backend* (python-docx when omitted)."""
    if backend is None:
        from docdecl.core.emitter.docx_backend import DocxBackend
        backend = DocxBackend()
    emitter = DocumentEmitter(backend)
    return emitter.emit(tree)


def build_document_from_file(path: str | Path, backend: DocumentBackend | None = None) -> DocumentHandle:
    """Load a JSON tree from *path* and emit it."""
    tree = load_tree(path)
    logger.info("Building document from %s", path)
    return build_document(tree, backend)
