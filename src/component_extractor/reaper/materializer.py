"""Write the dependency set into the output tree, pruning source modules."""
import logging
import shutil
from pathlib import Path
from typing import Optional

from ..analyzer.graph_builder import DependencyGraph
from ..analyzer.parser import is_source_file
from .manifest import ExtractionLedger
from .tree_shaker import ShakeResult, TreeShaker

logger = logging.getLogger(__name__)


class FileMaterializer:
    """Copies every file of a DependencyGraph below an output directory.

    Source modules are written in their pruned form, everything else
    (stylesheets, images, JSON) byte-for-byte. A file that cannot be read
    or written is logged and skipped; the rest of the run continues.
    """

    def __init__(self, project_root: str | Path, shaker: Optional[TreeShaker] = None,
                 ledger: Optional[ExtractionLedger] = None):
        self.project_root = Path(project_root).resolve()
        self.shaker = shaker or TreeShaker()
        self.ledger = ledger if ledger is not None else ExtractionLedger()

    def materialize(self, graph: DependencyGraph, output_root: str | Path) -> ExtractionLedger:
        """Write all files of `graph` below `output_root`.

        Returns:
            The ledger with one record per file actually written
        """
        output_root = Path(output_root)

        for path in graph.files:
            try:
                self._materialize_file(path, graph, output_root)
            except OSError as e:
                logger.warning("Could not copy %s: %s", path, e)

        return self.ledger

    def _materialize_file(self, path: str, graph: DependencyGraph, output_root: Path):
        source_path = self.project_root / path
        target_path = output_root / path

        # An unreadable file must not leave empty directories behind
        raw = source_path.read_bytes()
        target_path.parent.mkdir(parents=True, exist_ok=True)

        if not is_source_file(path):
            target_path.write_bytes(raw)
            shutil.copystat(source_path, target_path)
            self.ledger.record(path, ExtractionLedger.calculate_file_hash(target_path))
            logger.info("Copied %s", path)
            return

        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("%s is not UTF-8; copying without pruning", path)
            result = None
        else:
            result = self.shaker.shake_module(path, content, graph)

        if result is None:
            target_path.write_bytes(raw)
            result = ShakeResult(content="", skipped_reason="not UTF-8")
        else:
            target_path.write_text(result.content, encoding="utf-8", newline="")

        self.ledger.record(
            path,
            ExtractionLedger.calculate_file_hash(target_path),
            pruned=result.pruned,
            removed=result.removed,
        )
        if result.pruned:
            logger.info("Pruned %s (removed: %s)", path, ", ".join(result.removed))
        else:
            logger.info("Copied %s (%s)", path, result.skipped_reason or "fully reachable")
