"""Fragment discovery for inline partials and shared blocks."""

from __future__ import annotations

from pathlib import Path

from doc_assembly.errors import SourceReadError
from doc_assembly.logging import get_logger
from doc_assembly.models import Fragment, FragmentKind

logger = get_logger(__name__)

DEFAULT_FRAGMENT_EXTENSION = ".mustache"


def discover_fragments(
    directory: Path | None,
    kind: FragmentKind,
    extension: str = DEFAULT_FRAGMENT_EXTENSION,
) -> list[Fragment]:
    """Load every fragment file in ``directory``.

    A missing directory means zero fragments: placeholders referring to them
    stay unresolved, which is not an error. Files are enumerated by name.
    """
    if directory is None or not Path(directory).is_dir():
        logger.debug("fragments.missing_dir", directory=str(directory), kind=kind.value)
        return []

    fragments = []
    for path in sorted(Path(directory).iterdir()):
        if not path.is_file() or path.suffix != extension:
            continue
        try:
            body = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Cannot read fragment {path}", cause=e).with_context(
                path=str(path), stage="discover"
            ) from e
        fragments.append(Fragment(name=path.stem, kind=kind, body=body))

    logger.debug("fragments.discovered", directory=str(directory), kind=kind.value, count=len(fragments))
    return fragments
