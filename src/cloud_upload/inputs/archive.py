"""Zip packaging for workspaces, app bundles and mapping folders."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from cloud_upload.shared.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACES = (".maestro", ".mobiledev")
WORKSPACE_ARCHIVE = "workspace.zip"


def zip_folder(input_dir: str | Path, output_archive: str | Path, subdirectory: str | None = None) -> str:
    """Zip the contents of *input_dir*, optionally nested under *subdirectory*.

    Returns:
        Path of the written archive.

    Raises:
        ValidationError: If the folder cannot be read or the archive cannot be written.
    """
    root = Path(input_dir)
    try:
        with zipfile.ZipFile(output_archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in sorted(root.rglob("*")):
                if not path.is_file():
                    continue
                arcname = path.relative_to(root)
                if subdirectory:
                    arcname = Path(subdirectory) / arcname
                zf.write(path, arcname.as_posix())
    except OSError as exc:
        raise ValidationError(f"Failed to zip {root}: {exc}") from exc

    logger.info("zipped %s -> %s", root, output_archive)
    return str(output_archive)


def zip_if_folder(input_path: str | Path, output_dir: str | Path = ".") -> str:
    """Zip a directory into ``<output_dir>/<name>.zip``; return files unchanged.

    The directory itself is kept as the top-level entry, so an ``.app``
    bundle still carries its ``Info.plist`` under ``<name>/``.
    """
    path = Path(input_path)
    if not path.is_dir():
        return str(path)
    return zip_folder(path, Path(output_dir) / f"{path.name}.zip", subdirectory=path.name)


def create_workspace_zip(workspace_folder: str | None, output_dir: str | Path = ".", cwd: str | Path = ".") -> str:
    """Resolve the test workspace folder and zip it.

    Without an explicit folder, ``.maestro`` and then ``.mobiledev`` are tried.

    Raises:
        ValidationError: If the folder does not exist.
    """
    base = Path(cwd)
    if workspace_folder:
        folder = base / workspace_folder
        if not folder.exists():
            raise ValidationError(f"Workspace directory does not exist: {workspace_folder}")
    else:
        for candidate in DEFAULT_WORKSPACES:
            if (base / candidate).exists():
                folder = base / candidate
                logger.info("packaging %s folder", candidate)
                break
        else:
            listing = sorted(f"{p.name}/" if p.is_dir() else p.name for p in base.iterdir())
            logger.info("directory contents: %s", ", ".join(listing))
            raise ValidationError(f"Default workspace directory does not exist: {DEFAULT_WORKSPACES[0]}/")

    return zip_folder(folder, Path(output_dir) / WORKSPACE_ARCHIVE)
