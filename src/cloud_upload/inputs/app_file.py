"""App binary and mapping file validation."""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path

from cloud_upload.inputs.archive import zip_if_folder
from cloud_upload.shared.enums import AppFileType
from cloud_upload.shared.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppFile:
    """A validated app binary ready for upload."""

    type: AppFileType
    path: str


def resolve_path(path: str, workspace: str = "") -> Path:
    """Resolve *path* against the workflow workspace (or the current directory)."""
    return (Path(workspace or ".") / path).resolve()


def _existing(path: str, workspace: str) -> Path:
    absolute = resolve_path(path, workspace)
    if not absolute.exists():
        raise ValidationError(f"File does not exist: {absolute}")
    return absolute


def sniff_app_file_type(path: str | Path) -> AppFileType | None:
    """Identify an APK or iOS bundle archive by its entries."""
    try:
        with zipfile.ZipFile(path) as zf:
            names = zf.namelist()
    except (zipfile.BadZipFile, OSError) as exc:
        logger.debug("cannot read %s as zip: %s", path, exc)
        return None

    if "AndroidManifest.xml" in names:
        return AppFileType.ANDROID_APK
    if any("Info.plist" in name for name in names):
        return AppFileType.IOS_BUNDLE
    return None


def validate_app_file(path: str, workspace: str = "", output_dir: str | Path = ".") -> AppFile:
    """Check the app binary exists and is a supported type; zip it first if it is a bundle folder.

    Raises:
        ValidationError: If the file is missing or of an unsupported format.
    """
    archive = Path(zip_if_folder(_existing(path, workspace), output_dir))
    app_type = sniff_app_file_type(archive)
    if app_type is None:
        raise ValidationError(f"Unsupported file format: {path}")
    return AppFile(type=app_type, path=str(archive))


def validate_mapping_file(path: str, workspace: str = "", output_dir: str | Path = ".") -> str:
    """Return the mapping file path, zipped if it is a folder.

    Raises:
        ValidationError: If the path does not exist.
    """
    return zip_if_folder(_existing(path, workspace), output_dir)
