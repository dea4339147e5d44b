"""Tests for app binary validation and archive packaging."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from cloud_upload.inputs.app_file import (
    resolve_path,
    sniff_app_file_type,
    validate_app_file,
    validate_mapping_file,
)
from cloud_upload.inputs.archive import create_workspace_zip, zip_folder, zip_if_folder
from cloud_upload.shared.enums import AppFileType
from cloud_upload.shared.exceptions import ValidationError


def _zip(path: Path, *names: str) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name in names:
            zf.writestr(name, "x")
    return path


class TestSniffAppFileType:
    def test_apk(self, tmp_path: Path) -> None:
        apk = _zip(tmp_path / "app.apk", "AndroidManifest.xml", "classes.dex")
        assert sniff_app_file_type(apk) is AppFileType.ANDROID_APK

    def test_ios_bundle(self, tmp_path: Path) -> None:
        bundle = _zip(tmp_path / "App.zip", "App.app/Info.plist", "App.app/App")
        assert sniff_app_file_type(bundle) is AppFileType.IOS_BUNDLE

    def test_unknown_zip(self, tmp_path: Path) -> None:
        assert sniff_app_file_type(_zip(tmp_path / "x.zip", "readme.txt")) is None

    def test_not_a_zip(self, tmp_path: Path) -> None:
        path = tmp_path / "app.ipa"
        path.write_text("plain text")
        assert sniff_app_file_type(path) is None


class TestValidateAppFile:
    def test_resolves_against_workspace(self, tmp_path: Path) -> None:
        _zip(tmp_path / "app.apk", "AndroidManifest.xml")

        app = validate_app_file("app.apk", str(tmp_path), tmp_path)

        assert app.type is AppFileType.ANDROID_APK
        assert app.path == str(resolve_path("app.apk", str(tmp_path)))

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="File does not exist"):
            validate_app_file("missing.apk", str(tmp_path))

    def test_unsupported_format_raises(self, tmp_path: Path) -> None:
        (tmp_path / "app.bin").write_text("nope")
        with pytest.raises(ValidationError, match="Unsupported file format"):
            validate_app_file("app.bin", str(tmp_path))

    def test_bundle_folder_is_zipped(self, tmp_path: Path) -> None:
        bundle = tmp_path / "Sample.app"
        bundle.mkdir()
        (bundle / "Info.plist").write_text("<plist/>")
        out = tmp_path / "out"
        out.mkdir()

        app = validate_app_file("Sample.app", str(tmp_path), out)

        assert app.type is AppFileType.IOS_BUNDLE
        assert Path(app.path) == out / "Sample.app.zip"
        with zipfile.ZipFile(app.path) as zf:
            assert zf.namelist() == ["Sample.app/Info.plist"]

    def test_mapping_file(self, tmp_path: Path) -> None:
        (tmp_path / "mapping.txt").write_text("a -> b")
        assert validate_mapping_file("mapping.txt", str(tmp_path)) == str((tmp_path / "mapping.txt").resolve())

    def test_missing_mapping_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            validate_mapping_file("mapping.txt", str(tmp_path))


class TestArchive:
    def test_zip_folder_keeps_relative_paths(self, tmp_path: Path) -> None:
        src = tmp_path / "flows"
        (src / "sub").mkdir(parents=True)
        (src / "login.yaml").write_text("appId: x")
        (src / "sub" / "signup.yaml").write_text("appId: x")

        archive = zip_folder(src, tmp_path / "out.zip")

        with zipfile.ZipFile(archive) as zf:
            assert sorted(zf.namelist()) == ["login.yaml", "sub/signup.yaml"]

    def test_zip_folder_unwritable_target_raises(self, tmp_path: Path) -> None:
        src = tmp_path / "flows"
        src.mkdir()
        (src / "login.yaml").write_text("appId: x")

        with pytest.raises(ValidationError, match="Failed to zip"):
            zip_folder(src, tmp_path / "no-such-dir" / "out.zip")

    def test_zip_if_folder_passes_files_through(self, tmp_path: Path) -> None:
        path = tmp_path / "app.apk"
        path.write_text("x")
        assert zip_if_folder(path, tmp_path) == str(path)

    def test_workspace_default_maestro(self, tmp_path: Path) -> None:
        (tmp_path / ".maestro").mkdir()
        (tmp_path / ".maestro" / "flow.yaml").write_text("appId: x")
        out = tmp_path / "out"
        out.mkdir()

        archive = create_workspace_zip(None, out, cwd=tmp_path)

        assert archive == str(out / "workspace.zip")
        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["flow.yaml"]

    def test_workspace_falls_back_to_mobiledev(self, tmp_path: Path) -> None:
        (tmp_path / ".mobiledev").mkdir()
        (tmp_path / ".mobiledev" / "flow.yaml").write_text("appId: x")

        archive = create_workspace_zip("", tmp_path, cwd=tmp_path)

        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["flow.yaml"]

    def test_workspace_default_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Default workspace directory does not exist"):
            create_workspace_zip(None, tmp_path, cwd=tmp_path)

    def test_explicit_workspace_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Workspace directory does not exist: e2e"):
            create_workspace_zip("e2e", tmp_path, cwd=tmp_path)
