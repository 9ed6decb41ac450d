from __future__ import annotations

import shutil
import zipfile
from pathlib import Path, PurePosixPath

from .errors import ExtractError, FilesystemError, NotFoundError
from .http_client import HttpClient

# Dependency caches are never part of the documentation tree.
EXCLUDE_DIR_NAMES = {"node_modules"}


def reset_dir(path: Path) -> None:
    """Replace a working directory to avoid stale content."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path, ignore_errors=True)
    else:
        path.unlink(missing_ok=True)


def _ignore_dependency_dirs(directory: str, names: list[str]) -> set[str]:
    return {
        name
        for name in names
        if name in EXCLUDE_DIR_NAMES and (Path(directory) / name).is_dir()
    }


def copy_local_tree(src: Path, dest: Path) -> Path:
    if not src.is_dir():
        raise NotFoundError(f"Local source directory does not exist: {src}")
    try:
        if dest.exists():
            shutil.rmtree(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(src, dest, ignore=_ignore_dependency_dirs)
    except OSError as e:
        raise FilesystemError(f"Failed to copy {src} to {dest}: {e}") from e
    return dest


def _strip_root(names: list[str]) -> str | None:
    """Return the single top-level folder shared by every member, if any."""
    roots = {PurePosixPath(name).parts[0] for name in names if name.strip("/")}
    if len(roots) != 1:
        return None
    root = roots.pop()
    if any(name.rstrip("/") == root and not name.endswith("/") for name in names):
        return None
    return root


def extract_archive(zip_path: Path, destination: Path) -> Path:
    """Extract ``zip_path`` into ``destination``, dropping a shared top folder.

    GitHub branch archives wrap the tree in ``<repo>-<branch>/``; stripping it
    makes the working directory the repository root.
    """

    try:
        with zipfile.ZipFile(zip_path) as archive:
            reset_dir(destination)
            dest_root = destination.resolve()
            root = _strip_root(archive.namelist())

            for info in archive.infolist():
                parts = PurePosixPath(info.filename).parts
                if root is not None:
                    parts = parts[1:]
                if not parts:
                    continue

                target = (dest_root.joinpath(*parts)).resolve()
                if dest_root not in target.parents:
                    raise ExtractError(
                        f"Unsafe path in archive {zip_path}: {info.filename}"
                    )

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, target.open("wb") as dst:
                    shutil.copyfileobj(src, dst)
    except zipfile.BadZipFile as e:
        raise ExtractError(f"Not a valid zip archive: {zip_path}: {e}") from e
    except OSError as e:
        raise ExtractError(f"Failed to extract {zip_path}: {e}") from e
    return destination


def fetch_remote_tree(
    http: HttpClient, url: str, *, archive_path: Path, destination: Path
) -> Path:
    http.download(url, archive_path)
    return extract_archive(archive_path, destination)
