"""Stream expressions, one per line, from a text file or from the first text member of an archive."""
from contextlib import contextmanager
import io
from pathlib import Path
import tarfile
import tempfile
from typing import BinaryIO, Callable, ContextManager, Dict, Iterator, List
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, Field, FilePath


@contextmanager
def _open_plain(path: Path) -> Iterator[BinaryIO]:
    with path.open("rb") as stream:
        yield stream


@contextmanager
def _open_zip_member(path: Path) -> Iterator[BinaryIO]:
    with zipfile.ZipFile(path) as zf:
        names = [info.filename for info in zf.infolist() if not info.is_dir() and info.filename.endswith(".txt")]
        if not names:
            raise ValueError(f"No .txt member in {path.name}")
        with zf.open(names[0]) as stream:
            yield stream


@contextmanager
def _open_tar_member(path: Path) -> Iterator[BinaryIO]:
    with tarfile.open(path, "r:xz") as tf:
        member = next((m for m in tf if m.isfile() and m.name.endswith(".txt")), None)
        if member is None:
            raise ValueError(f"No .txt member in {path.name}")
        with tf.extractfile(member) as stream:
            yield stream


@contextmanager
def _open_7z_member(path: Path) -> Iterator[BinaryIO]:
    # 7z blocks are decompressed as a whole, the member goes through a scratch directory
    with py7zr.SevenZipFile(path, mode="r") as archive:
        names = [info.filename for info in archive.list() if not info.is_directory and info.filename.endswith(".txt")]
        if not names:
            raise ValueError(f"No .txt member in {path.name}")
        with tempfile.TemporaryDirectory() as scratch:
            archive.extract(path=scratch, targets=[names[0]])
            with (Path(scratch) / names[0]).open("rb") as stream:
                yield stream


# Input format (last suffix, or ".tar.xz") -> opener of the binary stream holding the expressions
OPENERS: Dict[str, Callable[[Path], ContextManager[BinaryIO]]] = {
    ".txt": _open_plain,
    ".zip": _open_zip_member,
    ".tar.xz": _open_tar_member,
    ".7z": _open_7z_member,
}


def input_format(path: Path) -> str:
    """Return the key of OPENERS describing a path, e.g. ``.tar.xz`` for ``ops.tar.xz``."""
    if path.suffixes[-2:] == [".tar", ".xz"]:
        return ".tar.xz"
    return path.suffix


class ExpressionReader(BaseModel):
    """
    Read infix expressions line by line.

    Supported inputs: .txt files, and .zip, .tar.xz or .7z archives whose first
    .txt member holds the expressions. Members are decoded while they are read,
    nothing is unpacked on disk except for .7z.

    Blank lines and lines starting with the comment prefix are skipped.
    """

    model_config = ConfigDict(frozen=True)

    encoding: str = Field(default="utf-8", description="Text encoding of the expressions")
    comment_prefix: str = Field(default="#", min_length=1, description="Prefix of ignored lines")

    def iter_expressions(self, input_file: FilePath) -> Iterator[str]:
        """
        Yield the expressions of a file as they are read.

        :param FilePath input_file: Path to the text file or archive

        :return: Iterator over stripped, non-empty, non-comment lines
        :raises ValueError: If the format is unsupported or the archive has no .txt member
        """
        path = Path(input_file)
        opener = OPENERS.get(input_format(path))
        if opener is None:
            raise ValueError(f"Unsupported input format: {input_format(path) or path.name}")

        with opener(path) as binary, io.TextIOWrapper(binary, encoding=self.encoding) as text:
            for line in text:
                expression = line.strip()
                if expression and not expression.startswith(self.comment_prefix):
                    yield expression

    def read(self, input_file: FilePath) -> List[str]:
        """
        Return all the expressions of a file.

        :param FilePath input_file: Path to the text file or archive

        :return: Stripped, non-empty expressions
        :rtype: List[str]
        :raises ValueError: If the format is unsupported or the archive has no .txt member
        """
        return list(self.iter_expressions(input_file))
