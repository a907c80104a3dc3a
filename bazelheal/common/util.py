import io
import os
from enum import Enum
from logging import Logger, INFO, getLogger, StreamHandler, Formatter
from typing import Iterable, List, TextIO


def split_to_lines_and_clean(text: str) -> List[str]:
    return [line for line in (line.rstrip() for line in text.splitlines()) if line]


def decoding_stream(stream: TextIO, encoding='utf-8') -> TextIO:
    """Re-decodes a text stream leniently, build logs may contain file names in any encoding"""
    buffer = getattr(stream, 'buffer', None)
    if buffer is None:
        return stream
    return io.TextIOWrapper(buffer, encoding=encoding, errors='replace')


def read_lines(stream: TextIO) -> Iterable[str]:
    for line in stream:
        yield line.rstrip('\r\n')


def iter_tree(basedir: str) -> Iterable[str]:
    for dirpath, dirnames, filenames in os.walk(basedir):
        dirnames.sort()
        for filename in sorted(filenames):
            yield os.path.join(dirpath, filename)


def to_slashes(path: str) -> str:
    return path.replace(os.path.sep, '/')


class SimpleEnum(str, Enum):

    def __str__(self):
        return f"{self.name}"

    def __repr__(self):
        return f"{self.__class__.__name__}.{self.name}"


def init_logger(loglevel=INFO) -> Logger:
    logger = getLogger()
    logger.setLevel(loglevel)

    handler = StreamHandler()
    handler.setLevel(loglevel)

    formatter = Formatter('%(asctime)s %(name)s [%(levelname)s] %(message)s')
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    return logger
