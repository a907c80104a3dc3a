import os
import zipfile
from logging import getLogger
from typing import List

from ..common.errors import ArchiveError

log = getLogger(__name__)

CLASS_SUFFIX = '.class'
JAR_SUFFIX = '.jar'
SOURCES_JAR_SUFFIX = '-sources.jar'


def list_classes(jar: str) -> List[str]:
    """Lists the fully qualified names of the classes in a jar file"""
    try:
        with zipfile.ZipFile(jar) as archive:
            names = archive.namelist()
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(f'Cannot read jar file {jar}: {e}') from e

    # Entries in jars are / separated
    return [
        name[:-len(CLASS_SUFFIX)].replace('/', '.')
        for name in names
        if name.endswith(CLASS_SUFFIX)
    ]


def one_jar_from(directory: str) -> str:
    """Returns the path of the only binary jar file in the directory, ignoring the sources classifier"""
    try:
        names = sorted(os.listdir(directory))
    except OSError as e:
        raise ArchiveError(f'Cannot list directory {directory}: {e}') from e

    jars = [
        name for name in names
        if name.endswith(JAR_SUFFIX) and not name.endswith(SOURCES_JAR_SUFFIX)
    ]
    if len(jars) != 1:
        raise ArchiveError(f'Want exactly one jar file in {directory} but got {jars!r}')

    return os.path.join(directory, jars[0])
